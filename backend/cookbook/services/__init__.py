"""Domain service layer: validation, merge and error translation between handlers and repositories."""

from cookbook.services.resource_service import ResourceService

__all__ = ["ResourceService"]
