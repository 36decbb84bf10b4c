"""HTTP adapters: path/body parsing and outcome → status code mapping."""

from cookbook.handlers.resource_handlers import ResourceHandlers

__all__ = ["ResourceHandlers"]
