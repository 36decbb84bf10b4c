"""
Cookbook Services — Resource Handlers
=======================================

What:  The HTTP adapter between the router and the service layer. This is
       the only place where resource outcomes become status codes.
How:   Each operation:
           1. parses the path ID as a UUID (400 "invalid <resource> ID")
           2. binds the JSON body into the create/update DTO (400)
           3. on create, resolves the caller and records ownership
           4. calls the service
           5. maps the outcome

Outcome mapping:
    success                 200 (GET, PUT) / 201 (POST) / 204 (DELETE)
    NotFoundError           404 {"error": "<resource> not found"}
                                {"error": "no <plural> found"} for the list
    malformed ID / body     400 {"error": "..."}
    anything else           500 {"error": "<message>"}
"""

import logging
import uuid
from typing import Any, Optional

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ValidationError

from cookbook.auth import user_from_context
from cookbook.exceptions import BadRequestError, CookbookError, NotFoundError
from cookbook.resources import ResourceDefinition
from cookbook.services.resource_service import ResourceService

logger = logging.getLogger(__name__)

EXISTING_ID_MESSAGE = "existing id on new element is not allowed"

# Clients serialising an unset UUID send the nil UUID; it means "no id"
NIL_UUID = uuid.UUID(int=0)


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def describe_validation_error(exc: ValidationError) -> str:
    """Flatten pydantic errors into one line: ``name: String should have ...``."""
    parts = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()))
        parts.append(f"{location}: {error['msg']}" if location else error["msg"])
    return "; ".join(parts) or "unexpected JSON input"


class ResourceHandlers:
    """Handlers for one resource, bound to a per-request service."""

    def __init__(self, service: ResourceService, definition: ResourceDefinition):
        self.service = service
        self.definition = definition

    # ── Parsing ───────────────────────────────────────────────────────────

    def parse_id(self, raw_id: str) -> uuid.UUID:
        try:
            return uuid.UUID(raw_id)
        except (TypeError, ValueError) as e:
            raise BadRequestError(f"invalid {self.definition.name} ID", field="id") from e

    async def parse_body(self, request: Request, model: type[BaseModel]) -> Any:
        body = await request.body()
        try:
            return model.model_validate_json(body)
        except ValidationError as e:
            raise BadRequestError(describe_validation_error(e), field="body") from e

    # ── Outcome Mapping ───────────────────────────────────────────────────

    def failure(self, exc: CookbookError, collection: bool = False) -> JSONResponse:
        if isinstance(exc, NotFoundError):
            if collection:
                return error_response(404, f"no {self.definition.plural} found")
            return error_response(404, f"{self.definition.name} not found")
        if isinstance(exc, BadRequestError):
            return error_response(400, exc.message)
        logger.error(
            "%s request failed: %s | Context: %s",
            self.definition.name,
            exc.message,
            exc.context,
        )
        return error_response(500, exc.message)

    @staticmethod
    def success(status_code: int, payload: Optional[Any] = None) -> Response:
        if payload is None:
            return Response(status_code=status_code)
        if isinstance(payload, list):
            content = [item.model_dump(mode="json") for item in payload]
        else:
            content = payload.model_dump(mode="json")
        return JSONResponse(status_code=status_code, content=content)

    # ── Operations ────────────────────────────────────────────────────────

    async def get_all(self) -> Response:
        try:
            items = await self.service.find_all()
        except CookbookError as e:
            return self.failure(e, collection=True)
        return self.success(200, items)

    async def get(self, raw_id: str) -> Response:
        try:
            item = await self.service.find_single(self.parse_id(raw_id))
        except CookbookError as e:
            return self.failure(e)
        return self.success(200, item)

    async def create(self, request: Request) -> Response:
        try:
            dto = await self.parse_body(request, self.definition.dto)
            if dto.id == NIL_UUID:
                dto = dto.model_copy(update={"id": None})
            if dto.id is not None:
                raise BadRequestError(EXISTING_ID_MESSAGE, field="id")
            user = user_from_context(request)
            if self.definition.owner_field:
                dto = dto.model_copy(update={self.definition.owner_field: user.user_id})
            created = await self.service.create(dto)
        except CookbookError as e:
            return self.failure(e)
        return self.success(201, created)

    async def update(self, raw_id: str, request: Request) -> Response:
        try:
            resource_id = self.parse_id(raw_id)
            dto = await self.parse_body(request, self.definition.update_dto)
            dto = dto.model_copy(update={"id": resource_id})
            updated = await self.service.update(dto, resource_id)
        except CookbookError as e:
            return self.failure(e)
        return self.success(200, updated)

    async def delete(self, raw_id: str) -> Response:
        try:
            await self.service.delete(self.parse_id(raw_id))
        except CookbookError as e:
            return self.failure(e)
        return self.success(204)
