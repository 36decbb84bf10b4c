"""
Cookbook Services — Resource Router Builder
=============================================

What:  Binds the five CRUD routes of a resource to its handlers.
How:   ``build_resource_router(definition, authenticator)`` returns an
       APIRouter mounted at ``/api/v2/<path>``. Every route depends on the
       authenticator's role check; handlers are assembled per request
       (repository → service → handlers) around the request's session.

Routes:
    GET    /api/v2/<path>         list live rows
    GET    /api/v2/<path>/{id}    fetch one
    POST   /api/v2/<path>         create
    PUT    /api/v2/<path>/{id}    partial update
    DELETE /api/v2/<path>/{id}    soft delete
"""

from typing import Callable, List

from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from cookbook.auth import ADMINISTRATOR_ROLE, OidcAuthenticator
from cookbook.database import get_db_session
from cookbook.handlers import ResourceHandlers
from cookbook.resources import ResourceDefinition
from cookbook.schemas.common import ErrorResponse
from cookbook.services import ResourceService

API_PREFIX = "/api/v2"

_AUTH_ERRORS = {
    401: {"description": "Missing or invalid bearer token", "model": ErrorResponse},
    403: {"description": "Caller lacks the required role", "model": ErrorResponse},
    500: {"description": "Server error", "model": ErrorResponse},
}


def handlers_provider(definition: ResourceDefinition) -> Callable[..., ResourceHandlers]:
    """Dependency assembling the handler stack for one request."""

    def provide(db: AsyncSession = Depends(get_db_session)) -> ResourceHandlers:
        repository = definition.repository(db)
        service = ResourceService(repository, definition)
        return ResourceHandlers(service, definition)

    return provide


def build_resource_router(
    definition: ResourceDefinition,
    authenticator: OidcAuthenticator,
    role: str = ADMINISTRATOR_ROLE,
) -> APIRouter:
    name = definition.name
    plural = definition.plural
    router = APIRouter(
        prefix=f"{API_PREFIX}/{definition.path}",
        tags=[plural.capitalize()],
        dependencies=[Depends(authenticator.require_role(role))],
        responses=_AUTH_ERRORS,
    )
    get_handlers = handlers_provider(definition)
    not_found = {404: {"description": f"{name.capitalize()} not found", "model": ErrorResponse}}
    bad_request = {400: {"description": "Malformed ID or body", "model": ErrorResponse}}

    @router.get(
        "",
        response_model=List[definition.dto],
        responses={404: {"description": f"No {plural} stored", "model": ErrorResponse}},
        summary=f"List all {plural}",
    )
    async def list_resources(
        handlers: ResourceHandlers = Depends(get_handlers),
    ) -> Response:
        return await handlers.get_all()

    @router.get(
        "/{resource_id}",
        response_model=definition.dto,
        responses={**bad_request, **not_found},
        summary=f"Get a single {name} by ID",
    )
    async def get_resource(
        resource_id: str,
        handlers: ResourceHandlers = Depends(get_handlers),
    ) -> Response:
        return await handlers.get(resource_id)

    @router.post(
        "",
        status_code=201,
        response_model=definition.dto,
        responses=bad_request,
        summary=f"Create a {name}",
        openapi_extra={
            "requestBody": {
                "required": True,
                "content": {"application/json": {"schema": definition.dto.model_json_schema()}},
            }
        },
    )
    async def create_resource(
        request: Request,
        handlers: ResourceHandlers = Depends(get_handlers),
    ) -> Response:
        return await handlers.create(request)

    @router.put(
        "/{resource_id}",
        response_model=definition.dto,
        responses={**bad_request, **not_found},
        summary=f"Partially update a {name}",
        description="Fields that are absent or null keep their stored value.",
        openapi_extra={
            "requestBody": {
                "required": True,
                "content": {
                    "application/json": {"schema": definition.update_dto.model_json_schema()}
                },
            }
        },
    )
    async def update_resource(
        resource_id: str,
        request: Request,
        handlers: ResourceHandlers = Depends(get_handlers),
    ) -> Response:
        return await handlers.update(resource_id, request)

    @router.delete(
        "/{resource_id}",
        status_code=204,
        responses={**bad_request, **not_found},
        summary=f"Soft-delete a {name}",
    )
    async def delete_resource(
        resource_id: str,
        handlers: ResourceHandlers = Depends(get_handlers),
    ) -> Response:
        return await handlers.delete(resource_id)

    return router
