"""Provider directory API routes.

Reads need an authenticated caller; registration, edits and archival are
administrator operations.
"""

from fastapi import APIRouter, Depends, Query, Request

from pazproperty.api.auth.identity import get_caller_identity
from pazproperty.api.dependencies.declarations import get_provider_directory
from pazproperty.api.errors import to_http_exception
from pazproperty.api.models.provider import ProviderFieldsRequest, ProviderResponse
from pazproperty.application.services.access import (
    require_admin,
    require_authenticated,
)
from pazproperty.application.services.provider_directory import ProviderDirectory
from pazproperty.domain.exceptions import PazPropertyError
from pazproperty.domain.models.identity import CallerIdentity

router = APIRouter(prefix="/providers", tags=["providers"])


@router.get("", response_model=list[ProviderResponse])
async def list_providers(
    request: Request,
    active: bool = Query(default=True),
    directory: ProviderDirectory = Depends(get_provider_directory),
    caller: CallerIdentity = Depends(get_caller_identity),
) -> list[ProviderResponse]:
    """Active providers by default; ``active=false`` lists archived ones."""
    try:
        require_authenticated(caller, "list providers")
        providers = (
            await directory.list_active() if active else await directory.list_archived()
        )
    except PazPropertyError as exc:
        raise to_http_exception(exc, request) from None
    return [ProviderResponse.from_domain(p) for p in providers]


@router.post("", response_model=ProviderResponse, status_code=201)
async def create_provider(
    body: ProviderFieldsRequest,
    request: Request,
    directory: ProviderDirectory = Depends(get_provider_directory),
    caller: CallerIdentity = Depends(get_caller_identity),
) -> ProviderResponse:
    try:
        require_admin(caller, "register providers")
        provider = await directory.create(body.to_fields())
    except PazPropertyError as exc:
        raise to_http_exception(exc, request) from None
    return ProviderResponse.from_domain(provider)


@router.get("/{provider_id}", response_model=ProviderResponse)
async def get_provider(
    provider_id: str,
    request: Request,
    directory: ProviderDirectory = Depends(get_provider_directory),
    caller: CallerIdentity = Depends(get_caller_identity),
) -> ProviderResponse:
    try:
        require_authenticated(caller, "read providers")
        provider = await directory.get_by_id(provider_id)
    except PazPropertyError as exc:
        raise to_http_exception(exc, request) from None
    return ProviderResponse.from_domain(provider)


@router.patch("/{provider_id}", response_model=ProviderResponse)
async def update_provider(
    provider_id: str,
    body: ProviderFieldsRequest,
    request: Request,
    directory: ProviderDirectory = Depends(get_provider_directory),
    caller: CallerIdentity = Depends(get_caller_identity),
) -> ProviderResponse:
    try:
        require_admin(caller, "edit providers")
        provider = await directory.update(provider_id, body.to_fields())
    except PazPropertyError as exc:
        raise to_http_exception(exc, request) from None
    return ProviderResponse.from_domain(provider)


@router.post("/{provider_id}/archive", response_model=ProviderResponse)
async def archive_provider(
    provider_id: str,
    request: Request,
    directory: ProviderDirectory = Depends(get_provider_directory),
    caller: CallerIdentity = Depends(get_caller_identity),
) -> ProviderResponse:
    try:
        require_admin(caller, "archive providers")
        provider = await directory.archive(provider_id)
    except PazPropertyError as exc:
        raise to_http_exception(exc, request) from None
    return ProviderResponse.from_domain(provider)


@router.post("/{provider_id}/restore", response_model=ProviderResponse)
async def restore_provider(
    provider_id: str,
    request: Request,
    directory: ProviderDirectory = Depends(get_provider_directory),
    caller: CallerIdentity = Depends(get_caller_identity),
) -> ProviderResponse:
    try:
        require_admin(caller, "restore providers")
        provider = await directory.restore(provider_id)
    except PazPropertyError as exc:
        raise to_http_exception(exc, request) from None
    return ProviderResponse.from_domain(provider)
