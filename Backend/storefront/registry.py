"""
Shop Registry API.

Diagnostic endpoints under /_registry/* for checking how a host resolves,
which routes its shop compiled, and what URL a destination produces.
"""

from typing import Any, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from .core.request_context import UNCONSTRUCTABLE_LINK
from .services import StorefrontServices, get_services
from .tenancy import ShopNotFound


router = APIRouter(prefix="/_registry", tags=["registry"])


# ────────────────────────────────────────────────────────────────
# Response Models
# ────────────────────────────────────────────────────────────────

class ShopResolveResponse(BaseModel):
    """Response for shop resolution by host."""

    host: str
    found: bool
    shop_id: int = 0
    text_id: Optional[str] = None
    name: str = ""
    domain: Optional[str] = None

    class Config:
        json_schema_extra = {
            "example": {
                "host": "www.florea.cz",
                "found": True,
                "shop_id": 1,
                "text_id": "florea",
                "name": "Florea",
                "domain": "www.florea.cz",
            }
        }


class RouteTableResponse(BaseModel):
    """Compiled route table of one shop, in evaluation order."""

    text_id: str
    default_language: str
    supported_languages: list[str]
    routes: list[dict[str, Any]]


class LinkResponse(BaseModel):
    url: str
    constructable: bool


# ────────────────────────────────────────────────────────────────
# Endpoints
# ────────────────────────────────────────────────────────────────

@router.get("/resolve", response_model=ShopResolveResponse, summary="Resolve shop by host")
async def resolve_shop(
    host: str = Query(..., min_length=1, max_length=255),
    services: StorefrontServices = Depends(get_services),
) -> ShopResolveResponse:
    """Returns found=False instead of 404 for unmapped hosts or missing shop rows."""
    try:
        shop = await services.resolver.resolve_from_host(host)
    except ShopNotFound:
        return ShopResolveResponse(host=host, found=False)

    return ShopResolveResponse(
        host=host,
        found=True,
        shop_id=shop.shop_id,
        text_id=shop.text_id,
        name=shop.name,
        domain=shop.domain,
    )


@router.get("/routes", response_model=RouteTableResponse, summary="List compiled routes")
async def list_routes(
    host: str = Query(..., min_length=1, max_length=255),
    services: StorefrontServices = Depends(get_services),
) -> RouteTableResponse:
    shop = await services.resolver.resolve_from_host(host)
    shop_router = services.routers.get_router(shop.text_id)
    return RouteTableResponse(
        text_id=shop.text_id,
        default_language=shop_router.get_default_language(),
        supported_languages=shop_router.get_supported_languages(),
        routes=shop_router.describe(),
    )


@router.get("/link", response_model=LinkResponse, summary="Construct a URL")
async def construct_link(
    host: str = Query(..., min_length=1, max_length=255),
    handler: str = Query(..., min_length=1),
    action: str = Query("default", min_length=1),
    lang: Optional[str] = Query(None),
    services: StorefrontServices = Depends(get_services),
) -> LinkResponse:
    shop = await services.resolver.resolve_from_host(host)
    shop_router = services.routers.get_router(shop.text_id)
    url = shop_router.construct(handler, action, lang or shop_router.get_default_language())
    if url is None:
        return LinkResponse(url=UNCONSTRUCTABLE_LINK, constructable=False)
    return LinkResponse(url=url, constructable=True)
