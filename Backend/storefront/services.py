"""
Application service wiring.

Builds the long-lived collaborators once per process: layered config,
domain map, shop resolver, router registry and handler registry. They are
stored on ``app.state.services`` and reached through ``get_services``.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from .core.config import Settings
from .core.layered_config import ConfigError, LayeredConfig
from .dispatch import HandlerRegistry
from .routing import RouteTableError, RouteTableLoader, RouterRegistry, SupportedLanguages
from .tenancy import DomainMap, MemoCache, ShopRepository, ShopResolver


logger = logging.getLogger(__name__)


@dataclass
class StorefrontServices:
    config: LayeredConfig
    domain_map: DomainMap
    resolver: ShopResolver
    routers: RouterRegistry
    handlers: HandlerRegistry

    def validate_route_tables(self) -> List[str]:
        """
        Load and compile the route table of every mapped shop.

        Returns one message per shop whose table is missing or broken.
        """
        problems = []
        for text_id in self.domain_map.text_ids():
            try:
                self.routers.get_router(text_id)
            except (RouteTableError, ConfigError) as e:
                problems.append(f"{text_id}: {e}")
        return problems


def build_services(
    settings: Settings,
    session_factory: Optional[async_sessionmaker[AsyncSession]] = None,
    handlers: Optional[HandlerRegistry] = None,
) -> StorefrontServices:
    if session_factory is None:
        from .core.db import AsyncSessionLocal
        session_factory = AsyncSessionLocal
    if handlers is None:
        from .handlers import handlers

    config = LayeredConfig(settings.config_path)
    domain_map = DomainMap.from_config(config)
    resolver = ShopResolver(domain_map, ShopRepository(session_factory), MemoCache("tenants"))
    routers = RouterRegistry(
        RouteTableLoader(settings.routes_path),
        lambda text_id: SupportedLanguages.from_config(config.for_shop(text_id)),
        MemoCache("routers"),
    )
    return StorefrontServices(
        config=config,
        domain_map=domain_map,
        resolver=resolver,
        routers=routers,
        handlers=handlers,
    )


def get_services(request: Request) -> StorefrontServices:
    """FastAPI dependency returning the process-wide services."""
    return request.app.state.services
