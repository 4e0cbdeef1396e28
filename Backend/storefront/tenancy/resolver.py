"""
Shop resolution from the request host.

Resolution order:
    1. Normalize the host (lowercase, strip port)
    2. Look the domain up in the static DomainMap (unmapped -> ShopNotFound)
    3. Return the cached TenantContext for the domain, if any
    4. Load the shop row by the mapped text id (missing row -> ShopNotFound)

Database errors are not caught here; a storage outage must not look like an
unknown shop.
"""

import logging
from typing import Optional

from .cache import MemoCache
from .context import ShopNotFound, ShopResolutionSource, TenantContext
from .domains import DomainMap, normalize_host
from .repository import ShopRepository


logger = logging.getLogger(__name__)


class ShopResolver:
    """Maps a request host to a TenantContext with a per-domain read-through cache."""

    def __init__(
        self,
        domain_map: DomainMap,
        repository: ShopRepository,
        cache: Optional[MemoCache[str, TenantContext]] = None,
    ):
        self.domain_map = domain_map
        self.repository = repository
        self.cache = cache if cache is not None else MemoCache("tenants")

    async def resolve_from_host(self, host: str) -> TenantContext:
        """
        Resolve the shop serving ``host``.

        Raises:
            ShopNotFound: host is not in the domain mapping, or the mapped
                shop row does not exist
        """
        domain = normalize_host(host)
        text_id = self.domain_map.lookup(domain)
        if text_id is None:
            logger.debug(f"Host {host!r} is not in the domain mapping")
            raise ShopNotFound.for_domain(domain or host)

        ctx = self.cache.get(domain)
        if ctx is not None:
            return ctx

        shop = await self.repository.find_by_text_id(text_id)
        if shop is None:
            raise ShopNotFound.for_text_id(text_id)

        ctx = self.cache.set(domain, TenantContext.from_row(shop, domain=domain))
        logger.debug(f"Resolved shop from host: {domain} -> {text_id} (shop_id={ctx.shop_id})")
        return ctx

    async def resolve_by_text_id(self, text_id: str) -> TenantContext:
        """Load a shop directly by text id (no domain mapping, not cached)."""
        shop = await self.repository.find_by_text_id(text_id)
        if shop is None:
            raise ShopNotFound.for_text_id(text_id)
        return TenantContext.from_row(shop, source=ShopResolutionSource.TEXT_ID)

    async def resolve_by_id(self, shop_id: int) -> TenantContext:
        """Load a shop directly by numeric id (no domain mapping, not cached)."""
        shop = await self.repository.find_by_id(shop_id)
        if shop is None:
            raise ShopNotFound.for_id(shop_id)
        return TenantContext.from_row(shop, source=ShopResolutionSource.ID)

    def invalidate(self, host: Optional[str] = None) -> None:
        """Drop the cached context for ``host``, or every cached context."""
        if host is None:
            self.cache.clear()
            logger.info("Cleared tenant cache")
            return
        self.cache.invalidate(normalize_host(host))
