"""
Multi-tenancy package for the storefront.

Modules:
    context: TenantContext, SellerProfile and the ShopNotFound error
    domains: Static domain mapping and host normalization
    repository: Shop row lookups
    cache: Explicit process-lifetime memoization
    resolver: Host -> TenantContext resolution
"""

from .cache import MemoCache
from .context import (
    SellerProfile,
    ShopNotFound,
    ShopResolutionSource,
    TenantContext,
)
from .domains import DomainMap, normalize_host
from .repository import ShopRepository
from .resolver import ShopResolver

__all__ = [
    "MemoCache",
    "SellerProfile",
    "ShopNotFound",
    "ShopResolutionSource",
    "TenantContext",
    "DomainMap",
    "normalize_host",
    "ShopRepository",
    "ShopResolver",
]
