"""
Localized routing for the storefront.

Modules:
    pattern: Route pattern parser, matcher and builder
    definitions: RouteDefinition records from route files
    loader: Per-shop route table loading
    languages: Default and supported languages
    router: Route compilation, matching and URL construction
    registry: Compiled routers cached per shop
"""

from .definitions import RouteDefinition
from .languages import SupportedLanguages
from .loader import RouteTableError, RouteTableInvalid, RouteTableLoader, RouteTableMissing
from .pattern import PatternSyntaxError, RoutePattern
from .registry import RouterRegistry
from .router import CompiledRoute, LocalizedRouter, MatchResult, compile_routes

__all__ = [
    "RouteDefinition",
    "SupportedLanguages",
    "RouteTableError",
    "RouteTableInvalid",
    "RouteTableLoader",
    "RouteTableMissing",
    "PatternSyntaxError",
    "RoutePattern",
    "RouterRegistry",
    "CompiledRoute",
    "LocalizedRouter",
    "MatchResult",
    "compile_routes",
]
