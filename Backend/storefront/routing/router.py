"""
Localized router.

Compiles a shop's route definitions into an ordered list of CompiledRoutes
and answers two questions:

    match(path)                                  -> MatchResult | None
    construct(handler, action, language, params) -> URL | None

Language handling:
    - Default language (e.g. 'cs') -> URL without prefix: /kontakt
    - Other languages              -> URL with prefix:    /en/contact
    - Single-pattern routes get an optional prefix group: [<lang en|de>/]shop-info

Routes are tried in declaration order and the first match wins; two
built-in fallbacks (generic <handler>/<action>[/<id>] and the homepage)
always come last. There is no specificity ranking, so route authors must
list specific patterns before general ones.
"""

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, FrozenSet, Iterable, List, Mapping, Optional, Tuple
from urllib.parse import parse_qsl, urlencode

from .definitions import RouteDefinition
from .languages import SupportedLanguages
from .pattern import RoutePattern, decode_path


logger = logging.getLogger(__name__)

DEFAULT_HANDLER = "Home"
DEFAULT_ACTION = "default"

# Keys lifted out of the matched params into MatchResult fields
RESERVED_PARAMS = ("handler", "action", "lang")

_URL_NAME = r"[a-zA-Z][a-zA-Z0-9-]*"


class RouteKind(str, Enum):
    CUSTOM = "custom"
    GENERIC = "generic"
    HOMEPAGE = "homepage"


# ────────────────────────────────────────────────────────────────
# URL casing for the generic fallback route
# ────────────────────────────────────────────────────────────────

def handler_from_url(segment: str) -> Optional[str]:
    """shop-info -> ShopInfo"""
    name = "".join(part[:1].upper() + part[1:] for part in segment.split("-"))
    return name or None


def handler_to_url(name: str) -> str:
    """ShopInfo -> shop-info"""
    return re.sub(r"(?<!^)([A-Z])", r"-\1", name).lower()


def action_from_url(segment: str) -> Optional[str]:
    """forgot-password -> forgotPassword"""
    first, *rest = segment.split("-")
    name = first[:1].lower() + first[1:] + "".join(part[:1].upper() + part[1:] for part in rest)
    return name or None


def action_to_url(name: str) -> str:
    """forgotPassword -> forgot-password"""
    return re.sub(r"([A-Z])", r"-\1", name).lower().lstrip("-")


Filter = Tuple[Callable[[str], Optional[str]], Callable[[str], str]]

URL_CASING_FILTERS: Dict[str, Filter] = {
    "handler": (handler_from_url, handler_to_url),
    "action": (action_from_url, action_to_url),
}


# ────────────────────────────────────────────────────────────────
# Compiled routes
# ────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class MatchResult:
    handler: str
    action: str
    language: str
    params: Dict[str, str] = field(default_factory=dict)

    @property
    def destination(self) -> str:
        return f"{self.handler}:{self.action}"


@dataclass(frozen=True)
class CompiledRoute:
    """One matchable/constructible route for one language branch."""

    pattern: RoutePattern
    defaults: Mapping[str, str]
    languages: FrozenSet[str]
    kind: RouteKind = RouteKind.CUSTOM
    filters: Mapping[str, Filter] = field(default_factory=dict)
    definition: Optional[RouteDefinition] = None

    @property
    def handler(self) -> str:
        return self.defaults["handler"]

    @property
    def action(self) -> str:
        return self.defaults["action"]

    def match(self, path: str) -> Optional[Dict[str, str]]:
        """Match a relative path in decode_path() form; returns defaults overlaid with captures."""
        groups = self.pattern.match(path)
        if groups is None:
            return None

        params = dict(self.defaults)
        for name, value in groups.items():
            if value is None or value == "":
                param_default = self.pattern.params[name].default
                if param_default is not None:
                    params[name] = param_default
                continue
            if name in self.filters:
                value = self.filters[name][0](value)
                if value is None:
                    return None
            params[name] = value
        return params

    def build(
        self,
        handler: str,
        action: str,
        language: str,
        params: Mapping[str, object],
    ) -> Optional[str]:
        """Render a URL for the destination, or None if this route cannot express it."""
        values = {
            key: str(value)
            for key, value in params.items()
            if value is not None and key not in RESERVED_PARAMS
        }
        values.update(handler=handler, action=action, lang=language)

        # Values fixed by the route (not in the pattern) must agree
        for key, fixed in self.defaults.items():
            if key in self.pattern.params:
                continue
            supplied = values.get(key)
            if supplied is not None and supplied != fixed:
                return None

        rendered = dict(values)
        for name, (_, outbound) in self.filters.items():
            if name in rendered:
                rendered[name] = outbound(rendered[name])

        path = self.pattern.build(rendered, self.defaults)
        if path is None:
            return None

        url = "/" + path
        leftover = sorted(
            (key, value)
            for key, value in values.items()
            if key not in self.pattern.params and key not in self.defaults
        )
        if leftover:
            url += "?" + urlencode(leftover)
        return url

    def describe(self) -> Dict[str, object]:
        return {
            "pattern": self.pattern.source,
            "handler": self.defaults.get("handler"),
            "action": self.defaults.get("action"),
            "languages": sorted(self.languages),
            "kind": self.kind.value,
        }


def _lang_prefix(languages: SupportedLanguages) -> str:
    """Optional '[<lang en|de>/]' group for every non-default language."""
    if not languages.prefixed:
        return ""
    alternation = "|".join(re.escape(code) for code in languages.prefixed)
    return f"[<lang {alternation}>/]"


def compile_routes(
    definitions: Iterable[RouteDefinition],
    languages: SupportedLanguages,
) -> List[CompiledRoute]:
    """
    Turn route definitions into the ordered list the router evaluates.

    Raises:
        PatternSyntaxError: a pattern in the table is malformed
    """
    compiled: List[CompiledRoute] = []
    prefix = _lang_prefix(languages)
    all_languages = frozenset(languages.supported)

    for definition in definitions:
        base = {"handler": definition.handler, "action": definition.action}

        if definition.is_localized:
            for lang, pattern in definition.language_patterns().items():
                if lang not in all_languages:
                    logger.warning(
                        f"Route {definition.destination} has a pattern for unsupported language {lang!r}"
                    )
                source = pattern if lang == languages.default else f"{lang}/{pattern}"
                compiled.append(
                    CompiledRoute(
                        pattern=RoutePattern(source),
                        defaults={**base, "lang": lang, **definition.params},
                        languages=frozenset({lang}),
                        definition=definition,
                    )
                )
        elif definition.pattern:
            compiled.append(
                CompiledRoute(
                    pattern=RoutePattern(prefix + definition.pattern),
                    defaults={**base, "lang": languages.default, **definition.params},
                    languages=all_languages,
                    definition=definition,
                )
            )
        else:
            logger.warning(f"Skipping route {definition.destination} with an empty pattern")

    fallback_defaults = {
        "handler": DEFAULT_HANDLER,
        "action": DEFAULT_ACTION,
        "lang": languages.default,
    }
    compiled.append(
        CompiledRoute(
            pattern=RoutePattern(f"{prefix}<handler {_URL_NAME}>/<action {_URL_NAME}>[/<id>]"),
            defaults=fallback_defaults,
            languages=all_languages,
            kind=RouteKind.GENERIC,
            filters=URL_CASING_FILTERS,
        )
    )
    compiled.append(
        CompiledRoute(
            pattern=RoutePattern(prefix),
            defaults=fallback_defaults,
            languages=all_languages,
            kind=RouteKind.HOMEPAGE,
        )
    )
    return compiled


# ────────────────────────────────────────────────────────────────
# Router
# ────────────────────────────────────────────────────────────────

class LocalizedRouter:
    """Matches and constructs URLs for one shop."""

    def __init__(self, routes: List[CompiledRoute], languages: SupportedLanguages):
        self.routes = routes
        self.languages = languages
        self._custom = [route for route in routes if route.kind == RouteKind.CUSTOM]
        # Homepage first so Home:default renders as "/" rather than "/home/default"
        self._fallbacks = sorted(
            (route for route in routes if route.kind != RouteKind.CUSTOM),
            key=lambda route: route.kind != RouteKind.HOMEPAGE,
        )

    @classmethod
    def from_definitions(
        cls,
        definitions: Iterable[RouteDefinition],
        languages: SupportedLanguages,
    ) -> "LocalizedRouter":
        return cls(compile_routes(definitions, languages), languages)

    def match(self, path: str) -> Optional[MatchResult]:
        """
        Match a raw, percent-encoded URL path (optionally with a query string).

        Segments are decoded one at a time, so "%2F" stays inside its
        segment and reaches the handler as "/" in the captured value.
        Returns None when nothing matches; that is an ordinary outcome, not
        an error.
        """
        path, _, query = path.partition("#")[0].partition("?")
        relative = decode_path(path.lstrip("/"))
        query_params = dict(parse_qsl(query, keep_blank_values=True)) if query else {}

        for route in self.routes:
            params = route.match(relative)
            if params is None:
                continue

            merged = {**query_params, **params}
            handler = merged.pop("handler")
            action = merged.pop("action")
            language = merged.pop("lang", self.languages.default)
            if not self.languages.is_supported(language):
                language = self.languages.default

            logger.debug(f"Matched '{path}' -> {handler}:{action} [{language}] via {route.pattern.source!r}")
            return MatchResult(handler=handler, action=action, language=language, params=merged)

        logger.debug(f"No route matches '{path}'")
        return None

    def construct(
        self,
        handler: str,
        action: str,
        language: str,
        params: Optional[Mapping[str, object]] = None,
    ) -> Optional[str]:
        """
        Build the canonical URL for a destination.

        Returns None when no route can produce it; callers render a neutral
        placeholder instead of failing.
        """
        params = params or {}

        if self.languages.is_supported(language):
            for route in self._custom + self._fallbacks:
                if language not in route.languages:
                    continue
                url = route.build(handler, action, language, params)
                if url is not None:
                    return url

        # No route can render the requested language; use a default-language branch
        default = self.languages.default
        if language != default:
            for route in self._custom:
                if default not in route.languages:
                    continue
                url = route.build(handler, action, default, params)
                if url is not None:
                    return url

        return None

    def is_language_supported(self, language: object) -> bool:
        return self.languages.is_supported(language)

    def get_default_language(self) -> str:
        return self.languages.default

    def get_supported_languages(self) -> List[str]:
        return list(self.languages.supported)

    def describe(self) -> List[Dict[str, object]]:
        return [route.describe() for route in self.routes]
