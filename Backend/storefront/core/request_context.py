"""
Per-request context.

Everything downstream of routing receives the resolved shop, language and
router through this object instead of reading ambient state.
"""

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Tuple

from ..routing.router import LocalizedRouter, MatchResult
from ..tenancy.context import TenantContext


logger = logging.getLogger(__name__)

UNCONSTRUCTABLE_LINK = "#"


def parse_destination(destination: str, current: Optional[MatchResult] = None) -> Tuple[str, str]:
    """
    Split a "Handler:action" destination.

        "Contact:default" -> ("Contact", "default")
        "Contact"         -> ("Contact", "default")
        ":detail"         -> (<current handler>, "detail")
        "this"            -> (<current handler>, <current action>)
    """
    if destination == "this" and current is not None:
        return current.handler, current.action
    handler, _, action = destination.partition(":")
    if not handler and current is not None:
        handler = current.handler
    return handler, action or "default"


@dataclass
class RequestContext:
    """
    Resolved context for one request.

    Attributes:
        shop: The shop serving the request
        language: Language of the request after cleanup
        router: The shop's compiled router
        match: The route match that selected the handler
        path: Raw request path
    """
    shop: TenantContext
    language: str
    router: LocalizedRouter
    match: MatchResult
    path: str = "/"

    @property
    def params(self) -> Mapping[str, str]:
        return self.match.params

    def link(self, destination: str, params: Optional[Mapping[str, Any]] = None) -> str:
        """
        Build a URL for "Handler:action" in the current language.

        A "lang" entry in ``params`` switches language. "this" keeps the
        current params, with ``params`` overriding them. Returns "#" when
        the shop's route table cannot express the destination.
        """
        params = dict(params or {})
        if destination == "this":
            params = {**self.match.params, **params}
        language = str(params.pop("lang", None) or self.language)
        handler, action = parse_destination(destination, self.match)

        url = self.router.construct(handler, action, language, params)
        if url is None:
            logger.warning(
                f"Cannot build link to {handler}:{action} [{language}] for shop '{self.shop.text_id}'"
            )
            return UNCONSTRUCTABLE_LINK
        return url

    def is_active(self, destination: str, params: Optional[Mapping[str, Any]] = None) -> bool:
        """
        Whether ``destination`` is the page being served.

        Action "*" matches any action of the handler ("Products:*"). Every
        entry in ``params`` except "lang" must equal the current param.
        """
        handler, action = parse_destination(destination, self.match)
        if handler != self.match.handler:
            return False
        if action != "*" and action != self.match.action:
            return False
        for key, value in (params or {}).items():
            if key == "lang":
                continue
            current = self.match.params.get(key)
            if current is None or current != str(value):
                return False
        return True
