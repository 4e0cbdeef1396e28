import logging
from typing import Callable, Optional

from ..core.layered_config import ConfigError
from ..tenancy.cache import MemoCache
from .languages import SupportedLanguages
from .loader import RouteTableInvalid, RouteTableLoader
from .pattern import PatternSyntaxError
from .router import LocalizedRouter


logger = logging.getLogger(__name__)


class RouterRegistry:
    """
    Compiled routers per shop.

    A router is compiled the first time a shop is seen and reused until
    reload() is called for that shop (or for all shops).
    """

    def __init__(
        self,
        loader: RouteTableLoader,
        languages_for: Callable[[str], SupportedLanguages],
        cache: Optional[MemoCache[str, LocalizedRouter]] = None,
    ):
        self.loader = loader
        self.languages_for = languages_for
        self.cache = cache if cache is not None else MemoCache("routers")

    def get_router(self, text_id: str) -> LocalizedRouter:
        """
        Return the compiled router for a shop.

        Raises:
            RouteTableMissing: the shop has no route file
            RouteTableInvalid: the route file or one of its patterns is malformed
            ConfigError: the shop's language configuration is unusable
        """
        return self.cache.get_or_create(text_id, lambda: self._build(text_id))

    def reload(self, text_id: Optional[str] = None) -> None:
        if text_id is None:
            self.cache.clear()
            logger.info("Cleared all compiled routers")
        elif self.cache.invalidate(text_id):
            logger.info(f"Cleared compiled router for shop '{text_id}'")

    def _build(self, text_id: str) -> LocalizedRouter:
        definitions = self.loader.load_routes(text_id)
        try:
            languages = self.languages_for(text_id)
        except ValueError as e:
            raise ConfigError(f"Invalid language configuration for shop '{text_id}': {e}") from e
        try:
            router = LocalizedRouter.from_definitions(definitions, languages)
        except PatternSyntaxError as e:
            raise RouteTableInvalid(text_id, str(e)) from e
        logger.info(
            f"Compiled {len(router.routes)} routes for shop '{text_id}' "
            f"(default={languages.default}, supported={list(languages.supported)})"
        )
        return router
