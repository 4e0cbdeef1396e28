"""
Dispatch orchestrator.

Turns a matched route into a handler call. Handlers are looked up by name in
an explicit registry; actions are coroutine methods named ``action_<name>``
with camelCase action names converted to snake_case
(``forgotPassword`` -> ``action_forgot_password``).
"""

import logging
import re
from typing import Any, Callable, Dict, Optional

from .core.request_context import RequestContext


logger = logging.getLogger(__name__)


class HandlerNotFound(Exception):
    """Raised when no handler is registered under the matched name."""
    def __init__(self, handler: str):
        self.handler = handler
        self.message = f"Handler not found: {handler}"
        super().__init__(self.message)


class ActionNotFound(Exception):
    """Raised when the handler has no method for the matched action."""
    def __init__(self, handler: str, action: str):
        self.handler = handler
        self.action = action
        self.message = f"Action not found: {handler}:{action}"
        super().__init__(self.message)


class Handler:
    """Base class for handlers. Subclasses define ``async def action_<name>(self, ctx)``."""

    name: str = ""

    def get_action(self, action: str) -> Optional[Callable[[RequestContext], Any]]:
        method_name = "action_" + re.sub(r"(?<!^)([A-Z])", r"_\1", action).lower()
        method = getattr(self, method_name, None)
        return method if callable(method) else None


HandlerFactory = Callable[[], Handler]


class HandlerRegistry:
    """Maps handler names to factories."""

    def __init__(self):
        self._factories: Dict[str, HandlerFactory] = {}

    def register(self, name: str, factory: Optional[HandlerFactory] = None):
        """
        Register a handler factory. Usable directly or as a class decorator:

            @handlers.register("Contact")
            class ContactHandler(Handler): ...
        """
        if factory is not None:
            self._factories[name] = factory
            return factory

        def decorator(cls):
            self._factories[name] = cls
            return cls
        return decorator

    def create(self, name: str) -> Handler:
        factory = self._factories.get(name)
        if factory is None:
            raise HandlerNotFound(name)
        return factory()

    def names(self) -> list[str]:
        return sorted(self._factories)

    def __contains__(self, name: object) -> bool:
        return name in self._factories


async def dispatch(registry: HandlerRegistry, ctx: RequestContext) -> Any:
    """
    Run the action selected by ``ctx.match``.

    Raises:
        HandlerNotFound: no handler registered under the matched name
        ActionNotFound: the handler does not implement the matched action
    """
    handler_name = ctx.match.handler
    action_name = ctx.match.action

    handler = registry.create(handler_name)
    action = handler.get_action(action_name)
    if action is None:
        raise ActionNotFound(handler_name, action_name)

    logger.debug(f"Dispatching {ctx.match.destination} for shop '{ctx.shop.text_id}'")
    return await action(ctx)
