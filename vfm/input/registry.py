"""Action dispatch tables built from a ``Keymap`` context."""

from __future__ import annotations

from collections.abc import Callable
from typing import Generic, TypeVar

from .keymap import Keymap

R = TypeVar("R")


class ActionRegistry(Generic[R]):
    """Maps key tokens of one keymap context to bound action handlers.

    Handlers are registered by action name; the keymap decides which keys
    reach them. Unbound keys dispatch to ``None``.
    """

    def __init__(self, keymap: Keymap, context: str) -> None:
        self.keymap = keymap
        self.context = context
        self._handlers: dict[str, Callable[[], R]] = {}

    def register(self, action: str, handler: Callable[[], R]) -> ActionRegistry[R]:
        self._handlers[action] = handler
        return self

    def register_all(self, handlers: dict[str, Callable[[], R]]) -> ActionRegistry[R]:
        for action, handler in handlers.items():
            self.register(action, handler)
        return self

    def action_for(self, key: str) -> str | None:
        return self.keymap.action_for(self.context, key)

    def dispatch(self, key: str) -> R | None:
        """Invoke the handler bound to ``key`` and return its result."""
        action = self.action_for(key)
        if action is None:
            return None
        handler = self._handlers.get(action)
        if handler is None:
            return None
        return handler()
