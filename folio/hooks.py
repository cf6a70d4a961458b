"""Save and destroy hooks for content models.

Hooks are plain callables taking the model. They are registered against a
model class and apply to instances of that class and its subclasses, in
registration order. A ``before_*`` hook that returns ``False`` vetoes the
operation.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .model import ContentModel

logger = logging.getLogger(__name__)

HOOK_NAMES = ("before_save", "after_save", "before_destroy", "after_destroy")

Hook = Callable[["ContentModel"], Any]


class HookRegistry:
    """Registry of lifecycle hooks keyed by hook name and owning class."""

    def __init__(self) -> None:
        self._hooks: dict[str, list[tuple[type, Hook]]] = {name: [] for name in HOOK_NAMES}

    def register(self, owner: type, name: str, callback: Hook) -> Hook:
        """Register ``callback`` to run for instances of ``owner``.

        Args:
            owner: Model class the hook applies to.
            name: One of HOOK_NAMES.
            callback: Callable receiving the model.

        Returns:
            The callback, so this can back a decorator.

        Raises:
            ValueError: If ``name`` is not a known hook.
        """
        if name not in self._hooks:
            raise ValueError(f"Unknown hook: {name}")
        self._hooks[name].append((owner, callback))
        return callback

    def hooks_for(self, model: ContentModel, name: str) -> list[Hook]:
        return [callback for owner, callback in self._hooks[name] if isinstance(model, owner)]

    def run(self, model: ContentModel, event: str, action: Callable[[], Any]) -> Any:
        """Run ``action`` wrapped by the model's before/after hooks for ``event``.

        Returns:
            The action's result, or False when a before hook vetoed it.
        """
        for hook in self.hooks_for(model, f"before_{event}"):
            if hook(model) is False:
                logger.debug("%s vetoed by %r", event, hook)
                return False
        result = action()
        for hook in self.hooks_for(model, f"after_{event}"):
            hook(model)
        return result

    def clear(self) -> None:
        for hooks in self._hooks.values():
            hooks.clear()


default_hook_registry = HookRegistry()
