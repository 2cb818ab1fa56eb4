"""
ContentDB Callbacks — Lifecycle hooks around record save/create/update/destroy.

Provides:
    - CallbackEvent: the named before/after events
    - CallbackRegistry: per-model-class hook registry, inherited by subclasses
    - run_callbacks(): wraps an operation in its before/after hooks
    - HaltCallbacks: raised by a before hook to cancel the operation quietly

A hook receives the record. Raising any other exception from a hook vetoes
the operation and propagates to the caller.

Usage:
    registry = get_callback_registry()
    registry.register(Post, "before_save", stamp_updated_at)

    @on_event(Post, "after_destroy")
    def forget(post): ...
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence, Union

logger = logging.getLogger("contentdb.engine.callbacks")


# ---------------------------------------------------------------------------
# Event types
# ---------------------------------------------------------------------------

class CallbackEvent:
    """Enumeration of record lifecycle events."""
    BEFORE_SAVE = "before_save"
    AFTER_SAVE = "after_save"
    BEFORE_CREATE = "before_create"
    AFTER_CREATE = "after_create"
    BEFORE_UPDATE = "before_update"
    AFTER_UPDATE = "after_update"
    BEFORE_DESTROY = "before_destroy"
    AFTER_DESTROY = "after_destroy"

    KINDS = ("save", "create", "update", "destroy")

    ALL = {
        BEFORE_SAVE, AFTER_SAVE, BEFORE_CREATE, AFTER_CREATE,
        BEFORE_UPDATE, AFTER_UPDATE, BEFORE_DESTROY, AFTER_DESTROY,
    }


class HaltCallbacks(Exception):
    """Raised from a before hook to cancel the operation without an error."""
    pass


@dataclass
class Callback:
    """A registered lifecycle hook for a model class."""
    model_class: type
    event: str
    handler: Callable[[Any], Any]
    priority: int = 0        # Lower = runs first

    def __repr__(self) -> str:
        name = getattr(self.handler, "__name__", repr(self.handler))
        return f"<Callback({self.model_class.__name__}.{self.event} → {name})>"


# ---------------------------------------------------------------------------
# Callback Registry
# ---------------------------------------------------------------------------

class CallbackRegistry:
    """
    Registry and dispatcher for lifecycle hooks.

    Hooks registered on a base class also run for its subclasses, base class
    hooks first.
    """

    def __init__(self):
        self._callbacks: Dict[type, Dict[str, List[Callback]]] = {}
        # _callbacks[model_class][event] = [Callback, ...]

    def register(
        self,
        model_class: type,
        event: str,
        handler: Callable[[Any], Any],
        priority: int = 0,
    ) -> Callback:
        """Register a single hook."""
        if event not in CallbackEvent.ALL:
            raise ValueError(f"Unknown callback event '{event}'. Valid: {sorted(CallbackEvent.ALL)}")

        callback = Callback(
            model_class=model_class,
            event=event,
            handler=handler,
            priority=priority,
        )
        hooks = self._callbacks.setdefault(model_class, {}).setdefault(event, [])
        hooks.append(callback)
        hooks.sort(key=lambda c: c.priority)
        logger.debug(f"Registered callback: {callback!r}")
        return callback

    def register_many(
        self,
        model_class: type,
        hook_config: Dict[str, List[Callable[[Any], Any]]],
    ) -> int:
        """
        Register hooks from a {event: [handlers]} mapping.

        Unknown events are skipped with a warning.

        Returns:
            Number of hooks registered.
        """
        count = 0
        for event, handlers in hook_config.items():
            if event not in CallbackEvent.ALL:
                logger.warning(f"Unknown event '{event}' for {model_class.__name__}, skipping")
                continue
            for handler in handlers:
                self.register(model_class, event, handler)
                count += 1
        return count

    def unregister(self, model_class: type, event: str, handler: Callable[[Any], Any]) -> bool:
        hooks = self._callbacks.get(model_class, {}).get(event, [])
        for callback in hooks:
            if callback.handler is handler:
                hooks.remove(callback)
                return True
        return False

    def get_callbacks(self, model_class: type, event: str) -> List[Callback]:
        """All hooks for a class and event, including inherited ones."""
        result: List[Callback] = []
        for klass in reversed(model_class.__mro__):
            result.extend(self._callbacks.get(klass, {}).get(event, []))
        return result

    def run(
        self,
        kinds: Union[str, Sequence[str]],
        record: Any,
        action: Callable[[], Any],
    ) -> Any:
        """
        Run ``action`` wrapped in the before/after hooks for ``kinds``.

        With several kinds, e.g. ("save", "create"), the before hooks run
        outermost first and the after hooks innermost first:
        before_save, before_create, action, after_create, after_save.

        Returns:
            The action's result, or False when a before hook halted the chain.
        """
        if isinstance(kinds, str):
            kinds = (kinds,)
        for kind in kinds:
            if kind not in CallbackEvent.KINDS:
                raise ValueError(f"Unknown callback kind '{kind}'")

        model_class = type(record)
        for kind in kinds:
            try:
                for callback in self.get_callbacks(model_class, f"before_{kind}"):
                    callback.handler(record)
            except HaltCallbacks:
                logger.debug(f"{model_class.__name__} {kind} halted by before_{kind} callback")
                return False

        result = action()

        for kind in reversed(kinds):
            try:
                for callback in self.get_callbacks(model_class, f"after_{kind}"):
                    callback.handler(record)
            except HaltCallbacks:
                logger.debug(f"{model_class.__name__} after_{kind} chain halted")

        return result

    @property
    def hook_count(self) -> int:
        """Total number of registered hooks."""
        return sum(
            len(hooks)
            for events in self._callbacks.values()
            for hooks in events.values()
        )

    def clear(self) -> None:
        self._callbacks.clear()


# ---------------------------------------------------------------------------
# Module-level singleton
# ---------------------------------------------------------------------------

_callback_registry: Optional[CallbackRegistry] = None


def get_callback_registry() -> CallbackRegistry:
    """Get or create the global CallbackRegistry singleton."""
    global _callback_registry
    if _callback_registry is None:
        _callback_registry = CallbackRegistry()
    return _callback_registry


def run_callbacks(kinds: Union[str, Sequence[str]], record: Any, action: Callable[[], Any]) -> Any:
    """Run ``action`` inside the global registry's hooks for ``kinds``."""
    return get_callback_registry().run(kinds, record, action)


def on_event(model_class: type, event: str, priority: int = 0) -> Callable:
    """Decorator form of CallbackRegistry.register on the global registry."""

    def decorator(fn: Callable[[Any], Any]) -> Callable[[Any], Any]:
        get_callback_registry().register(model_class, event, fn, priority=priority)
        return fn

    return decorator
