"""
Emitkit Events - Emitter
========================
Public surface of an event emitter:

    on(event, callback, context=None)     persistent listener
    once(event, callback, context=None)   listener removed on first delivery
    off(event=None, callback=None, context=None)
    clear_listeners(context)
    trigger(event, *args)

Every emitter instance owns a private ListenerRegistry, created on the
first emitter operation rather than in __init__, so the surface can be
installed onto types whose constructors it does not control
(see emitkit.events.mixin).
"""

from __future__ import annotations

import logging
import weakref
from typing import Any, Callable, Dict, Hashable, Optional

from emitkit.config.settings import DEFAULT_SETTINGS, EmitterSettings
from emitkit.events import meta
from emitkit.events.dispatcher import describe_key, dispatch, retire
from emitkit.events.errors import EmitterError
from emitkit.events.meta import AddListenerEvent
from emitkit.events.registry import ListenerRegistry, listener_name

logger = logging.getLogger("emitkit.events")

_REGISTRY_ATTR = "_emitkit_registry"

# Registries of instances without a __dict__, keyed by id().
# Entries are dropped by a weakref finalizer when the instance dies.
_SIDE_TABLE: Dict[int, ListenerRegistry] = {}


def registry_of(instance: Any) -> ListenerRegistry:
    """
    Return the instance's private registry, creating it on first use.

    Stored in the instance __dict__ when there is one, otherwise in an
    identity-keyed side table (the instance must support weak references).

    Side table entries are dropped when the instance is collected. A
    slotted instance whose registry holds its own bound methods (or
    anything else referencing it) stays reachable from the table and is
    never collected; call off() to release it.
    """
    state = getattr(instance, "__dict__", None)
    if state is not None:
        registry = state.get(_REGISTRY_ATTR)
        if registry is None:
            registry = ListenerRegistry()
            state[_REGISTRY_ATTR] = registry
        return registry

    key = id(instance)
    registry = _SIDE_TABLE.get(key)
    if registry is None:
        try:
            weakref.finalize(instance, _SIDE_TABLE.pop, key, None)
        except TypeError as exc:
            raise EmitterError(
                f"'{type(instance).__qualname__}' instances have neither a "
                f"__dict__ nor weak reference support; cannot hold listeners."
            ) from exc
        registry = ListenerRegistry()
        _SIDE_TABLE[key] = registry
    return registry


# ══════════════════════════════════════════════════════════════
# EMITTER MIXIN
# ══════════════════════════════════════════════════════════════

class EmitterMixin:
    """
    Emitter behaviour for any class.

    Subclass it, or install it onto an existing class with
    emitkit.events.mixin.install_into().
    """

    _emitter_settings: EmitterSettings = DEFAULT_SETTINGS

    def on(
        self,
        event: Hashable,
        callback: Optional[Callable[..., Any]] = None,
        context: Any = None,
    ):
        """
        Register a listener for event.

        Without a callback, returns a decorator:

            @emitter.on("saved")
            def handle_saved(record): ...

        Raises:
            DuplicateListenerError: same (event, callback, context) registered
            InvalidEventKeyError:   event is not a str or a class
            InvalidListenerError:   callback is not callable
        """
        if callback is None:
            return lambda fn: self.on(event, fn, context)
        _register(self, event, callback, context, once=False)
        return callback

    def once(
        self,
        event: Hashable,
        callback: Optional[Callable[..., Any]] = None,
        context: Any = None,
    ):
        """Like on(), but the listener is removed just before its first call."""
        if callback is None:
            return lambda fn: self.once(event, fn, context)
        _register(self, event, callback, context, once=True)
        return callback

    def off(
        self,
        event: Optional[Hashable] = None,
        callback: Optional[Callable[..., Any]] = None,
        context: Any = None,
    ) -> None:
        """
        Remove listeners. Removing something not registered is a no-op.

        off()                         every listener
        off(event)                    every listener of event
        off(event, callback)          callback registered WITHOUT context
        off(event, callback, context) that exact registration
        """
        registry = registry_of(self)
        retire(
            registry,
            registry.select(event, callback, context),
            self._emitter_settings,
        )

    def clear_listeners(self, context: Any) -> None:
        """Remove every listener bound to context, whatever its event."""
        registry = registry_of(self)
        retire(
            registry,
            registry.select_by_context(context),
            self._emitter_settings,
        )

    def trigger(self, event: Any, *args: Any) -> None:
        """
        Deliver event synchronously.

        A str is a named event: listeners receive *args. Anything else is
        dispatched by type: listeners of its class or any ancestor class
        receive (event, *args). Listener exceptions are logged, not raised.
        """
        dispatch(registry_of(self), event, args, self._emitter_settings)

    # ── Introspection ────────────────────────────────────────

    def has_listeners(self, event: Hashable) -> bool:
        return registry_of(self).has_listeners(event)

    def listener_count(self, event: Optional[Hashable] = None) -> int:
        return registry_of(self).listener_count(event)

    def event_keys(self) -> frozenset:
        return registry_of(self).event_keys()


def _register(
    emitter: EmitterMixin,
    event: Hashable,
    callback: Callable[..., Any],
    context: Any,
    once: bool,
) -> None:
    registry = registry_of(emitter)
    settings = emitter._emitter_settings

    registry.register(event, callback, context, once=once)

    logger.log(
        settings.registration_log_level,
        f"Listener registered: {listener_name(callback)} → "
        f"{describe_key(event)}{' (once)' if once else ''}",
    )

    dispatch(
        registry,
        AddListenerEvent(event=event, listener=callback, context=context),
        (),
        settings,
    )


# ══════════════════════════════════════════════════════════════
# EMITTER
# ══════════════════════════════════════════════════════════════

class Emitter(EmitterMixin):
    """
    Standalone emitter.

    Meta event types are reachable as Emitter.meta.DeadEvent,
    Emitter.meta.AddListenerEvent and Emitter.meta.RemoveListenerEvent.
    """

    meta = meta

    def __init__(self, settings: Optional[EmitterSettings] = None) -> None:
        if settings is not None:
            self._emitter_settings = settings
