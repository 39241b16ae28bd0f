"""
Emitkit Events - Errors
=======================
Error types for listener registration and mixin installation.

Listener failures during dispatch are NOT represented here: they are
caught, logged and reported by the dispatcher, never raised to the
caller of trigger().
"""

from typing import Any


class EmitterError(Exception):
    """Base error for emitter operations."""
    pass


class InvalidEventKeyError(EmitterError):
    """Event key is neither a name (str) nor a type."""

    def __init__(self, event_key: Any):
        self.event_key = event_key
        super().__init__(
            f"Event key {event_key!r} must be a str name or a class, "
            f"got {type(event_key).__name__}."
        )


class InvalidListenerError(EmitterError):
    """Listener is not callable."""

    def __init__(self, event_key: Any, listener: Any):
        self.event_key = event_key
        self.listener = listener
        super().__init__(
            f"Listener for {event_key!r} must be callable, "
            f"got {type(listener).__name__}."
        )


class DuplicateListenerError(EmitterError):
    """Same (event, listener, context) triple is already registered."""

    def __init__(self, event_key: Any, listener_name: str, context: Any = None):
        self.event_key = event_key
        self.listener_name = listener_name
        self.context = context
        where = "without context" if context is None else f"with context {context!r}"
        super().__init__(
            f"Listener '{listener_name}' already registered "
            f"for {event_key!r} {where}."
        )


class MixinConflictError(EmitterError):
    """Host type already defines a name the emitter surface needs."""

    def __init__(self, host_type: type, attribute: str):
        self.host_type = host_type
        self.attribute = attribute
        super().__init__(
            f"Cannot install emitter into '{host_type.__qualname__}': "
            f"it already defines '{attribute}'."
        )
