"""
Emitkit Events - Public API
===========================
Synchronous, in-process events with re-entrant dispatch.
"""

from emitkit.events.ancestry import ancestor_types_of
from emitkit.events.dispatcher import DispatchReport, ListenerFailure, dispatch
from emitkit.events.emitter import Emitter, EmitterMixin
from emitkit.events.errors import (
    DuplicateListenerError,
    EmitterError,
    InvalidEventKeyError,
    InvalidListenerError,
    MixinConflictError,
)
from emitkit.events.meta import (
    AddListenerEvent,
    DeadEvent,
    META_EVENT_TYPES,
    RemoveListenerEvent,
)
from emitkit.events.mixin import install_into
from emitkit.events.registry import ListenerRecord, ListenerRegistry

__all__ = [
    "Emitter",
    "EmitterMixin",
    "install_into",
    "dispatch",
    "DispatchReport",
    "ListenerFailure",
    "ListenerRecord",
    "ListenerRegistry",
    "ancestor_types_of",
    "DeadEvent",
    "AddListenerEvent",
    "RemoveListenerEvent",
    "META_EVENT_TYPES",
    "EmitterError",
    "DuplicateListenerError",
    "InvalidEventKeyError",
    "InvalidListenerError",
    "MixinConflictError",
]
