"""
Emitkit
=======
In-process publish/subscribe for single-threaded object graphs.
"""

from emitkit.config import EmitterSettings
from emitkit.events import (
    AddListenerEvent,
    DeadEvent,
    DuplicateListenerError,
    Emitter,
    EmitterError,
    EmitterMixin,
    RemoveListenerEvent,
    install_into,
)

__all__ = [
    "Emitter",
    "EmitterMixin",
    "EmitterSettings",
    "install_into",
    "DeadEvent",
    "AddListenerEvent",
    "RemoveListenerEvent",
    "EmitterError",
    "DuplicateListenerError",
]
