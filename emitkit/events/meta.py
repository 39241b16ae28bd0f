"""
Emitkit Events - Meta Events
============================
Events the emitter raises about itself.

They are plain classes, so listeners subscribe to them by type:

    emitter.on(DeadEvent, lambda event: print(event.event, event.data))

- DeadEvent:           a named event was triggered with nobody listening
- AddListenerEvent:    a listener was registered (on or once)
- RemoveListenerEvent: a listener was removed (off, clear_listeners, or
                       consumed by once)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Tuple


@dataclass(frozen=True)
class DeadEvent:
    """A named event nobody was listening to, with the arguments it carried."""

    event: Any
    data: Tuple[Any, ...] = ()


@dataclass(frozen=True)
class AddListenerEvent:
    event: Any
    listener: Callable[..., Any]
    context: Any = None


@dataclass(frozen=True)
class RemoveListenerEvent:
    event: Any
    listener: Callable[..., Any]
    context: Any = None


META_EVENT_TYPES = (DeadEvent, AddListenerEvent, RemoveListenerEvent)
