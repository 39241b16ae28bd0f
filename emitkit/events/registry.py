"""
Emitkit Events - Listener Registry
==================================
Controls which listeners receive which events, for ONE emitter.

Rules:
- Event keys are str names or classes (type keys)
- Listeners for a key are kept in registration order
- Duplicate (key, listener, context) triple forbidden
- Listener equality is ==, so two bound methods of the same object match
- Context equality is identity; None means "no context"
- A record is deactivated exactly once and never reactivated
- In-memory only, single-threaded (no locks: dispatch is re-entrant)

The registry does not announce anything. Meta events for additions and
removals are raised by the emitter through the dispatcher.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Hashable, Iterable, List, Optional

from emitkit.events.ancestry import is_name_key, is_type_key
from emitkit.events.errors import (
    DuplicateListenerError,
    InvalidEventKeyError,
    InvalidListenerError,
)


def listener_name(callback: Callable[..., Any]) -> str:
    return getattr(callback, "__qualname__", repr(callback))


# ══════════════════════════════════════════════════════════════
# LISTENER RECORD
# ══════════════════════════════════════════════════════════════

@dataclass(eq=False)
class ListenerRecord:
    """
    One registration.

    Records compare by identity: a dispatch snapshot holds references
    to records, and liveness is read from the record itself.
    """

    key: Hashable
    callback: Callable[..., Any]
    context: Any = None
    once: bool = False
    active: bool = True

    def matches(self, callback: Callable[..., Any], context: Any) -> bool:
        return self.callback == callback and self.context is context

    def deactivate(self) -> bool:
        """Mark inactive. Returns False if it already was."""
        if not self.active:
            return False
        self.active = False
        return True


# ══════════════════════════════════════════════════════════════
# LISTENER REGISTRY
# ══════════════════════════════════════════════════════════════

class ListenerRegistry:
    """
    Registry of active listener records.

    Each entry maps an event key to the ordered list of its active
    records. Keys with no records left are dropped.
    """

    def __init__(self):
        self._listeners: Dict[Hashable, List[ListenerRecord]] = {}

    @staticmethod
    def _validate(key: Any, callback: Any) -> None:
        if not (is_name_key(key) or is_type_key(key)):
            raise InvalidEventKeyError(key)
        if not callable(callback):
            raise InvalidListenerError(key, callback)

    def register(
        self,
        key: Hashable,
        callback: Callable[..., Any],
        context: Any = None,
        once: bool = False,
    ) -> ListenerRecord:
        """
        Append a new active record for key.

        Raises:
            InvalidEventKeyError:   key is not a str or a class
            InvalidListenerError:   callback is not callable
            DuplicateListenerError: same (key, callback, context) is active
        """
        self._validate(key, callback)

        for existing in self._listeners.get(key, ()):
            if existing.matches(callback, context):
                raise DuplicateListenerError(
                    key, listener_name(callback), context
                )

        record = ListenerRecord(
            key=key, callback=callback, context=context, once=once
        )
        self._listeners.setdefault(key, []).append(record)
        return record

    def detach(self, record: ListenerRecord) -> bool:
        """
        Deactivate a record and drop it from the registry.
        Returns False if the record was already inactive.
        """
        if not record.deactivate():
            return False

        records = self._listeners.get(record.key)
        if records is not None:
            for index, existing in enumerate(records):
                if existing is record:
                    del records[index]
                    break
            if not records:
                del self._listeners[record.key]
        return True

    # ── Selection ────────────────────────────────────────────

    def select(
        self,
        key: Optional[Hashable] = None,
        callback: Optional[Callable[..., Any]] = None,
        context: Any = None,
    ) -> List[ListenerRecord]:
        """
        Records targeted by a removal, in registry order.

        - nothing given:            every record
        - key only:                 every record under key
        - key + callback:           records with that callback and NO context
        - key + callback + context: the exact record, if any
        - key + context:            records under key bound to context

        Without a key the same filters apply across all keys.
        """
        if key is not None:
            candidates: Iterable[ListenerRecord] = list(self._listeners.get(key, ()))
        else:
            candidates = self.all_records()

        if callback is not None:
            return [r for r in candidates if r.matches(callback, context)]
        if context is not None:
            return [r for r in candidates if r.context is context]
        return list(candidates)

    def select_by_context(self, context: Any) -> List[ListenerRecord]:
        """Records of any key bound to context (by identity)."""
        return [r for r in self.all_records() if r.context is context]

    def all_records(self) -> List[ListenerRecord]:
        return [
            record
            for records in self._listeners.values()
            for record in records
        ]

    # ── Matching ─────────────────────────────────────────────

    def records_for(self, key: Hashable) -> List[ListenerRecord]:
        """
        Current match set for a key.
        Returns a copy; empty list if nobody listens (not an error).
        """
        return list(self._listeners.get(key, ()))

    def records_for_types(self, types: Iterable[type]) -> List[ListenerRecord]:
        """Union of match sets for each type, in the order given."""
        matched: List[ListenerRecord] = []
        for event_type in types:
            matched.extend(self._listeners.get(event_type, ()))
        return matched

    # ── Introspection ────────────────────────────────────────

    def has_listeners(self, key: Hashable) -> bool:
        return bool(self._listeners.get(key))

    def listener_count(self, key: Optional[Hashable] = None) -> int:
        """Count active records for key, or across all keys."""
        if key is None:
            return sum(len(records) for records in self._listeners.values())
        return len(self._listeners.get(key, ()))

    def event_keys(self) -> frozenset:
        """Return all keys with at least one active listener."""
        return frozenset(self._listeners.keys())
