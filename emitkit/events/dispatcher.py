"""
Emitkit Events - Dispatcher
===========================
Delivers a triggered event to the listeners registered for it.

Dispatch behavior:
1. Resolve the match set
   - str name:      records under exactly that name
   - any instance:  records under each type of its ancestry, nearest first
2. Named event with no listeners -> trigger DeadEvent instead
3. Snapshot the match set, then for each record in order:
   a. skip it if it is no longer active
   b. once-listener: detach and announce removal BEFORE calling it
   c. call it: typed events pass the instance first, names pass only args
   d. catch listener exceptions, log, continue

Listeners may call trigger, on, once and off on the same emitter while
being dispatched. The snapshot is taken once per dispatch and liveness
is checked immediately before every call, so nested passes and removals
stay consistent without locks.

Listener failure must NOT:
- Break dispatch to the remaining listeners
- Propagate to the caller of trigger()
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable, List, Optional, Sequence, Tuple

from emitkit.config.settings import DEFAULT_SETTINGS, EmitterSettings
from emitkit.events.ancestry import ancestor_types_of, is_name_key, is_type_key
from emitkit.events.meta import DeadEvent, RemoveListenerEvent
from emitkit.events.registry import ListenerRecord, ListenerRegistry, listener_name

logger = logging.getLogger("emitkit.events")


def describe_key(key: Any) -> str:
    if is_type_key(key):
        return key.__qualname__
    return repr(key)


# ══════════════════════════════════════════════════════════════
# DISPATCH REPORT
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class ListenerFailure:
    listener: str
    error: str
    error_type: str


@dataclass(frozen=True)
class DispatchReport:
    """
    Outcome of one dispatch pass (nested passes report separately).

    event_key is the name for named events and the nearest type for
    typed events. dead is True when a DeadEvent was raised instead.
    """

    event_key: Any
    listeners_notified: int = 0
    listeners_failed: int = 0
    listeners_skipped: int = 0
    dead: bool = False
    failures: Tuple[ListenerFailure, ...] = ()


# ══════════════════════════════════════════════════════════════
# DISPATCH
# ══════════════════════════════════════════════════════════════

def dispatch(
    registry: ListenerRegistry,
    event: Any,
    args: Sequence[Any] = (),
    settings: EmitterSettings = DEFAULT_SETTINGS,
) -> DispatchReport:
    """
    Dispatch an event to all matching listeners.

    Args:
        registry: ListenerRegistry of the emitting instance.
        event:    str name, or an instance dispatched by type.
        args:     Extra positional arguments for the listeners.
        settings: Logging and ancestry configuration.

    This function NEVER raises listener exceptions.
    """
    args = tuple(args)
    typed = not is_name_key(event)

    if typed:
        ancestry = settings.ancestry or ancestor_types_of
        types = tuple(ancestry(event))
        event_key = types[0] if types else type(event)
        snapshot = registry.records_for_types(types)
    else:
        event_key = event
        snapshot = registry.records_for(event)

    label = describe_key(event_key)

    if not snapshot:
        if typed:
            # Unhandled typed events (meta events included) are dropped.
            logger.debug(f"No listeners for {label}")
            return DispatchReport(event_key=event_key)

        logger.debug(f"No listeners for {label}, raising DeadEvent")
        dispatch(registry, DeadEvent(event=event, data=args), (), settings)
        return DispatchReport(event_key=event_key, dead=True)

    call_args = (event,) + args if typed else args
    notified = 0
    skipped = 0
    failures: List[ListenerFailure] = []

    for record in snapshot:
        if not record.active:
            skipped += 1
            continue

        if record.once:
            registry.detach(record)
            announce_removal(registry, record, settings)

        failure = _invoke(record, call_args, label, settings)
        if failure is None:
            notified += 1
        else:
            failures.append(failure)
            # Continue to next listener

    logger.debug(
        f"Dispatch complete: {label}: "
        f"{notified} notified, {len(failures)} failed, {skipped} skipped"
    )

    return DispatchReport(
        event_key=event_key,
        listeners_notified=notified,
        listeners_failed=len(failures),
        listeners_skipped=skipped,
        failures=tuple(failures),
    )


def _invoke(
    record: ListenerRecord,
    call_args: Tuple[Any, ...],
    label: str,
    settings: EmitterSettings,
) -> Optional[ListenerFailure]:
    """Call one listener. Returns the failure, or None on success."""
    name = listener_name(record.callback)
    try:
        record.callback(*call_args)
        logger.debug(f"Dispatched {label} → {name}")
        return None

    except Exception as exc:
        logger.log(
            settings.failure_log_level,
            f"Listener failed: {name} for {label}: {exc}",
            exc_info=True,
        )
        return ListenerFailure(
            listener=name,
            error=str(exc),
            error_type=type(exc).__name__,
        )


# ══════════════════════════════════════════════════════════════
# ANNOUNCEMENTS
# ══════════════════════════════════════════════════════════════

def removal_event(record: ListenerRecord) -> RemoveListenerEvent:
    return RemoveListenerEvent(
        event=record.key,
        listener=record.callback,
        context=record.context,
    )


def announce_removal(
    registry: ListenerRegistry,
    record: ListenerRecord,
    settings: EmitterSettings = DEFAULT_SETTINGS,
) -> DispatchReport:
    """Trigger RemoveListenerEvent for a record already detached."""
    return dispatch(registry, removal_event(record), (), settings)


def _hears_removals(record: ListenerRecord) -> bool:
    return is_type_key(record.key) and issubclass(RemoveListenerEvent, record.key)


def retire(
    registry: ListenerRegistry,
    records: Iterable[ListenerRecord],
    settings: EmitterSettings = DEFAULT_SETTINGS,
) -> int:
    """
    Remove records, announcing each removal.

    Each record is detached first and announced after, so nothing
    triggered from inside the announcement can reach or select it again.
    Removal listeners go last within the batch so they hear every other
    removal first; each is then handed its own RemoveListenerEvent
    directly, since it is no longer in the registry to receive it.
    Records already inactive are skipped.

    Returns the number of records actually removed.
    """
    records = list(records)
    ordered = (
        [r for r in records if not _hears_removals(r)]
        + [r for r in records if _hears_removals(r)]
    )

    removed = 0
    for record in ordered:
        if not registry.detach(record):
            continue

        removed += 1
        logger.log(
            settings.registration_log_level,
            f"Listener removed: {listener_name(record.callback)} "
            f"from {describe_key(record.key)}",
        )

        announce_removal(registry, record, settings)

        if _hears_removals(record):
            _invoke(
                record,
                (removal_event(record),),
                describe_key(RemoveListenerEvent),
                settings,
            )

    return removed
