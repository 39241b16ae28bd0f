"""
Emitkit Config - Emitter Settings
=================================
Per-emitter behaviour that callers may tune without subclassing:
how loudly listener failures are logged, whether registrations are
logged at INFO, and how a typed event's ancestry is resolved.

Settings are immutable. An emitter captures its settings when its
registry is first created.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional, Sequence


AncestryResolver = Callable[[Any], Sequence[type]]

_VALID_LEVELS = frozenset({
    logging.DEBUG,
    logging.INFO,
    logging.WARNING,
    logging.ERROR,
    logging.CRITICAL,
})


# ══════════════════════════════════════════════════════════════
# EMITTER SETTINGS
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class EmitterSettings:
    """
    Emitter behaviour switches.

    failure_log_level: level used when a listener raises during dispatch.
    log_registrations: log on/off at INFO instead of DEBUG.
    ancestry:          resolver returning the types a triggered instance
                       answers to, nearest first. None uses the MRO.
    """

    failure_log_level: int = logging.ERROR
    log_registrations: bool = False
    ancestry: Optional[AncestryResolver] = None

    def __post_init__(self) -> None:
        if self.failure_log_level not in _VALID_LEVELS:
            raise ValueError(
                f"failure_log_level must be a standard logging level, "
                f"got {self.failure_log_level!r}."
            )
        if self.ancestry is not None and not callable(self.ancestry):
            raise ValueError(
                f"ancestry must be callable, got {type(self.ancestry).__name__}."
            )

    @property
    def registration_log_level(self) -> int:
        return logging.INFO if self.log_registrations else logging.DEBUG


DEFAULT_SETTINGS = EmitterSettings()
