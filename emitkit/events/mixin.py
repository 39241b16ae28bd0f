"""
Emitkit Events - Mixin Installer
================================
Grants the emitter surface to an existing class in place.

Rules:
- The host keeps its identity, bases, MRO and constructor
- Instances stay instances of the host and all of its ancestors
- Each instance gets its own registry, lazily, on first emitter call
- Installing twice is a no-op
- A host that defines any surface name itself is rejected
"""

from __future__ import annotations

import logging
from typing import Optional

from emitkit.config.settings import EmitterSettings
from emitkit.events.emitter import EmitterMixin
from emitkit.events.errors import MixinConflictError

logger = logging.getLogger("emitkit.events")

MIXIN_SURFACE = (
    "on",
    "once",
    "off",
    "clear_listeners",
    "trigger",
    "has_listeners",
    "listener_count",
    "event_keys",
)


def install_into(
    host_type: type,
    settings: Optional[EmitterSettings] = None,
) -> type:
    """
    Install the emitter surface onto host_type and return it.

    Usable as a class decorator:

        @install_into
        class Document: ...

    Args:
        host_type: Class to extend (mutated in place).
        settings:  EmitterSettings for every instance of host_type.

    Raises:
        TypeError:          host_type is not a class
        MixinConflictError: host_type already defines a surface name
    """
    if not isinstance(host_type, type):
        raise TypeError(
            f"install_into expects a class, got {type(host_type).__name__}."
        )

    for name in MIXIN_SURFACE:
        existing = getattr(host_type, name, None)
        if existing is not None and existing is not EmitterMixin.__dict__[name]:
            raise MixinConflictError(host_type, name)

    for name in MIXIN_SURFACE:
        setattr(host_type, name, EmitterMixin.__dict__[name])

    if settings is not None:
        host_type._emitter_settings = settings
    elif not hasattr(host_type, "_emitter_settings"):
        host_type._emitter_settings = EmitterMixin._emitter_settings

    logger.debug(f"Emitter installed into {host_type.__qualname__}")
    return host_type
