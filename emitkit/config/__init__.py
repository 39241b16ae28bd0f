"""
Emitkit Config - Public API
===========================
"""

from emitkit.config.settings import (
    DEFAULT_SETTINGS,
    AncestryResolver,
    EmitterSettings,
)

__all__ = [
    "DEFAULT_SETTINGS",
    "AncestryResolver",
    "EmitterSettings",
]
