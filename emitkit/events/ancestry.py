"""
Emitkit Events - Key Classification & Type Ancestry
===================================================
Name keys are strings, matched by equality.
Type keys are classes, matched against the full ancestry of a
triggered instance, nearest type first.
"""

from __future__ import annotations

import inspect
from typing import Any, Tuple


def is_name_key(key: Any) -> bool:
    return isinstance(key, str)


def is_type_key(key: Any) -> bool:
    return isinstance(key, type)


def ancestor_types_of(instance: Any) -> Tuple[type, ...]:
    """
    Ordered type identities an instance answers to.

    The instance's own type comes first, then every ancestor in method
    resolution order, ending with object. Multiple inheritance follows
    the C3 linearisation, so mixin ancestors are visited exactly once.
    """
    return inspect.getmro(type(instance))
