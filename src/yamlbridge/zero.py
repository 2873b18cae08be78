# topmark:header:start
#
#   project      : YamlBridge
#   file         : zero.py
#   file_relpath : src/yamlbridge/zero.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Zero-value classification for conditional field omission.

Only scalars and containers can be zero. Dataclass instances (and every other
object) are never zero: omitting a nested structure has to be decided by its own
conditional fields.
"""

from __future__ import annotations

from collections.abc import Mapping, Set
from enum import Enum


def is_zero(value: object) -> bool:
    """Return True if ``value`` is the zero value of its kind.

    Args:
        value (object): The field value to classify.

    Returns:
        bool: True for ``None``, empty text or bytes, ``False``, numeric zero and
        empty lists, tuples, sets and mappings.
    """
    if value is None:
        return True
    if isinstance(value, Enum):
        return False
    if isinstance(value, bool):
        return not value
    if isinstance(value, (int, float)):
        return value == 0
    if isinstance(value, (str, bytes, list, tuple, Set, Mapping)):
        return len(value) == 0
    return False
