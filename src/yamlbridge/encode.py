# topmark:header:start
#
#   project      : YamlBridge
#   file         : encode.py
#   file_relpath : src/yamlbridge/encode.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Encode direction of the traversal engine: Python values -> generic value tree.

Dispatch order for each value:

1. `Getter` hook (at most once per value; the substitute is not re-checked).
2. Enum members encode their ``.value``.
3. ``None`` and scalars go through the format's scalar representer.
4. Mappings, then lists/tuples/sets.
5. Dataclass instances, field by field in declaration order, skipping conditional
   fields that hold a zero value.

Cyclic value graphs are not detected and recurse until Python's recursion limit.
"""

from __future__ import annotations

import dataclasses
import datetime
from collections.abc import Mapping, Set
from enum import Enum
from typing import TYPE_CHECKING, Any

from yamlbridge.config.logging import get_logger
from yamlbridge.errors import EncodeError
from yamlbridge.hooks import Getter, call_getter
from yamlbridge.tree import long_tag
from yamlbridge.zero import is_zero

if TYPE_CHECKING:
    import yaml

    from yamlbridge.config.logging import BridgeLogger
    from yamlbridge.fields import FieldCache, StructFields
    from yamlbridge.tree import TreeBuilder

logger: BridgeLogger = get_logger(__name__)

_SCALAR_TYPES: tuple[type, ...] = (str, bytes, bool, int, float, datetime.date)


class Encoder:
    """Walks a value and builds the matching tree with a `TreeBuilder`."""

    def __init__(self, builder: TreeBuilder, cache: FieldCache) -> None:
        self.builder: TreeBuilder = builder
        self.cache: FieldCache = cache

    def marshal(self, tag: str, value: Any) -> yaml.Node:
        """Return the tree node for ``value``.

        Args:
            tag (str): Tag to force on the node; empty keeps the default tag.
            value (Any): The value to encode.

        Returns:
            yaml.Node: The encoded node.

        Raises:
            EncodeError: If no rule applies to the value's type.
        """
        if isinstance(value, Getter) and not isinstance(value, type):
            owner: str = type(value).__qualname__
            tag, value = call_getter(value)
            logger.trace("Getter of %s substituted %s with tag %r", owner, type(value).__qualname__, tag)

        node: yaml.Node = self._marshal_default(value)
        if tag:
            node.tag = long_tag(tag)
        return node

    def _marshal_default(self, value: Any) -> yaml.Node:
        if isinstance(value, Enum):
            return self.marshal("", value.value)
        if value is None or isinstance(value, _SCALAR_TYPES):
            return self.builder.scalar(value)
        if isinstance(value, Mapping):
            return self._marshal_mapping(value)
        if isinstance(value, (list, tuple)):
            return self.builder.sequence([self.marshal("", item) for item in value])
        if isinstance(value, Set):
            return self.builder.sequence([self.marshal("", item) for item in _ordered(value)])
        if dataclasses.is_dataclass(value) and not isinstance(value, type):
            return self._marshal_struct(value)
        raise EncodeError(f"Cannot marshal value of type {type(value).__qualname__}")

    def _marshal_mapping(self, value: Mapping[Any, Any]) -> yaml.MappingNode:
        keys: list[Any] = list(value.keys())
        if self.builder.options.sort_keys:
            keys = _ordered(keys)
        return self.builder.mapping([(self.marshal("", k), self.marshal("", value[k])) for k in keys])

    def _marshal_struct(self, value: Any) -> yaml.MappingNode:
        table: StructFields = self.cache.resolve(type(value))
        pairs: list[tuple[yaml.Node, yaml.Node]] = []
        for info in table.fields:
            field_value: Any = getattr(value, info.name)
            if info.conditional and is_zero(field_value):
                continue
            pairs.append((self.builder.scalar(info.key), self.marshal("", field_value)))
        return self.builder.mapping(pairs)


def _ordered(items: Any) -> list[Any]:
    """Return ``items`` sorted when they are mutually comparable, else in iteration order."""
    try:
        return sorted(items)
    except TypeError:
        return list(items)
