# topmark:header:start
#
#   project      : YamlBridge
#   file         : decode.py
#   file_relpath : src/yamlbridge/decode.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Decode direction of the traversal engine: generic value tree -> Python values.

Decoding is directed by type hints. For each node the `Decoder` receives the target
hint and the value currently held by the target (so nested dataclasses are updated in
place rather than replaced).

Rules, in order:

1. `Setter` hook of the target type; ``True`` ends decoding of the node.
2. Null nodes become ``None`` (optional/untyped targets) or an empty container.
3. ``Any`` / ``object`` targets receive plain Python values.
4. Unions try their members in order.
5. Sequences, mappings, enums, literals, dataclasses and scalars.

Unknown mapping keys are ignored; keys missing from the input leave the target's
fields untouched. A dataclass with no current value is built from the decoded keys,
so fields without a default must be present in the input.
"""

from __future__ import annotations

import collections.abc as abc
import dataclasses
import datetime
import types
from enum import Enum
from typing import TYPE_CHECKING, Any, Literal, Union, get_args, get_origin

import yaml

from yamlbridge.config.logging import get_logger
from yamlbridge.errors import DecodeError
from yamlbridge.hooks import call_setter, is_setter_type
from yamlbridge.tree import is_null, short_tag

if TYPE_CHECKING:
    from yamlbridge.config.logging import BridgeLogger
    from yamlbridge.fields import FieldCache, StructFields
    from yamlbridge.hooks import Setter
    from yamlbridge.tree import TreeReader

logger: BridgeLogger = get_logger(__name__)

_NONE_TYPE = type(None)

_SEQUENCE_KINDS: dict[Any, type] = {
    list: list,
    tuple: tuple,
    set: set,
    frozenset: frozenset,
    abc.Sequence: list,
    abc.MutableSequence: list,
    abc.Iterable: list,
    abc.Collection: list,
    abc.Set: frozenset,
    abc.MutableSet: set,
}

_MAPPING_KINDS: frozenset[Any] = frozenset({dict, abc.Mapping, abc.MutableMapping})

_SCALAR_KINDS: frozenset[type] = frozenset(
    {str, bool, int, float, bytes, datetime.date, datetime.datetime}
)


def _kind(node: yaml.Node) -> str:
    if isinstance(node, yaml.MappingNode):
        return "mapping"
    if isinstance(node, yaml.SequenceNode):
        return "sequence"
    return f"{short_tag(node.tag)} `{node.value}`"


def _type_name(hint: Any) -> str:
    return hint.__qualname__ if isinstance(hint, type) else repr(hint)


def _is_frozen(cls: type) -> bool:
    params: Any = getattr(cls, "__dataclass_params__", None)
    return bool(params is not None and params.frozen)


class Decoder:
    """Populates Python values from the tree held by a `TreeReader`."""

    def __init__(self, reader: TreeReader, cache: FieldCache) -> None:
        self.reader: TreeReader = reader
        self.cache: FieldCache = cache

    # --- root ---

    def unmarshal_root(self, node: yaml.Node, target: Any) -> None:
        """Decode the document root into a caller-supplied target, in place.

        Args:
            node (yaml.Node): The document root.
            target (Any): A dataclass instance, a `Setter`, a ``dict`` or a ``list``.

        Raises:
            DecodeError: If the target is ``None``, immutable, or incompatible with the
                document.
        """
        if target is None:
            raise DecodeError("Cannot unmarshal into None")

        cls: type = type(target)
        where: str = cls.__qualname__
        if is_setter_type(cls) and self._try_setter(node, target, where):
            return
        if is_null(node):
            logger.trace("Null document leaves %s unchanged", where)
            return

        if dataclasses.is_dataclass(target):
            if _is_frozen(cls):
                raise DecodeError(f"Cannot unmarshal into frozen {where} in place")
            self._struct(node, cls, target, where)
        elif isinstance(target, dict):
            target.update(self._mapping(node, dict, (), where))
        elif isinstance(target, list):
            target[:] = self._sequence(node, list, (), where)
        else:
            raise DecodeError(
                f"Cannot unmarshal into {where}: expected a dataclass instance, "
                "a dict, a list or a Setter"
            )

    # --- dispatch ---

    def unmarshal(self, node: yaml.Node, hint: Any, current: Any, where: str) -> Any:
        """Return the value for ``node`` as directed by ``hint``.

        Args:
            node (yaml.Node): The node to decode.
            hint (Any): Target type hint.
            current (Any): Value currently held by the target, reused for in-place
                decoding of dataclasses and `Setter` types.
            where (str): Dotted location used in error messages.

        Returns:
            Any: The decoded value.

        Raises:
            DecodeError: If the node is incompatible with ``hint``.
        """
        origin: Any = get_origin(hint)
        args: tuple[Any, ...] = get_args(hint)
        cls: type | None = hint if origin is None and isinstance(hint, type) else None

        if cls is not None and is_setter_type(cls):
            target: Any = current if isinstance(current, cls) else self._blank(cls, where)
            if target is not None:
                if self._try_setter(node, target, where):
                    return target
                current = target

        if is_null(node):
            return self._null(hint, origin, args, where)

        if hint is Any or hint is object:
            return self.reader.plain(node)
        if origin is Union or origin is types.UnionType:
            return self._union(node, hint, args, current, where)
        if origin is Literal:
            return self._literal(node, args, where)

        base: Any = origin if origin is not None else hint
        if base in _SEQUENCE_KINDS:
            return self._sequence(node, _SEQUENCE_KINDS[base], args, where)
        if base in _MAPPING_KINDS:
            return self._mapping(node, base, args, where)

        if cls is not None:
            if issubclass(cls, Enum):
                return self._enum(node, cls, where)
            if dataclasses.is_dataclass(cls):
                return self._struct(node, cls, current, where)
            if cls in _SCALAR_KINDS:
                return self._scalar(node, cls, where)
            if cls is _NONE_TYPE:
                raise DecodeError(f"Cannot unmarshal {_kind(node)} into None at {where}")

        raise DecodeError(f"Unsupported target type {_type_name(hint)} at {where}")

    # --- hooks and constructors ---

    def _try_setter(self, node: yaml.Node, target: Setter, where: str) -> bool:
        tag: str = short_tag(node.tag)
        accepted: bool = call_setter(target, tag, self.reader.plain(node))
        logger.trace(
            "Setter of %s %s tag %r at %s",
            type(target).__qualname__,
            "accepted" if accepted else "declined",
            tag,
            where,
        )
        return accepted

    def _blank(self, cls: type, where: str) -> Any:
        """Return a new instance of a Setter type for its hook to populate.

        Returns None for a dataclass that cannot be created without field values; such
        a node is decoded by the default rules instead.
        """
        try:
            return cls()
        except TypeError as exc:
            if dataclasses.is_dataclass(cls):
                logger.trace("No blank %s at %s (%s); decoding its fields", cls.__qualname__, where, exc)
                return None
            raise DecodeError(
                f"Cannot create a {cls.__qualname__} at {where}; a Setter type needs a "
                f"no-argument constructor ({exc})"
            ) from exc

    def _build(self, cls: type, table: StructFields, changes: dict[str, Any], where: str) -> Any:
        """Create a dataclass instance from decoded field values.

        Raises:
            DecodeError: If the input lacks a field that ``__init__`` requires.
        """
        missing: list[str] = [name for name in table.required if name not in changes]
        if missing:
            keys: dict[str, str] = {info.name: info.key for info in table.fields}
            listed: str = ", ".join(repr(keys.get(name, name)) for name in missing)
            raise DecodeError(f"Cannot create a {cls.__qualname__} at {where}: missing required key(s) {listed}")

        init_names: set[str] = {info.name for info in table.fields if info.init}
        obj: Any = cls(**{k: v for k, v in changes.items() if k in init_names})
        # Fields declared with init=False are assigned after construction.
        assign: Any = object.__setattr__ if _is_frozen(cls) else setattr
        for name, value in changes.items():
            if name not in init_names:
                assign(obj, name, value)
        return obj

    # --- per kind ---

    def _null(self, hint: Any, origin: Any, args: tuple[Any, ...], where: str) -> Any:
        if hint is Any or hint is object or hint is _NONE_TYPE:
            return None
        if (origin is Union or origin is types.UnionType) and _NONE_TYPE in args:
            return None
        base: Any = origin if origin is not None else hint
        if base in _SEQUENCE_KINDS:
            return _SEQUENCE_KINDS[base]()
        if base in _MAPPING_KINDS:
            return {}
        raise DecodeError(f"Cannot unmarshal null into {_type_name(hint)} at {where}")

    def _union(
        self, node: yaml.Node, hint: Any, args: tuple[Any, ...], current: Any, where: str
    ) -> Any:
        members: list[Any] = [a for a in args if a is not _NONE_TYPE]
        if len(members) == 1:
            return self.unmarshal(node, members[0], current, where)
        problems: list[str] = []
        for member in members:
            try:
                return self.unmarshal(node, member, current, where)
            except DecodeError as exc:
                problems.append(str(exc))
        raise DecodeError(f"No member of {hint!r} accepts the value at {where}: {'; '.join(problems)}")

    def _literal(self, node: yaml.Node, args: tuple[Any, ...], where: str) -> Any:
        value: Any = self.reader.plain(node)
        if value in args:
            return value
        raise DecodeError(f"Cannot unmarshal {_kind(node)} at {where}: expected one of {args!r}")

    def _sequence(
        self, node: yaml.Node, kind: type, args: tuple[Any, ...], where: str
    ) -> Any:
        if not isinstance(node, yaml.SequenceNode):
            raise DecodeError(f"Cannot unmarshal {_kind(node)} into {kind.__name__} at {where}")
        items: list[yaml.Node] = node.value

        if kind is tuple and args and not (len(args) == 2 and args[1] is Ellipsis):
            if len(args) != len(items):
                raise DecodeError(
                    f"Expected {len(args)} item(s) at {where}, got {len(items)}"
                )
            return tuple(
                self.unmarshal(n, a, None, f"{where}[{i}]")
                for i, (n, a) in enumerate(zip(items, args))
            )

        elem: Any = args[0] if args else Any
        values: list[Any] = [self.unmarshal(n, elem, None, f"{where}[{i}]") for i, n in enumerate(items)]
        try:
            return values if kind is list else kind(values)
        except TypeError as exc:
            raise DecodeError(f"Cannot build a {kind.__name__} at {where}: {exc}") from exc

    def _mapping(self, node: yaml.Node, kind: Any, args: tuple[Any, ...], where: str) -> dict[Any, Any]:
        if not isinstance(node, yaml.MappingNode):
            raise DecodeError(f"Cannot unmarshal {_kind(node)} into {_type_name(kind)} at {where}")
        self.reader.flatten(node)
        key_hint, value_hint = args if len(args) == 2 else (Any, Any)
        out: dict[Any, Any] = {}
        for k_node, v_node in node.value:
            key: Any = self.unmarshal(k_node, key_hint, None, f"{where}.<key>")
            value: Any = self.unmarshal(v_node, value_hint, None, f"{where}.{key}")
            try:
                out[key] = value
            except TypeError as exc:
                raise DecodeError(f"Unhashable mapping key at {where}: {exc}") from exc
        return out

    def _enum(self, node: yaml.Node, cls: type[Enum], where: str) -> Enum:
        if not isinstance(node, yaml.ScalarNode):
            raise DecodeError(f"Cannot unmarshal {_kind(node)} into {cls.__qualname__} at {where}")
        try:
            return cls(self.reader.plain(node))
        except ValueError as exc:
            raise DecodeError(f"Cannot unmarshal {_kind(node)} into {cls.__qualname__} at {where}") from exc

    def _struct(self, node: yaml.Node, cls: type, current: Any, where: str) -> Any:
        if not isinstance(node, yaml.MappingNode):
            raise DecodeError(f"Cannot unmarshal {_kind(node)} into {cls.__qualname__} at {where}")
        existing: Any = current if isinstance(current, cls) else None
        table: StructFields = self.cache.resolve(cls)

        self.reader.flatten(node)
        changes: dict[str, Any] = {}
        for k_node, v_node in node.value:
            # Keys match by source text: `on:` stays "on" rather than becoming True.
            key: str | None = k_node.value if isinstance(k_node, yaml.ScalarNode) else None
            info = table.by_key.get(key) if key is not None else None
            if info is None:
                logger.trace("Ignoring unknown key %r at %s", key, where)
                continue
            held: Any = changes.get(info.name, getattr(existing, info.name, None))
            changes[info.name] = self.unmarshal(v_node, info.hint, held, f"{where}.{info.key}")

        if existing is None:
            return self._build(cls, table, changes, where)
        if _is_frozen(cls):
            try:
                return dataclasses.replace(existing, **changes)
            except (TypeError, ValueError) as exc:
                raise DecodeError(f"Cannot rebuild frozen {cls.__qualname__} at {where}: {exc}") from exc
        for name, value in changes.items():
            setattr(existing, name, value)
        return existing

    def _scalar(self, node: yaml.Node, cls: type, where: str) -> Any:
        if not isinstance(node, yaml.ScalarNode):
            raise DecodeError(f"Cannot unmarshal {_kind(node)} into {cls.__name__} at {where}")
        value: Any = self.reader.plain(node)

        if cls is str:
            return value if isinstance(value, str) else node.value
        if cls is bool:
            if isinstance(value, bool):
                return value
        elif cls is int:
            if isinstance(value, int) and not isinstance(value, bool):
                return value
        elif cls is float:
            if isinstance(value, (int, float)) and not isinstance(value, bool):
                return float(value)
        elif cls is datetime.date:
            if isinstance(value, datetime.date) and not isinstance(value, datetime.datetime):
                return value
        elif isinstance(value, cls):
            return value

        raise DecodeError(f"Cannot unmarshal {_kind(node)} into {cls.__name__} at {where}")
