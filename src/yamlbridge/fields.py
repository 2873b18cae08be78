# topmark:header:start
#
#   project      : YamlBridge
#   file         : fields.py
#   file_relpath : src/yamlbridge/fields.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Field descriptor cache for dataclass types.

For every dataclass that crosses the traversal engine, YamlBridge derives a
`StructFields` table: the mapping from serialized key to field position and flags.
The table is computed once per type identity and shared by all later calls.

Field annotations live in the dataclass field metadata under the ``"yaml"`` key:

```python
@dataclass
class Point:
    x: int = yaml_field("x")
    y: int = yaml_field("y", conditional=True)   # same as metadata={"yaml": "y,c"}
    label: str = ""                              # key derived as "label"
```

The text after the last ``,`` is a flag segment. ``c`` marks the field conditional
(omitted on encode when zero); any other flag is a `ConfigurationError`. An empty key
part derives the key from the lowercased field name. Fields whose name starts with
``_`` are private and never serialized.

Notes:
    - Reads are lock-free dict lookups. Publishing a new table takes a lock around the
      dict write only, so concurrent first use of *different* types never waits on a
      descriptor computation. Concurrent first use of the *same* type may compute
      twice; the last writer wins. Both tables are equal, since computing one has
      no side effects.
    - Failed resolutions (duplicate keys, bad flags) are never cached.
    - Classes defined inside functions (``<locals>`` in ``__qualname__``) are never
      cached: distinct classes can share such an identity.
"""

from __future__ import annotations

import dataclasses
import threading
from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, ForwardRef, get_type_hints

from yamlbridge.config.logging import get_logger
from yamlbridge.constants import FIELD_METADATA_KEY, FLAG_CONDITIONAL, FLAG_SEPARATOR
from yamlbridge.errors import ConfigurationError

if TYPE_CHECKING:
    from collections.abc import Mapping

    from yamlbridge.config.logging import BridgeLogger

logger: BridgeLogger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class FieldInfo:
    """Descriptor of one serializable dataclass field.

    Attributes:
        key (str): Serialized name, unique within the owning type.
        num (int): Position of the field in ``dataclasses.fields()`` order.
        name (str): Python attribute name used to read and write the field.
        conditional (bool): Omit the field on encode when its value is zero.
        hint (Any): Resolved type hint driving decode (``Any`` when unresolvable).
        init (bool): Whether the field is a parameter of the generated ``__init__``.
    """

    key: str
    num: int
    name: str
    conditional: bool = False
    hint: Any = Any
    init: bool = True


@dataclass(frozen=True, slots=True)
class StructFields:
    """Descriptor table of a dataclass type.

    Attributes:
        by_key (Mapping[str, FieldInfo]): Read-only mapping from serialized key to field.
        fields (tuple[FieldInfo, ...]): Fields in declaration order.
        required (tuple[str, ...]): Names of ``__init__`` parameters without a default,
            private fields included. A new instance can only be built when all of them
            are decoded.
    """

    by_key: Mapping[str, FieldInfo]
    fields: tuple[FieldInfo, ...]
    required: tuple[str, ...] = ()


def type_identity(cls: type) -> str:
    """Return the process-wide identity of a type (``"<module>.<qualname>"``)."""
    module: str = getattr(cls, "__module__", "") or ""
    qualname: str = getattr(cls, "__qualname__", "") or ""
    return f"{module}.{qualname}"


def is_anonymous(cls: type) -> bool:
    """Return True when a type's identity cannot tell it apart from other types.

    Args:
        cls (type): The type to inspect.

    Returns:
        bool: True for types without a module or name, and for classes defined inside a
        function body.
    """
    module: str = getattr(cls, "__module__", "") or ""
    qualname: str = getattr(cls, "__qualname__", "") or ""
    return not module or not qualname or "<locals>" in qualname


def parse_annotation(annotation: str, field_name: str) -> tuple[str, bool]:
    """Split a field annotation into its serialized key and conditional flag.

    Args:
        annotation (str): Annotation text, e.g. ``"y,c"``, ``",c"`` or ``"name"``.
        field_name (str): Python field name, used when the annotation has no key.

    Returns:
        tuple[str, bool]: The serialized key and whether the field is conditional.

    Raises:
        ConfigurationError: If the flag segment contains an unsupported flag.
    """
    conditional = False
    key: str = annotation
    sep: int = annotation.rfind(FLAG_SEPARATOR)
    if sep != -1:
        for flag in annotation[sep + 1 :]:
            if flag == FLAG_CONDITIONAL:
                conditional = True
            else:
                raise ConfigurationError(
                    f"Unsupported field flag {flag!r} on field {field_name!r}"
                )
        key = annotation[:sep]
    return (key or field_name.lower()), conditional


def yaml_field(key: str = "", *, conditional: bool = False, **kwargs: Any) -> Any:
    """Return a `dataclasses.field` carrying a YamlBridge annotation.

    Args:
        key (str): Serialized name; empty derives it from the lowercased field name.
        conditional (bool): Omit the field on encode when its value is zero.
        **kwargs (Any): Forwarded to `dataclasses.field` (``default``,
            ``default_factory``, ...).

    Returns:
        Any: The field specifier to assign in the class body.
    """
    annotation: str = key + (FLAG_SEPARATOR + FLAG_CONDITIONAL if conditional else "")
    metadata: dict[str, Any] = dict(kwargs.pop("metadata", None) or {})
    metadata[FIELD_METADATA_KEY] = annotation
    return dataclasses.field(metadata=metadata, **kwargs)


def _resolve_field_hint(cls: type, f: dataclasses.Field[Any]) -> Any:
    """Resolve the annotation of a single field.

    The annotation is evaluated in the namespace of every dataclass in the MRO that
    declares the field, most derived first. A field whose annotation names something
    that only exists for type checkers (``if TYPE_CHECKING:`` imports) gets ``Any``.

    Args:
        cls (type): The dataclass type.
        f (dataclasses.Field[Any]): One of its fields.

    Returns:
        Any: The resolved hint, or ``Any``.
    """
    if not isinstance(f.type, (str, ForwardRef)):
        return f.type
    for base in cls.__mro__:
        if f.name not in base.__dict__.get("__dataclass_fields__", {}):
            continue
        holder: type = type(
            base.__name__,
            (),
            {"__annotations__": {f.name: f.type}, "__module__": base.__module__},
        )
        try:
            return get_type_hints(holder, localns=dict(vars(base)))[f.name]
        except (NameError, TypeError, AttributeError):
            continue
    logger.warning(
        "Cannot resolve the type of %s.%s (%r); it decodes as a plain value",
        type_identity(cls),
        f.name,
        f.type,
    )
    return Any


def _resolve_hints(cls: type) -> dict[str, Any]:
    try:
        return get_type_hints(cls)
    except (NameError, TypeError, AttributeError) as exc:
        logger.debug("Resolving type hints of %s field by field: %s", type_identity(cls), exc)
    return {f.name: _resolve_field_hint(cls, f) for f in dataclasses.fields(cls)}


def compute_struct_fields(cls: type) -> StructFields:
    """Compute the descriptor table of a dataclass type without caching it.

    Args:
        cls (type): A dataclass type.

    Returns:
        StructFields: The descriptor table.

    Raises:
        TypeError: If ``cls`` is not a dataclass type.
        ConfigurationError: If two visible fields share a serialized key, or a field
            annotation carries an unsupported flag.
    """
    if not (isinstance(cls, type) and dataclasses.is_dataclass(cls)):
        raise TypeError(f"{cls!r} is not a dataclass type")

    hints: dict[str, Any] = _resolve_hints(cls)
    by_key: dict[str, FieldInfo] = {}
    ordered: list[FieldInfo] = []
    required: list[str] = []

    for num, f in enumerate(dataclasses.fields(cls)):
        if f.init and f.default is dataclasses.MISSING and f.default_factory is dataclasses.MISSING:
            required.append(f.name)
        if f.name.startswith("_"):
            continue  # Private field

        annotation: str = str(f.metadata.get(FIELD_METADATA_KEY, ""))
        key, conditional = parse_annotation(annotation, f.name)
        hint: Any = hints.get(f.name, Any)

        if key in by_key:
            raise ConfigurationError(f"Duplicated key {key!r} in struct {type_identity(cls)}")

        info = FieldInfo(
            key=key, num=num, name=f.name, conditional=conditional, hint=hint, init=f.init
        )
        by_key[key] = info
        ordered.append(info)

    return StructFields(
        by_key=MappingProxyType(by_key), fields=tuple(ordered), required=tuple(required)
    )


class FieldCache:
    """Process-wide store of `StructFields` tables keyed by type identity.

    Instances are independent; tests create their own to stay isolated from
    `default_cache`.
    """

    def __init__(self) -> None:
        self._tables: dict[str, StructFields] = {}
        self._lock = threading.Lock()

    def resolve(self, cls: type) -> StructFields:
        """Return the descriptor table of ``cls``, computing and caching it on first use.

        Args:
            cls (type): A dataclass type.

        Returns:
            StructFields: The shared descriptor table.

        Raises:
            TypeError: If ``cls`` is not a dataclass type.
            ConfigurationError: If the type's field metadata is invalid.
        """
        identity: str = type_identity(cls)
        found: StructFields | None = self._tables.get(identity)
        if found is not None:
            return found

        table: StructFields = compute_struct_fields(cls)

        if is_anonymous(cls):
            logger.trace("Not caching fields of anonymous type %s", identity)
            return table

        with self._lock:
            self._tables[identity] = table
        logger.debug("Resolved %d field(s) for %s", len(table.fields), identity)
        return table

    def __contains__(self, cls: object) -> bool:
        return isinstance(cls, type) and type_identity(cls) in self._tables

    def __len__(self) -> int:
        return len(self._tables)

    def clear(self) -> None:
        """Drop all cached tables."""
        with self._lock:
            self._tables.clear()


default_cache: FieldCache = FieldCache()
