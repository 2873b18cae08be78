# topmark:header:start
#
#   project      : YamlBridge
#   file         : api.py
#   file_relpath : src/yamlbridge/api.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Public entry points: `marshal` and `unmarshal`.

Both functions own the generic value tree for the duration of one call: they create
the format's builder or reader, hand it to the traversal engine, and dispose it on
every exit path.

Error contract
--------------
- Data-level failures raise a `YamlBridgeError` subclass (`ConfigurationError`,
  `ParseError`, `DecodeError`, `EncodeError`). PyYAML errors that escape the format
  layer are converted here, prefixed with ``"YAML error: "``.
- Everything else, notably `FatalRuntimeFault` (broken hook contracts) and
  `RecursionError` (cyclic values), propagates unchanged.

Example:
    ```python
    from dataclasses import dataclass
    from yamlbridge import marshal, unmarshal, yaml_field

    @dataclass
    class Point:
        x: int = yaml_field("x", default=0)
        y: int = yaml_field("y", conditional=True, default=0)

    assert marshal(Point()) == b"x: 0\\n"

    p = Point()
    unmarshal(b"x: 5\\n", p)
    assert p == Point(x=5, y=0)
    ```
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import yaml

from yamlbridge.config.logging import get_logger
from yamlbridge.config.options import DEFAULT_OPTIONS
from yamlbridge.decode import Decoder
from yamlbridge.encode import Encoder
from yamlbridge.errors import DecodeError, EncodeError, ParseError
from yamlbridge.fields import default_cache
from yamlbridge.formats import get_format

if TYPE_CHECKING:
    from yamlbridge.config.logging import BridgeLogger
    from yamlbridge.config.options import MarshalOptions
    from yamlbridge.fields import FieldCache
    from yamlbridge.formats import Format
    from yamlbridge.tree import Node, TreeBuilder, TreeReader

logger: BridgeLogger = get_logger(__name__)


def marshal(
    value: Any,
    *,
    options: MarshalOptions | None = None,
    cache: FieldCache | None = None,
) -> bytes:
    """Serialize ``value`` to bytes.

    Args:
        value (Any): The value to serialize.
        options (MarshalOptions | None): Format and emitter settings; defaults to YAML.
        cache (FieldCache | None): Descriptor cache; defaults to the process-wide one.

    Returns:
        bytes: The rendered UTF-8 document.

    Raises:
        EncodeError: If the value (or part of it) cannot be encoded.
    """
    opts: MarshalOptions = options or DEFAULT_OPTIONS
    fmt: Format = get_format(opts.format)
    fields: FieldCache = cache if cache is not None else default_cache
    builder: TreeBuilder = fmt.open_builder(opts)
    try:
        root: Node = Encoder(builder, fields).marshal("", value)
        out: bytes = builder.finish(root)
    except yaml.YAMLError as exc:
        raise EncodeError(f"YAML error: {exc}") from exc
    finally:
        builder.dispose()
    logger.debug("Marshaled %s as %s (%d bytes)", type(value).__qualname__, fmt.name, len(out))
    return out


def unmarshal(
    data: bytes | str,
    target: Any,
    *,
    options: MarshalOptions | None = None,
    cache: FieldCache | None = None,
) -> None:
    """Parse ``data`` and populate ``target`` in place.

    Keys absent from the document leave the target's fields untouched; unknown keys
    are ignored. An empty document leaves the target unchanged.

    Args:
        data (bytes | str): The serialized document.
        target (Any): A dataclass instance, a `Setter`, a ``dict`` or a ``list``.
        options (MarshalOptions | None): Only ``options.format`` is used.
        cache (FieldCache | None): Descriptor cache; defaults to the process-wide one.

    Raises:
        ParseError: If ``data`` is malformed.
        DecodeError: If the document does not fit ``target``.
    """
    if target is None:
        raise DecodeError("Cannot unmarshal into None")

    opts: MarshalOptions = options or DEFAULT_OPTIONS
    fmt: Format = get_format(opts.format)
    fields: FieldCache = cache if cache is not None else default_cache
    reader: TreeReader = fmt.open_reader(data)
    try:
        if reader.root is None:
            logger.debug("Empty %s document; %s left unchanged", fmt.name, type(target).__qualname__)
            return
        Decoder(reader, fields).unmarshal_root(reader.root, target)
    except yaml.YAMLError as exc:
        raise ParseError(f"YAML error: {exc}") from exc
    finally:
        reader.dispose()
