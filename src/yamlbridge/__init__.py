# topmark:header:start
#
#   project      : YamlBridge
#   file         : __init__.py
#   file_relpath : src/yamlbridge/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""YamlBridge package.

YamlBridge converts dataclass instances, containers and scalars to and from YAML
(or TOML) documents, driven by per-field metadata rather than per-type code. Types
can take over their own conversion through the `Setter` / `Getter` hooks.
"""

from __future__ import annotations

from yamlbridge.api import marshal, unmarshal
from yamlbridge.config.options import MarshalOptions
from yamlbridge.errors import (
    ConfigurationError,
    DecodeError,
    EncodeError,
    FatalRuntimeFault,
    ParseError,
    YamlBridgeError,
)
from yamlbridge.fields import FieldCache, FieldInfo, StructFields, default_cache, yaml_field
from yamlbridge.hooks import Getter, Setter
from yamlbridge.zero import is_zero

__all__: list[str] = [
    "ConfigurationError",
    "DecodeError",
    "EncodeError",
    "FatalRuntimeFault",
    "FieldCache",
    "FieldInfo",
    "Getter",
    "MarshalOptions",
    "ParseError",
    "Setter",
    "StructFields",
    "YamlBridgeError",
    "default_cache",
    "is_zero",
    "marshal",
    "unmarshal",
    "yaml_field",
]
