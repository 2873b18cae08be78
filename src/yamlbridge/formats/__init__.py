# topmark:header:start
#
#   project      : YamlBridge
#   file         : __init__.py
#   file_relpath : src/yamlbridge/formats/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Format backends (parser/emitter collaborators) and their registry."""

from __future__ import annotations

from types import MappingProxyType
from typing import TYPE_CHECKING

from yamlbridge.errors import ConfigurationError
from yamlbridge.formats.base import Format
from yamlbridge.formats.toml_format import TomlFormat
from yamlbridge.formats.yaml_format import YamlFormat

if TYPE_CHECKING:
    from collections.abc import Mapping

_FORMATS: dict[str, Format] = {f.name: f for f in (YamlFormat(), TomlFormat())}

FORMATS: Mapping[str, Format] = MappingProxyType(_FORMATS)


def get_format(name: str) -> Format:
    """Return the registered format backend called ``name``.

    Args:
        name (str): Format name (case-insensitive), e.g. ``"yaml"`` or ``"toml"``.

    Returns:
        Format: The backend.

    Raises:
        ConfigurationError: If no backend is registered under ``name``.
    """
    fmt: Format | None = _FORMATS.get(name.lower())
    if fmt is None:
        known: str = ", ".join(sorted(_FORMATS))
        raise ConfigurationError(f"Unknown format {name!r} (known: {known})")
    return fmt


__all__: list[str] = [
    "FORMATS",
    "Format",
    "TomlFormat",
    "YamlFormat",
    "get_format",
]
