# topmark:header:start
#
#   project      : YamlBridge
#   file         : options.py
#   file_relpath : src/yamlbridge/config/options.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Marshaling options.

`MarshalOptions` is an immutable snapshot passed to the entry points. It selects the
format backend and carries the emitter settings. Options are always supplied in code;
YamlBridge does not read configuration files.
"""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from typing import Any

from yamlbridge.config.logging import get_logger
from yamlbridge.constants import DEFAULT_FORMAT
from yamlbridge.errors import ConfigurationError

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class MarshalOptions:
    """Settings for one `marshal` / `unmarshal` call.

    Attributes:
        format (str): Name of the format backend (``"yaml"`` or ``"toml"``).
        indent (int): Emitter indentation in spaces.
        width (int): Preferred maximum line width of the emitted text.
        allow_unicode (bool): Emit non-ASCII characters without escaping.
        default_flow_style (bool): Emit collections in flow style (``{a: 1}``).
        explicit_start (bool): Start the document with ``---``.
        sort_keys (bool): Sort the keys of plain mappings. Dataclass fields are always
            emitted in declaration order.
    """

    format: str = DEFAULT_FORMAT
    indent: int = 2
    width: int = 80
    allow_unicode: bool = True
    default_flow_style: bool = False
    explicit_start: bool = False
    sort_keys: bool = False

    def with_overrides(self, **overrides: Any) -> MarshalOptions:
        """Return a copy with the given options replaced.

        Args:
            **overrides (Any): Option names and their new values.

        Returns:
            MarshalOptions: The updated options.

        Raises:
            ConfigurationError: If an override names an unknown option.
        """
        known: set[str] = {f.name for f in fields(self)}
        unknown: list[str] = sorted(set(overrides) - known)
        if unknown:
            raise ConfigurationError(f"Unknown marshal option(s): {', '.join(unknown)}")
        logger.debug("Overriding marshal options: %s", overrides)
        return replace(self, **overrides)


DEFAULT_OPTIONS: MarshalOptions = MarshalOptions()
