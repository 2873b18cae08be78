# topmark:header:start
#
#   project      : YamlBridge
#   file         : __init__.py
#   file_relpath : src/yamlbridge/config/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Options and logging setup for YamlBridge."""

from __future__ import annotations

from yamlbridge.config.logging import setup_logging
from yamlbridge.config.options import DEFAULT_OPTIONS, MarshalOptions

__all__: list[str] = [
    "DEFAULT_OPTIONS",
    "MarshalOptions",
    "setup_logging",
]
