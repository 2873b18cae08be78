# topmark:header:start
#
#   project      : YamlBridge
#   file         : errors.py
#   file_relpath : src/yamlbridge/errors.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Exceptions raised by YamlBridge.

Usage:
    Every data-level failure of `marshal` / `unmarshal` surfaces as a subclass of
    `YamlBridgeError`, so callers can handle all of them with a single ``except``.

    `FatalRuntimeFault` is deliberately *not* a `YamlBridgeError`: it signals a broken
    internal contract (for example a customization hook returning the wrong shape) and
    must propagate through the entry points unchanged.
"""

from __future__ import annotations


class YamlBridgeError(Exception):
    """Base class for all YamlBridge data and configuration errors."""


class ConfigurationError(YamlBridgeError):
    """Error for invalid type metadata or options (duplicate keys, unknown flags)."""


class ParseError(YamlBridgeError):
    """Error for malformed input that the format parser rejected."""


class DecodeError(YamlBridgeError):
    """Error for a tree node that cannot be assigned to its target type."""


class EncodeError(YamlBridgeError):
    """Error for a value that has no encoding rule, or a tree the format cannot render."""


class FatalRuntimeFault(RuntimeError):
    """Error for internal invariant violations; never converted into a `YamlBridgeError`."""
