# topmark:header:start
#
#   project      : YamlBridge
#   file         : hooks.py
#   file_relpath : src/yamlbridge/hooks.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Customization hooks that let a type override its default conversion.

A type opts in by defining the methods below; no base class is needed.

- `Setter.set_yaml(tag, value)` receives the node's short tag (``"!!int"``,
  ``"!point"``) and the node decoded into plain Python values. Returning ``True``
  ends decoding of that node; returning ``False`` falls back to the default rules.
- `Getter.get_yaml()` returns a ``(tag, value)`` pair that is encoded instead of the
  object itself. An empty tag keeps the tag the default rules pick. The substitute
  is not checked for `Getter` again, so returning ``self`` encodes the object with the
  default rules.

Example:
    ```python
    @dataclass
    class Color:
        r: int = 0
        g: int = 0
        b: int = 0

        def get_yaml(self) -> tuple[str, object]:
            return "", f"#{self.r:02x}{self.g:02x}{self.b:02x}"

        def set_yaml(self, tag: str, value: object) -> bool:
            if tag != "!!str" or not str(value).startswith("#"):
                return False
            self.r, self.g, self.b = (int(str(value)[i : i + 2], 16) for i in (1, 3, 5))
            return True
    ```
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from yamlbridge.errors import FatalRuntimeFault


@runtime_checkable
class Setter(Protocol):
    """Capability of a type that decodes itself from a generic value."""

    def set_yaml(self, tag: str, value: Any) -> bool:
        """Populate the object from ``value``; return whether it took responsibility."""
        ...


@runtime_checkable
class Getter(Protocol):
    """Capability of a type that substitutes another value for itself on encode."""

    def get_yaml(self) -> tuple[str, Any]:
        """Return the ``(tag, value)`` pair to encode in place of the object."""
        ...


def is_setter_type(cls: object) -> bool:
    """Return True if instances of ``cls`` implement `Setter`."""
    return isinstance(cls, type) and callable(getattr(cls, "set_yaml", None))


def call_getter(obj: Getter) -> tuple[str, Any]:
    """Invoke ``obj.get_yaml()`` and check the shape of its result.

    Raises:
        FatalRuntimeFault: If the hook does not return a ``(str, value)`` pair.
    """
    result: Any = obj.get_yaml()
    if not (isinstance(result, tuple) and len(result) == 2 and isinstance(result[0], str)):
        raise FatalRuntimeFault(
            f"{type(obj).__qualname__}.get_yaml() must return (tag, value), got {result!r}"
        )
    return result[0], result[1]


def call_setter(obj: Setter, tag: str, value: Any) -> bool:
    """Invoke ``obj.set_yaml(tag, value)`` and check that it answered with a bool.

    Raises:
        FatalRuntimeFault: If the hook returns anything but a bool.
    """
    accepted: Any = obj.set_yaml(tag, value)
    if not isinstance(accepted, bool):
        raise FatalRuntimeFault(
            f"{type(obj).__qualname__}.set_yaml() must return a bool, got {accepted!r}"
        )
    return accepted
