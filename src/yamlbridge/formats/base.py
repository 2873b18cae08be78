# topmark:header:start
#
#   project      : YamlBridge
#   file         : base.py
#   file_relpath : src/yamlbridge/formats/base.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Format backend contract.

A format turns bytes into a generic value tree (`open_reader`) and a generic value
tree back into bytes (`open_builder` + `TreeBuilder.finish`). The returned reader or
builder belongs to a single call; the caller disposes it.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, ClassVar

if TYPE_CHECKING:
    from yamlbridge.config.options import MarshalOptions
    from yamlbridge.tree import TreeBuilder, TreeReader


class Format(ABC):
    """Parser/emitter pair for one textual format."""

    name: ClassVar[str]

    @abstractmethod
    def open_reader(self, data: bytes | str) -> TreeReader:
        """Parse ``data`` and return a reader over the resulting tree.

        Raises:
            ParseError: If ``data`` is not a well-formed document.
        """

    @abstractmethod
    def open_builder(self, options: MarshalOptions) -> TreeBuilder:
        """Return a fresh builder configured by ``options``."""
