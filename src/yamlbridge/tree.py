# topmark:header:start
#
#   project      : YamlBridge
#   file         : tree.py
#   file_relpath : src/yamlbridge/tree.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Generic value tree shared by all format backends.

The tree is PyYAML's node graph: `yaml.ScalarNode`, `yaml.SequenceNode` and
`yaml.MappingNode`, each carrying a tag. Format backends subclass:

- `TreeReader`: owns the parsed root node and a constructor that turns nodes into
  plain Python values;
- `TreeBuilder`: owns a representer for scalars and renders a finished tree.

Both own PyYAML state and must be disposed when the call that created them ends.
"""

from __future__ import annotations

import io
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

import yaml

from yamlbridge.constants import YAML_TAG_PREFIX, YAML_TAG_SHORTHAND
from yamlbridge.errors import DecodeError, EncodeError

if TYPE_CHECKING:
    from yamlbridge.config.options import MarshalOptions

Node = yaml.Node


def short_tag(tag: str | None) -> str:
    """Return ``tag`` with the core YAML prefix abbreviated (``"!!int"``)."""
    if not tag:
        return ""
    if tag.startswith(YAML_TAG_PREFIX):
        return YAML_TAG_SHORTHAND + tag[len(YAML_TAG_PREFIX) :]
    return tag


def long_tag(tag: str | None) -> str:
    """Return ``tag`` with the ``!!`` shorthand expanded to the core YAML prefix."""
    if not tag:
        return ""
    if tag.startswith(YAML_TAG_SHORTHAND):
        return YAML_TAG_PREFIX + tag[len(YAML_TAG_SHORTHAND) :]
    return tag


class BridgeLoader(yaml.SafeLoader):
    """`yaml.SafeLoader` that builds plain values for unknown tags instead of failing."""


def _construct_untagged(loader: BridgeLoader, node: yaml.Node) -> Any:
    if isinstance(node, yaml.ScalarNode):
        return loader.construct_scalar(node)
    if isinstance(node, yaml.SequenceNode):
        return loader.construct_sequence(node, deep=True)
    return loader.construct_mapping(node, deep=True)  # type: ignore[arg-type]


BridgeLoader.add_constructor(None, _construct_untagged)


def is_null(node: yaml.Node) -> bool:
    return isinstance(node, yaml.ScalarNode) and node.tag == YAML_TAG_PREFIX + "null"


class TreeReader(ABC):
    """Parsed tree plus the constructor used to read plain values from it.

    Attributes:
        root (yaml.Node | None): The document root, or None for an empty document.
    """

    root: yaml.Node | None

    def __init__(self, loader: BridgeLoader) -> None:
        self._loader: BridgeLoader = loader

    def plain(self, node: yaml.Node) -> Any:
        """Return ``node`` converted to plain Python values.

        Raises:
            DecodeError: If the node cannot be constructed (e.g. unhashable keys).
        """
        try:
            return self._loader.construct_document(node)
        except yaml.YAMLError as exc:
            raise DecodeError(f"YAML error: {exc}") from exc

    def flatten(self, node: yaml.MappingNode) -> None:
        """Resolve merge keys (``<<``) of a mapping node in place."""
        try:
            self._loader.flatten_mapping(node)
        except yaml.YAMLError as exc:
            raise DecodeError(f"YAML error: {exc}") from exc

    def dispose(self) -> None:
        self._loader.dispose()


class TreeBuilder(ABC):
    """Factory for tree nodes plus the renderer of a finished tree."""

    def __init__(self, options: MarshalOptions) -> None:
        self.options: MarshalOptions = options
        self._representer = yaml.SafeDumper(io.StringIO())

    def scalar(self, value: Any) -> yaml.Node:
        """Return the scalar node the format's representer picks for ``value``.

        Raises:
            EncodeError: If the representer has no rule for the value's type.
        """
        try:
            node: yaml.Node = self._representer.represent_data(value)
        except yaml.representer.RepresenterError as exc:
            raise EncodeError(f"YAML error: {exc}") from exc
        finally:
            # Each value gets its own node; no anchors between scalars.
            self._representer.represented_objects.clear()
            self._representer.object_keeper.clear()
        return node

    def sequence(self, items: list[yaml.Node]) -> yaml.SequenceNode:
        return yaml.SequenceNode(
            YAML_TAG_PREFIX + "seq", items, flow_style=self.options.default_flow_style
        )

    def mapping(self, pairs: list[tuple[yaml.Node, yaml.Node]]) -> yaml.MappingNode:
        return yaml.MappingNode(
            YAML_TAG_PREFIX + "map", pairs, flow_style=self.options.default_flow_style
        )

    @abstractmethod
    def finish(self, root: yaml.Node) -> bytes:
        """Render the finished tree to bytes."""

    def dispose(self) -> None:
        self._representer.dispose()
