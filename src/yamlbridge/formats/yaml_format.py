# topmark:header:start
#
#   project      : YamlBridge
#   file         : yaml_format.py
#   file_relpath : src/yamlbridge/formats/yaml_format.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""YAML format backend (PyYAML).

Parsing composes a single document with `BridgeLoader` (a `yaml.SafeLoader`);
rendering serializes the node tree with `yaml.SafeDumper`. No Python objects are
constructed or represented beyond plain scalars, so no unsafe tags are ever honored.
"""

from __future__ import annotations

import io
from typing import TYPE_CHECKING

import yaml

from yamlbridge.config.logging import get_logger
from yamlbridge.errors import EncodeError, ParseError
from yamlbridge.formats.base import Format
from yamlbridge.tree import BridgeLoader, TreeBuilder, TreeReader

if TYPE_CHECKING:
    from yamlbridge.config.logging import BridgeLogger
    from yamlbridge.config.options import MarshalOptions

logger: BridgeLogger = get_logger(__name__)


class YamlReader(TreeReader):
    """Reader over one YAML document."""

    def __init__(self, data: bytes | str) -> None:
        super().__init__(BridgeLoader(data))
        try:
            self.root = self._loader.get_single_node()
        except yaml.YAMLError as exc:
            self._loader.dispose()
            raise ParseError(f"YAML error: {exc}") from exc


class YamlBuilder(TreeBuilder):
    """Builder that serializes the tree as one YAML document."""

    def finish(self, root: yaml.Node) -> bytes:
        """Serialize ``root`` to UTF-8 YAML.

        Raises:
            EncodeError: If the serializer rejects the tree.
        """
        stream = io.BytesIO()
        dumper = yaml.SafeDumper(
            stream,
            default_flow_style=self.options.default_flow_style,
            indent=self.options.indent,
            width=self.options.width,
            allow_unicode=self.options.allow_unicode,
            encoding="utf-8",
            explicit_start=self.options.explicit_start,
            sort_keys=self.options.sort_keys,
        )
        try:
            dumper.open()
            dumper.serialize(root)
            dumper.close()
        except yaml.YAMLError as exc:
            raise EncodeError(f"YAML error: {exc}") from exc
        finally:
            dumper.dispose()
        out: bytes = stream.getvalue()
        logger.trace("Rendered %d byte(s) of YAML", len(out))
        return out


class YamlFormat(Format):
    """The default format."""

    name = "yaml"

    def open_reader(self, data: bytes | str) -> YamlReader:
        return YamlReader(data)

    def open_builder(self, options: MarshalOptions) -> YamlBuilder:
        return YamlBuilder(options)
