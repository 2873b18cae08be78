# topmark:header:start
#
#   project      : YamlBridge
#   file         : toml_format.py
#   file_relpath : src/yamlbridge/formats/toml_format.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""TOML format backend (tomlkit).

TOML documents are bridged through plain Python data:

- parsing: ``tomlkit.parse()`` -> ``unwrap()`` -> represented as a node tree;
- rendering: node tree -> constructed plain data -> `None` stripped -> ``tomlkit.dumps()``.

TOML has no `null`, so `None` entries are dropped when rendering, and a document root
must be a table (mapping). Custom tags do not survive a TOML round trip.
"""

from __future__ import annotations

import io
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, cast

import tomlkit
import yaml
from tomlkit.exceptions import TOMLKitError

from yamlbridge.config.logging import get_logger
from yamlbridge.errors import EncodeError, ParseError
from yamlbridge.formats.base import Format
from yamlbridge.tree import BridgeLoader, TreeBuilder, TreeReader

if TYPE_CHECKING:
    from yamlbridge.config.logging import BridgeLogger
    from yamlbridge.config.options import MarshalOptions

logger: BridgeLogger = get_logger(__name__)


def _strip_none_for_toml(value: object) -> object:
    """Remove TOML-incompatible `None` from mappings/lists.

    Mapping keys are normalized to strings, since TOML tables are string-keyed.
    """
    if isinstance(value, Mapping):
        out: dict[str, object] = {}
        m: Mapping[object, object] = cast("Mapping[object, object]", value)
        for k_any, v_any in m.items():
            if v_any is None:
                logger.debug("Ignoring `None` entry in Mapping for key %s", k_any)
                continue
            k: str = k_any if isinstance(k_any, str) else str(k_any)
            out[k] = _strip_none_for_toml(v_any)
        return out

    if isinstance(value, (list, tuple)):
        out_list: list[object] = []
        for v_any in cast("list[object]", value):
            if v_any is None:
                logger.debug("Ignoring `None` entry in list")
                continue
            out_list.append(_strip_none_for_toml(v_any))
        return out_list

    return value


class TomlReader(TreeReader):
    """Reader over one TOML document."""

    def __init__(self, data: bytes | str) -> None:
        super().__init__(BridgeLoader(""))
        try:
            text: str = data.decode("utf-8") if isinstance(data, bytes) else data
            doc: tomlkit.TOMLDocument = tomlkit.parse(text)
        except (TOMLKitError, UnicodeDecodeError) as exc:
            self._loader.dispose()
            raise ParseError(f"TOML error: {exc}") from exc

        plain: Any = doc.unwrap()
        representer = yaml.SafeDumper(io.StringIO(), sort_keys=False)
        try:
            self.root = representer.represent_data(plain) if plain else None
        except yaml.YAMLError as exc:
            # e.g. TOML local times, which YAML has no scalar for
            self._loader.dispose()
            raise ParseError(f"TOML error: {exc}") from exc
        finally:
            representer.dispose()


class TomlBuilder(TreeBuilder):
    """Builder that renders the tree as a TOML document."""

    def finish(self, root: yaml.Node) -> bytes:
        """Render ``root`` to UTF-8 TOML.

        Raises:
            EncodeError: If the root is not a mapping, or a value has no TOML form.
        """
        if not isinstance(root, yaml.MappingNode):
            raise EncodeError("TOML documents must have a table (mapping) at the root")

        loader = BridgeLoader("")
        try:
            data: Any = loader.construct_document(root)
        except yaml.YAMLError as exc:
            raise EncodeError(f"YAML error: {exc}") from exc
        finally:
            loader.dispose()

        cleaned: Any = _strip_none_for_toml(data)
        try:
            text: str = tomlkit.dumps(cast("Mapping[str, Any]", cleaned))
        except (TypeError, ValueError) as exc:
            raise EncodeError(f"TOML error: {exc}") from exc
        return text.encode("utf-8")


class TomlFormat(Format):
    """TOML documents through tomlkit."""

    name = "toml"

    def open_reader(self, data: bytes | str) -> TomlReader:
        return TomlReader(data)

    def open_builder(self, options: MarshalOptions) -> TomlBuilder:
        return TomlBuilder(options)
