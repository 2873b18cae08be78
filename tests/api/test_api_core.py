# topmark:header:start
#
#   project      : YamlBridge
#   file         : test_api_core.py
#   file_relpath : tests/api/test_api_core.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Tests for the `marshal` / `unmarshal` entry points and their error contract."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import pytest

from tests.conftest import parametrize
from yamlbridge import (
    ConfigurationError,
    DecodeError,
    EncodeError,
    MarshalOptions,
    ParseError,
    YamlBridgeError,
    default_cache,
    marshal,
    unmarshal,
    yaml_field,
)
from yamlbridge.tree import TreeBuilder, TreeReader

if TYPE_CHECKING:
    from yamlbridge.fields import FieldCache


@dataclass
class Point:
    x: int = yaml_field("x", default=0)
    y: int = yaml_field("y", conditional=True, default=0)


@dataclass
class Clash:
    first: int = yaml_field("same", default=0)
    second: int = yaml_field("same", default=0)


@dataclass
class Config:
    name: str = ""
    tags: list[str] = field(default_factory=list)
    origin: Point = field(default_factory=Point)
    _secret: str = "keep"


@dataclass
class UsesDefaultCache:
    value: int = 0


def test_marshal_then_unmarshal(cache: FieldCache) -> None:
    original = Config(name="demo", tags=["a", "b"], origin=Point(1, 2), _secret="mine")
    out: bytes = marshal(original, cache=cache)
    assert out == b"name: demo\ntags:\n- a\n- b\norigin:\n  x: 1\n  y: 2\n"

    restored = Config()
    unmarshal(out, restored, cache=cache)
    assert restored == Config(name="demo", tags=["a", "b"], origin=Point(1, 2))


def test_unmarshal_accepts_text(cache: FieldCache) -> None:
    p = Point()
    unmarshal("x: 4\ny: 2\n", p, cache=cache)
    assert p == Point(4, 2)


@parametrize(
    "document",
    [
        b"key: [unclosed\n",
        b"a: 1\n b: 2\n",
        b"- 1\n---\n- 2\n",
        b"\t- tab\n",
    ],
)
def test_malformed_input_raises_parse_error(cache: FieldCache, document: bytes) -> None:
    with pytest.raises(ParseError, match="YAML error"):
        unmarshal(document, Point(), cache=cache)


def test_errors_share_a_base(cache: FieldCache) -> None:
    with pytest.raises(YamlBridgeError):
        unmarshal(b"x: [1]\n", Point(), cache=cache)


def test_unmarshal_into_none() -> None:
    with pytest.raises(DecodeError, match="None"):
        unmarshal(b"x: 1\n", None)


def test_duplicate_keys_are_a_configuration_error(cache: FieldCache) -> None:
    with pytest.raises(ConfigurationError, match="Duplicated key 'same'"):
        marshal(Clash(), cache=cache)
    with pytest.raises(ConfigurationError, match="Duplicated key 'same'"):
        unmarshal(b"same: 1\n", Clash(), cache=cache)


def test_unknown_format() -> None:
    with pytest.raises(ConfigurationError, match="Unknown format 'xml'"):
        marshal({"a": 1}, options=MarshalOptions(format="xml"))
    with pytest.raises(ConfigurationError, match="Unknown format 'xml'"):
        unmarshal(b"a: 1\n", {}, options=MarshalOptions(format="xml"))


def test_format_names_are_case_insensitive(cache: FieldCache) -> None:
    assert marshal({"a": 1}, options=MarshalOptions(format="YAML"), cache=cache) == b"a: 1\n"


def test_default_cache_is_used_without_an_explicit_cache() -> None:
    marshal(UsesDefaultCache(3))
    assert UsesDefaultCache in default_cache


def test_explicit_cache_is_used(cache: FieldCache) -> None:
    unmarshal(b"x: 1\n", Point(), cache=cache)
    assert Point in cache
    assert len(cache) == 1


def test_builder_is_disposed_on_failure(
    cache: FieldCache, monkeypatch: pytest.MonkeyPatch
) -> None:
    calls: list[str] = []
    original = TreeBuilder.dispose

    def spy(self: TreeBuilder) -> None:
        calls.append(type(self).__name__)
        original(self)

    monkeypatch.setattr(TreeBuilder, "dispose", spy)
    with pytest.raises(EncodeError):
        marshal({"a": object()}, cache=cache)
    marshal({"a": 1}, cache=cache)
    assert calls == ["YamlBuilder", "YamlBuilder"]


def test_reader_is_disposed_on_failure(
    cache: FieldCache, monkeypatch: pytest.MonkeyPatch
) -> None:
    calls: list[str] = []
    original = TreeReader.dispose

    def spy(self: TreeReader) -> None:
        calls.append(type(self).__name__)
        original(self)

    monkeypatch.setattr(TreeReader, "dispose", spy)
    with pytest.raises(DecodeError):
        unmarshal(b"x: nope\n", Point(), cache=cache)
    unmarshal(b"", Point(), cache=cache)
    assert calls == ["YamlReader", "YamlReader"]


@parametrize("value", [{"a": 1}, [1, "two", None], {"nested": {"list": [1.5, True]}}])
def test_plain_containers_round_trip(cache: FieldCache, value: Any) -> None:
    target: Any = {} if isinstance(value, dict) else []
    unmarshal(marshal(value, cache=cache), target, cache=cache)
    assert target == value
