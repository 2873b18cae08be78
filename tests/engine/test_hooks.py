# topmark:header:start
#
#   project      : YamlBridge
#   file         : test_hooks.py
#   file_relpath : tests/engine/test_hooks.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Tests for the `Setter` / `Getter` customization hooks."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import pytest
import yaml

from tests.conftest import parametrize
from yamlbridge import (
    EncodeError,
    FatalRuntimeFault,
    Getter,
    Setter,
    YamlBridgeError,
    marshal,
    unmarshal,
)

if TYPE_CHECKING:
    from yamlbridge.fields import FieldCache


@dataclass
class Color:
    r: int = 0
    g: int = 0
    b: int = 0

    def get_yaml(self) -> tuple[str, Any]:
        return "", f"#{self.r:02x}{self.g:02x}{self.b:02x}"

    def set_yaml(self, tag: str, value: Any) -> bool:
        if tag != "!!str" or not str(value).startswith("#"):
            return False
        text = str(value)
        self.r, self.g, self.b = (int(text[i : i + 2], 16) for i in (1, 3, 5))
        return True


@dataclass
class Palette:
    main: Color = field(default_factory=Color)
    extra: list[Color] = field(default_factory=list)


class Recorder:
    """Accepts anything and remembers what it was given."""

    def __init__(self) -> None:
        self.seen: tuple[str, Any] | None = None

    def set_yaml(self, tag: str, value: Any) -> bool:
        self.seen = (tag, value)
        return True


@dataclass
class Recorded:
    r: Recorder = field(default_factory=Recorder)


@dataclass
class TaggedPoint:
    x: int = 0
    y: int = 0

    def get_yaml(self) -> tuple[str, Any]:
        return "!point", self

    def set_yaml(self, tag: str, value: Any) -> bool:
        if tag != "!point" or not isinstance(value, dict):
            return False
        self.x = value.get("x", self.x)
        self.y = value.get("y", self.y)
        return True


@dataclass
class Version:
    major: int = 0

    def get_yaml(self) -> tuple[str, Any]:
        return "!!str", self.major


class Secret:
    def get_yaml(self) -> tuple[str, Any]:
        return "", "hidden"


class Nested:
    def get_yaml(self) -> tuple[str, Any]:
        return "", Secret()


class BadGetter:
    def __init__(self, result: Any) -> None:
        self.result = result

    def get_yaml(self) -> Any:
        return self.result


class BadSetter:
    def set_yaml(self, tag: str, value: Any) -> Any:
        return None


@dataclass
class HoldsBadSetter:
    bad: BadSetter = field(default_factory=BadSetter)


def test_protocols_are_structural() -> None:
    assert isinstance(Color(), Getter)
    assert isinstance(Color(), Setter)
    assert isinstance(Recorder(), Setter)
    assert not isinstance(Recorder(), Getter)
    assert not isinstance(Secret(), Setter)


def test_getter_substitutes_a_scalar(cache: FieldCache) -> None:
    assert marshal(Palette(main=Color(255, 0, 16)), cache=cache) == b"main: '#ff0010'\nextra: []\n"


def test_setter_reconstructs_from_the_substitute(cache: FieldCache) -> None:
    palette = Palette()
    main: Color = palette.main
    unmarshal(b"main: '#0a0b0c'\nextra: ['#010203', '#040506']\n", palette, cache=cache)
    assert palette.main is main
    assert palette == Palette(main=Color(10, 11, 12), extra=[Color(1, 2, 3), Color(4, 5, 6)])


def test_declining_setter_falls_back_to_default_rules(cache: FieldCache) -> None:
    palette = Palette(main=Color(b=9))
    unmarshal(b"main: {r: 1, g: 2}\n", palette, cache=cache)
    assert palette.main == Color(1, 2, 9)


def test_root_setter(cache: FieldCache) -> None:
    color = Color()
    unmarshal(b"'#ffffff'\n", color, cache=cache)
    assert color == Color(255, 255, 255)


@parametrize(
    "document, expected",
    [
        (b"r: 5\n", ("!!int", 5)),
        (b"r: [1, x]\n", ("!!seq", [1, "x"])),
        (b"r: !custom {a: 1}\n", ("!custom", {"a": 1})),
        (b"r: null\n", ("!!null", None)),
    ],
)
def test_setter_sees_short_tags_and_plain_values(
    cache: FieldCache, document: bytes, expected: tuple[str, Any]
) -> None:
    holder = Recorded()
    unmarshal(document, holder, cache=cache)
    assert holder.r.seen == expected


def test_getter_returning_self_uses_default_encoding_with_custom_tag(cache: FieldCache) -> None:
    out: bytes = marshal({"p": TaggedPoint(1, 2)}, cache=cache)
    root = yaml.compose(out, Loader=yaml.SafeLoader)
    assert isinstance(root, yaml.MappingNode)
    value_node = root.value[0][1]
    assert value_node.tag == "!point"
    assert [k.value for k, _ in value_node.value] == ["x", "y"]


def test_custom_tag_round_trip(cache: FieldCache) -> None:
    out: bytes = marshal({"p": TaggedPoint(3, 4)}, cache=cache)

    @dataclass
    class Holder:
        p: TaggedPoint = field(default_factory=TaggedPoint)

    holder = Holder()
    unmarshal(out, holder, cache=cache)
    assert holder.p == TaggedPoint(3, 4)


def test_getter_tag_overrides_the_scalar_tag(cache: FieldCache) -> None:
    out: bytes = marshal({"v": Version(3)}, cache=cache)
    assert out == b"v: '3'\n"
    assert yaml.safe_load(out) == {"v": "3"}


def test_getter_on_plain_class(cache: FieldCache) -> None:
    assert marshal({"s": Secret()}, cache=cache) == b"s: hidden\n"


def test_substitute_is_not_hooked_again(cache: FieldCache) -> None:
    with pytest.raises(EncodeError, match="Secret"):
        marshal({"n": Nested()}, cache=cache)


@parametrize("result", ["oops", ("only",), (1, "value"), None])
def test_bad_getter_result_is_fatal(cache: FieldCache, result: Any) -> None:
    with pytest.raises(FatalRuntimeFault, match="get_yaml"):
        marshal({"bad": BadGetter(result)}, cache=cache)


def test_bad_setter_result_is_fatal(cache: FieldCache) -> None:
    with pytest.raises(FatalRuntimeFault, match="set_yaml") as excinfo:
        unmarshal(b"bad: 1\n", HoldsBadSetter(), cache=cache)
    assert not isinstance(excinfo.value, YamlBridgeError)
