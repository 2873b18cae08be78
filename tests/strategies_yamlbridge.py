# topmark:header:start
#
#   project      : YamlBridge
#   file         : strategies_yamlbridge.py
#   file_relpath : tests/strategies_yamlbridge.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

# pyright: strict

"""Hypothesis strategies for generating annotated dataclass values.

The generated records cover every field shape the traversal engine handles for
round trips: scalars, lists, string-keyed mappings, optional nested records,
records whose fields have no defaults (built from the decoded keys) and
conditional fields.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Optional

from hypothesis import strategies as st

from yamlbridge import yaml_field

# Surrogates cannot be encoded; control and line/paragraph separator characters are
# excluded because the emitter folds them differently across PyYAML versions.
BLACKLIST_CATEGORIES: tuple[Literal["Cs", "Cc", "Zl", "Zp"], ...] = ("Cs", "Cc", "Zl", "Zp")


@dataclass
class Leaf:
    """Small nested record."""

    value: int = 0
    label: str = ""


@dataclass
class Pair:
    """Record whose fields are all required."""

    left: int
    right: str = yaml_field("r")


@dataclass(frozen=True)
class Span:
    """Frozen record with required fields."""

    start: int
    end: int


@dataclass
class Record:
    """Record exercising every round-trippable field shape."""

    name: str = ""
    count: int = 0
    ratio: float = 0.0
    flag: bool = False
    tags: list[str] = field(default_factory=list)
    scores: dict[str, int] = field(default_factory=dict)
    child: Optional[Leaf] = None
    leaves: list[Leaf] = field(default_factory=list)
    pairs: list[Pair] = field(default_factory=list)
    best: Optional[Pair] = None
    spans: dict[str, Span] = field(default_factory=dict)
    note: str = yaml_field("note", conditional=True, default="")
    weight: int = yaml_field("w", conditional=True, default=0)


def s_text(max_size: int = 20) -> st.SearchStrategy[str]:
    """Return a strategy for YAML-safe text."""
    return st.text(
        alphabet=st.characters(blacklist_categories=BLACKLIST_CATEGORIES),
        max_size=max_size,
    )


def s_leaf() -> st.SearchStrategy[Leaf]:
    """Return a strategy for `Leaf` values."""
    return st.builds(Leaf, value=st.integers(), label=s_text())


def s_pair() -> st.SearchStrategy[Pair]:
    """Return a strategy for `Pair` values."""
    return st.builds(Pair, left=st.integers(), right=s_text())


def s_span() -> st.SearchStrategy[Span]:
    """Return a strategy for `Span` values."""
    return st.builds(Span, start=st.integers(), end=st.integers())


def s_record() -> st.SearchStrategy[Record]:
    """Return a strategy for `Record` values."""
    return st.builds(
        Record,
        name=s_text(),
        count=st.integers(),
        ratio=st.floats(allow_nan=False),
        flag=st.booleans(),
        tags=st.lists(s_text(), max_size=5),
        scores=st.dictionaries(s_text(10), st.integers(), max_size=5),
        child=st.none() | s_leaf(),
        leaves=st.lists(s_leaf(), max_size=3),
        pairs=st.lists(s_pair(), max_size=3),
        best=st.none() | s_pair(),
        spans=st.dictionaries(s_text(10), s_span(), max_size=3),
        note=s_text(),
        weight=st.integers(min_value=-3, max_value=3),
    )
