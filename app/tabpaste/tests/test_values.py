from __future__ import annotations

from tabpaste.pipeline.values import split_values


def test_split_on_tabs() -> None:
    assert split_values("Alice\tBob") == ("Alice", "Bob")


def test_empty_segments_are_kept() -> None:
    assert split_values("a\t\tb\t") == ("a", "", "b", "")


def test_single_value_without_tab() -> None:
    assert split_values("only one") == ("only one",)


def test_none_yields_no_values() -> None:
    assert split_values(None) == ()
