from __future__ import annotations

from tabpaste.pipeline.normalize import normalize_text


def test_whitespace_is_collapsed_and_trimmed() -> None:
    assert normalize_text("  New \t  York \n") == "new york"


def test_nbsp_becomes_space() -> None:
    assert normalize_text("New\u00a0York") == "new york"


def test_compatibility_forms_are_folded() -> None:
    assert normalize_text("ＮＥＷ　ｙｏｒｋ") == "new york"
    assert normalize_text("ｶﾀｶﾅ") == "カタカナ"


def test_none_is_empty() -> None:
    assert normalize_text(None) == ""


def test_normalization_is_idempotent() -> None:
    samples = ["  Mixed Case  ", "ＦＵＬＬ　ＷＩＤＴＨ", "Tokyo　都", "", "already normal", "Ⅳ th"]
    for sample in samples:
        once = normalize_text(sample)
        assert normalize_text(once) == once
