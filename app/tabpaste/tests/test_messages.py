from __future__ import annotations

from tabpaste.messages import ABORT_MESSAGE_KEYS, MESSAGES, get_message
from tabpaste.schemas import AbortReason


def test_english_is_default() -> None:
    assert get_message("clipboardNoText") == MESSAGES["en"]["clipboardNoText"]


def test_locale_with_region_uses_language() -> None:
    assert get_message("noInputFields", "ja-JP") == MESSAGES["ja"]["noInputFields"]


def test_unknown_locale_falls_back_to_english() -> None:
    assert get_message("focusInputField", "fr") == MESSAGES["en"]["focusInputField"]


def test_unknown_key_returns_key() -> None:
    assert get_message("doesNotExist") == "doesNotExist"


def test_every_setup_fault_has_a_message() -> None:
    for reason in (
        AbortReason.CLIPBOARD_UNREADABLE,
        AbortReason.CLIPBOARD_EMPTY,
        AbortReason.NO_FIELDS,
        AbortReason.NO_FOCUS,
    ):
        key = ABORT_MESSAGE_KEYS[reason.value]
        for catalog in MESSAGES.values():
            assert key in catalog
