from __future__ import annotations

import logging
from typing import Dict

from playwright.sync_api import Error as PlaywrightError

LOGGER = logging.getLogger(__name__)

DEFAULT_LOCALE = "en"

MESSAGES: Dict[str, Dict[str, str]] = {
    "en": {
        "contextMenuTitle": "Paste tab-separated values into fields",
        "clipboardReadFailed": "Could not read the clipboard. Check the clipboard permission.",
        "clipboardNoText": "The clipboard does not contain any text.",
        "noInputFields": "No input fields were found on this page.",
        "focusInputField": "Click the input field to start from, then try again.",
    },
    "ja": {
        "contextMenuTitle": "タブ区切りの値を入力欄に貼り付け",
        "clipboardReadFailed": "クリップボードを読み取れませんでした。権限を確認してください。",
        "clipboardNoText": "クリップボードにテキストがありません。",
        "noInputFields": "このページに入力欄が見つかりません。",
        "focusInputField": "開始する入力欄をクリックしてから、もう一度実行してください。",
    },
}

ABORT_MESSAGE_KEYS = {
    "clipboard_unreadable": "clipboardReadFailed",
    "clipboard_empty": "clipboardNoText",
    "no_fields": "noInputFields",
    "no_focus": "focusInputField",
}


def get_message(key: str, locale: str = DEFAULT_LOCALE) -> str:
    lang = (locale or DEFAULT_LOCALE).split("-")[0].split("_")[0].lower()
    catalog = MESSAGES.get(lang) or MESSAGES[DEFAULT_LOCALE]
    return catalog.get(key) or MESSAGES[DEFAULT_LOCALE].get(key, key)


def notify_user(page, key: str, locale: str = DEFAULT_LOCALE, enabled: bool = True) -> str:
    """Show a blocking in-page alert for ``key``; always logs the message."""
    message = get_message(key, locale)
    LOGGER.info("User notice [%s]: %s", key, message)
    if not enabled:
        return message
    try:
        page.evaluate("message => window.alert(message)", message)
    except PlaywrightError as exc:
        LOGGER.warning("Could not show notice %s: %s", key, exc)
    return message
