from __future__ import annotations

import logging

import pyperclip
from playwright.sync_api import Error as PlaywrightError

LOGGER = logging.getLogger(__name__)

CLIPBOARD_PERMISSIONS = ["clipboard-read", "clipboard-write"]
SOURCE_PAGE = "page"
SOURCE_SYSTEM = "system"


class ClipboardUnavailable(RuntimeError):
    """The clipboard could not be read (denied, unsupported, no backend)."""


def grant_clipboard(context, origin=None) -> None:
    try:
        if origin:
            context.grant_permissions(CLIPBOARD_PERMISSIONS, origin=origin)
        else:
            context.grant_permissions(CLIPBOARD_PERMISSIONS)
    except PlaywrightError as exc:
        LOGGER.warning("Clipboard permission grant failed: %s", exc)


def read_page_clipboard(page) -> str:
    try:
        text = page.evaluate("() => navigator.clipboard.readText()")
    except PlaywrightError as exc:
        raise ClipboardUnavailable(str(exc)) from exc
    return text or ""


def read_system_clipboard() -> str:
    try:
        text = pyperclip.paste()
    except pyperclip.PyperclipException as exc:
        raise ClipboardUnavailable(str(exc)) from exc
    return text or ""


def read_clipboard_text(page, source: str = SOURCE_PAGE) -> str:
    if source == SOURCE_SYSTEM:
        return read_system_clipboard()
    if source != SOURCE_PAGE:
        raise ValueError(f"Unknown clipboard source: {source}")
    return read_page_clipboard(page)
