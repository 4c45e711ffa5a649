from __future__ import annotations

from typing import Optional

from .discovery import discover

_IS_FOCUSED_JS = """el => el === document.activeElement"""


def resolve_current(page):
    """Focused eligible field, else the first eligible field, else None."""
    with discover(page) as fields:
        if not len(fields):
            return None
        idx = fields.focused_index()
        return fields.element_at(idx if idx >= 0 else 0)


def resolve_next(page):
    """Field after the focused one; the first field when nothing eligible
    has focus; None when focus sits on the last field."""
    with discover(page) as fields:
        if not len(fields):
            return None
        idx = fields.focused_index()
        return fields.element_at(idx + 1 if idx >= 0 else 0)


def has_focus(element) -> bool:
    return bool(element.evaluate(_IS_FOCUSED_JS))


def focused_is_eligible(page) -> Optional[bool]:
    """None when no eligible fields exist, else whether one holds focus."""
    with discover(page) as fields:
        if not len(fields):
            return None
        return fields.focused_index() >= 0
