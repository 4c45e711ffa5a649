from __future__ import annotations

import re
import unicodedata
from typing import Optional

_WHITESPACE_RE = re.compile(r"\s+")


def normalize_text(value: Optional[object]) -> str:
    """Comparison form of a label or value.

    NBSP becomes a plain space, NFKC folds width variants, whitespace runs
    collapse to one space, then the result is trimmed and lower-cased.
    """
    if value is None:
        return ""
    text = str(value).replace("\u00a0", " ")
    text = unicodedata.normalize("NFKC", text)
    text = _WHITESPACE_RE.sub(" ", text).strip()
    return text.lower()
