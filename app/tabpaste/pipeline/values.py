from __future__ import annotations

from typing import Optional, Tuple

VALUE_DELIMITER = "\t"


def split_values(raw: Optional[str]) -> Tuple[str, ...]:
    """Split clipboard text into the ordered field values.

    Every tab is a boundary, so adjacent tabs yield empty values that still
    consume a field.
    """
    if raw is None:
        return ()
    return tuple(raw.split(VALUE_DELIMITER))
