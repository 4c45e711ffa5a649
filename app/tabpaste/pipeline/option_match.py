from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from .normalize import normalize_text

TIER_EXACT = "exact"
TIER_PREFIX = "prefix"
TIER_CONTAINS = "contains"

KEY_VALUE = "value"
KEY_TEXT = "text"


@dataclass(frozen=True)
class ChoiceEntry:
    text: str
    value: str
    index: int = 0


@dataclass(frozen=True)
class OptionMatch:
    entry: ChoiceEntry
    tier: str
    key: str


def entries_from_options(options: Iterable[Dict[str, object]]) -> List[ChoiceEntry]:
    entries: List[ChoiceEntry] = []
    for idx, opt in enumerate(options):
        entries.append(
            ChoiceEntry(
                text=str(opt.get("text") or ""),
                value=str(opt.get("value") or ""),
                index=idx,
            )
        )
    return entries


def key_order(value_first: bool = True) -> Tuple[str, str]:
    return (KEY_VALUE, KEY_TEXT) if value_first else (KEY_TEXT, KEY_VALUE)


def match_option(
    entries: Sequence[ChoiceEntry],
    raw_input: Optional[str],
    value_first: bool = True,
    allow_contains_fallback: bool = True,
) -> Optional[OptionMatch]:
    """Pick the choice entry that best matches ``raw_input``.

    Tiers run exact, then prefix, then (optionally) substring. Within a tier
    the keys are tried in order and the first key with any hit wins. Exact
    and prefix take the first hit in option order; substring prefers the
    shortest normalized display text, ties going to the earlier option.
    """
    if not raw_input:
        return None
    needle = normalize_text(raw_input)
    items = [
        (entry, {KEY_TEXT: normalize_text(entry.text), KEY_VALUE: normalize_text(entry.value)})
        for entry in entries
    ]
    keys = key_order(value_first)

    for key in keys:
        for entry, normalized in items:
            if normalized[key] == needle:
                return OptionMatch(entry=entry, tier=TIER_EXACT, key=key)

    for key in keys:
        for entry, normalized in items:
            if normalized[key].startswith(needle):
                return OptionMatch(entry=entry, tier=TIER_PREFIX, key=key)

    if allow_contains_fallback:
        for key in keys:
            candidates = [(entry, normalized) for entry, normalized in items if needle in normalized[key]]
            if not candidates:
                continue
            # Tie-break on display text length even when matching on value.
            entry, _ = min(candidates, key=lambda item: len(item[1][KEY_TEXT]))
            return OptionMatch(entry=entry, tier=TIER_CONTAINS, key=key)

    return None
