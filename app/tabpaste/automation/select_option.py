from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

from ..config import SelectConfig
from ..pipeline.option_match import OptionMatch, entries_from_options, match_option
from .render_sync import sleep, wait_for_options_stable, yield_task

LOGGER = logging.getLogger(__name__)

_OPTIONS_JS = """el => Array.from(el.options).map(o => ({ text: o.text, value: o.value }))"""

_APPLY_JS = """(el, value) => {
    el.value = value;
    el.dispatchEvent(new Event('change', { bubbles: true }));
    return el.value;
}"""

_VALUE_JS = """el => el.value"""


@dataclass
class SelectionOutcome:
    match: Optional[OptionMatch] = None
    applied: bool = False
    retried: bool = False
    readback: Optional[str] = None
    options_wait: Optional[Dict[str, object]] = None


def get_options(element) -> List[Dict[str, str]]:
    return element.evaluate(_OPTIONS_JS)


def apply_value(element, value: str) -> str:
    return element.evaluate(_APPLY_JS, value)


def select_best_match(
    page,
    element,
    raw_value: str,
    config: Optional[SelectConfig] = None,
    delay_ms: Optional[int] = 0,
) -> SelectionOutcome:
    """Resolve ``raw_value`` to an option of ``element`` and select it.

    Leaves the current selection untouched when nothing matches. With
    ``verify_and_retry`` the value is re-read after one task turn and applied
    a second time if page code replaced it.
    """
    config = config or SelectConfig()
    outcome = SelectionOutcome()
    if not raw_value:
        return outcome

    settle_ms = config.delay_ms if config.delay_ms is not None else delay_ms

    if config.wait_options:
        outcome.options_wait = wait_for_options_stable(
            element,
            timeout_ms=config.options_timeout_ms,
            grace_ms=config.options_grace_ms,
        )

    sleep(page, settle_ms)

    entries = entries_from_options(get_options(element))
    matched = match_option(
        entries,
        raw_value,
        value_first=config.value_first,
        allow_contains_fallback=config.allow_contains_fallback,
    )
    if matched is None:
        LOGGER.warning("No option matched for input: %r (%d options)", raw_value, len(entries))
        return outcome

    outcome.match = matched
    target = matched.entry.value
    outcome.readback = apply_value(element, target)
    outcome.applied = True

    sleep(page, settle_ms)

    if config.verify_and_retry:
        yield_task(page)
        current = element.evaluate(_VALUE_JS)
        if current != target:
            LOGGER.info("Selection overwritten (%r != %r); re-applying", current, target)
            apply_value(element, target)
            outcome.retried = True
            yield_task(page)
            sleep(page, settle_ms)
        outcome.readback = element.evaluate(_VALUE_JS)

    return outcome
