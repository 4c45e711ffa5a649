from __future__ import annotations

import logging
import time
from typing import Callable, Optional

from playwright.sync_api import Error as PlaywrightError

from ..config import CONFIG, AutofillConfig
from ..messages import ABORT_MESSAGE_KEYS, notify_user
from ..pipeline.values import split_values
from ..schemas import AbortReason, AutofillSummary, FieldResult, RunStatus, StopReason
from .clipboard import ClipboardUnavailable, read_clipboard_text
from .discovery import CHOICE_TAGS, TEXT_TAGS, describe
from .render_sync import sleep, wait_for_render
from .select_option import select_best_match
from .traversal import focused_is_eligible, has_focus, resolve_current, resolve_next
from .typing_sim import press_tab, type_into

LOGGER = logging.getLogger(__name__)

RunLog = Callable[[str], None]


def _truncate(value: Optional[str], limit: int = 120) -> str:
    if value is None:
        return ""
    text = str(value)
    if len(text) <= limit:
        return text
    return text[:limit] + "…"


def _elapsed_ms(start: float) -> int:
    return int((time.perf_counter() - start) * 1000)


def _release(*handles) -> None:
    for handle in handles:
        if handle is None:
            continue
        try:
            handle.dispose()
        except PlaywrightError as exc:
            LOGGER.debug("Handle dispose failed: %s", exc)


def _abort(
    page,
    reason: AbortReason,
    config: AutofillConfig,
    locale: str,
    start: float,
    values_total: int = 0,
    run_log: Optional[RunLog] = None,
) -> AutofillSummary:
    LOGGER.warning("Autofill aborted: %s", reason.value)
    if run_log:
        run_log(f"Autofill aborted: {reason.value}")
    notify_user(page, ABORT_MESSAGE_KEYS[reason.value], locale, enabled=config.notify)
    return AutofillSummary(
        status=RunStatus.ABORTED,
        abort_reason=reason,
        values_total=values_total,
        duration_ms=_elapsed_ms(start),
    )


def _apply_value(page, element, index: int, value: str, config: AutofillConfig) -> FieldResult:
    info = describe(element)
    tag = str(info.get("tag") or "")
    result = FieldResult(
        index=index,
        tag=tag,
        input_type=info.get("input_type"),
        element_id=info.get("element_id"),
        name=info.get("name"),
        value=value,
        result="skipped",
    )
    if tag in TEXT_TAGS:
        result.readback = type_into(element, value)
        result.result = "filled"
    elif tag in CHOICE_TAGS:
        outcome = select_best_match(page, element, value, config.select, delay_ms=config.delay_ms)
        result.readback = outcome.readback
        result.retried = outcome.retried
        if outcome.match is not None:
            result.result = "selected"
            result.matched_tier = outcome.match.tier
            result.matched_key = outcome.match.key
        elif not value:
            result.result = "skipped_empty"
        else:
            result.result = "no_option_match"
    return result


def run_autofill(
    page,
    raw_text: Optional[str],
    config: Optional[AutofillConfig] = None,
    locale: Optional[str] = None,
    run_log: Optional[RunLog] = None,
) -> AutofillSummary:
    """Distribute tab-separated ``raw_text`` over the eligible fields,
    starting at the focused one and following focus order.

    Preconditions are checked once; a failed precondition returns an aborted
    summary without touching any field. Once running, the loop stops when
    the values run out or no current/next target can be resolved.
    """
    config = config or CONFIG.autofill
    locale = locale or CONFIG.locale
    start = time.perf_counter()

    if not raw_text:
        return _abort(page, AbortReason.CLIPBOARD_EMPTY, config, locale, start, run_log=run_log)

    values = split_values(raw_text)
    focus_state = focused_is_eligible(page)
    if focus_state is None:
        return _abort(page, AbortReason.NO_FIELDS, config, locale, start, len(values), run_log)
    if not focus_state:
        return _abort(page, AbortReason.NO_FOCUS, config, locale, start, len(values), run_log)

    summary = AutofillSummary(
        status=RunStatus.COMPLETED,
        stop_reason=StopReason.VALUES_EXHAUSTED,
        values_total=len(values),
    )
    last = len(values) - 1

    for i, value in enumerate(values):
        element = resolve_current(page)
        if element is None:
            summary.stop_reason = StopReason.NO_CURRENT_TARGET
            break

        try:
            element.focus()
            wait_for_render(page, config.delay_ms)
            field = _apply_value(page, element, i, value, config)
            wait_for_render(page, config.delay_ms)
        except PlaywrightError as exc:
            LOGGER.warning("Failed to fill value %d: %s", i, exc)
            field = FieldResult(index=i, tag="", value=value, result="fill_error", error=str(exc))

        LOGGER.info('Processing %d: %s with value "%s" -> %s', i, field.tag, _truncate(value), field.result)
        if run_log:
            run_log(f"Value {i} -> {field.tag or '?'}#{field.element_id or field.name or ''}: {field.result}")
        summary.fields.append(field)
        summary.values_used = i + 1

        next_element = resolve_next(page)
        try:
            if next_element is None:
                if i < last:
                    LOGGER.info("Reached the last field; %d value(s) left unfilled.", last - i)
                summary.stop_reason = StopReason.NO_NEXT_TARGET if i < last else StopReason.VALUES_EXHAUSTED
                break

            if i < last:
                press_tab(element)
                wait_for_render(page, config.delay_ms)
                sleep(page, config.delay_ms)
                if has_focus(element):
                    next_element.focus()
                    wait_for_render(page, config.delay_ms)
                    sleep(page, config.delay_ms)
        finally:
            _release(element, next_element)

    summary.duration_ms = _elapsed_ms(start)
    if run_log:
        run_log(
            f"Autofill {summary.status.value}: used {summary.values_used}/{summary.values_total} "
            f"values ({summary.stop_reason.value if summary.stop_reason else ''})"
        )
    return summary


def paste_into_page(
    page,
    text: Optional[str] = None,
    config: Optional[AutofillConfig] = None,
    locale: Optional[str] = None,
    run_log: Optional[RunLog] = None,
) -> AutofillSummary:
    """Run against an open page, reading the clipboard when ``text`` is None."""
    config = config or CONFIG.autofill
    locale = locale or CONFIG.locale
    if text is None:
        start = time.perf_counter()
        try:
            text = read_clipboard_text(page, config.clipboard_source)
        except ClipboardUnavailable as exc:
            LOGGER.error("Clipboard read failed: %s", exc)
            return _abort(page, AbortReason.CLIPBOARD_UNREADABLE, config, locale, start, run_log=run_log)
    return run_autofill(page, text, config, locale, run_log)
