from __future__ import annotations

import json
import logging
import time
from dataclasses import replace
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import sync_playwright

from ..config import CONFIG, AutofillConfig, resolve_form_url
from ..schemas import AbortReason, AutofillSummary, RunStatus
from .autofill import paste_into_page
from .clipboard import grant_clipboard

LOGGER = logging.getLogger(__name__)

OPEN_BROWSER_SESSIONS: List[Dict[str, object]] = []

TRIGGER_BINDING = "__tabpasteTrigger"


def _append_run_log(run_dir: Path, message: str) -> None:
    timestamp = datetime.utcnow().isoformat()
    with (run_dir / "run.log").open("a") as f:
        f.write(f"[{timestamp}] {message}\n")


def parse_shortcut(shortcut: str) -> Dict[str, object]:
    """``"Alt+Shift+V"`` -> modifier flags plus the lower-cased key."""
    parts = [part.strip() for part in shortcut.split("+") if part.strip()]
    if not parts:
        raise ValueError("Empty shortcut")
    modifiers = {part.lower() for part in parts[:-1]}
    unknown = modifiers - {"alt", "shift", "ctrl", "control", "meta", "cmd"}
    if unknown:
        raise ValueError(f"Unknown modifier(s) in shortcut: {', '.join(sorted(unknown))}")
    return {
        "alt": "alt" in modifiers,
        "shift": "shift" in modifiers,
        "ctrl": bool(modifiers & {"ctrl", "control"}),
        "meta": bool(modifiers & {"meta", "cmd"}),
        "key": parts[-1].lower(),
    }


def shortcut_script(shortcut: str) -> str:
    spec = json.dumps(parse_shortcut(shortcut))
    return f"""(() => {{
    const spec = {spec};
    const code = spec.key.length === 1 && /[a-z]/.test(spec.key) ? 'Key' + spec.key.toUpperCase() : null;
    window.addEventListener('keydown', (e) => {{
        if (e.altKey !== spec.alt || e.shiftKey !== spec.shift) return;
        if (e.ctrlKey !== spec.ctrl || e.metaKey !== spec.meta) return;
        const key = (e.key || '').toLowerCase();
        if (key !== spec.key && (!code || e.code !== code)) return;
        e.preventDefault();
        e.stopPropagation();
        if (typeof window.{TRIGGER_BINDING} === 'function') window.{TRIGGER_BINDING}();
    }}, true);
}})();"""


def paste_into_form(
    text: Optional[str],
    run_dir: Path,
    form_url: Optional[str] = None,
    headless: Optional[bool] = None,
    slow_mo_ms: Optional[int] = None,
    keep_open_ms: Optional[int] = None,
    focus_selector: Optional[str] = None,
    config: Optional[AutofillConfig] = None,
) -> Dict:
    """Open ``form_url`` in Chromium, focus the starting field and paste.

    ``text=None`` reads the clipboard the way the configured source does.
    The run directory receives ``run.log`` and a Playwright ``trace.zip``.
    """
    run_dir.mkdir(parents=True, exist_ok=True)
    trace_path = run_dir / "trace.zip"
    start_time = time.perf_counter()

    autofill_cfg = config or CONFIG.autofill
    headless = autofill_cfg.headless if headless is None else headless
    slow_mo_ms = autofill_cfg.slow_mo_ms if slow_mo_ms is None else slow_mo_ms
    keep_open_ms = autofill_cfg.keep_open_ms if keep_open_ms is None else keep_open_ms
    focus_selector = focus_selector or autofill_cfg.focus_selector
    keep_open = keep_open_ms < 0 and not headless
    target_url = resolve_form_url(form_url)
    summary: Optional[AutofillSummary] = None
    final_url = ""

    _append_run_log(
        run_dir,
        "Autofill start. "
        f"Form URL: {target_url} | headless={headless} | slow_mo_ms={slow_mo_ms} | "
        f"keep_open_ms={keep_open_ms} | focus={focus_selector}",
    )

    def _run(playwright):
        nonlocal summary, final_url
        browser = playwright.chromium.launch(headless=headless, slow_mo=slow_mo_ms)
        context = browser.new_context()
        grant_clipboard(context)
        context.tracing.start(screenshots=True, snapshots=True, sources=True)
        page = context.new_page()
        try:
            page.set_default_timeout(15000)
            page.goto(target_url, wait_until="domcontentloaded", timeout=45000)
            try:
                page.wait_for_load_state("networkidle", timeout=10000)
            except PlaywrightError:
                pass
            if focus_selector:
                try:
                    page.locator(focus_selector).first.focus(timeout=5000)
                except PlaywrightError as exc:
                    _append_run_log(run_dir, f"Focus selector {focus_selector!r} failed: {exc}")
            try:
                summary = paste_into_page(
                    page,
                    text,
                    autofill_cfg,
                    run_log=lambda message: _append_run_log(run_dir, message),
                )
            except PlaywrightError as exc:
                LOGGER.warning("Autofill run failed: %s", exc)
                _append_run_log(run_dir, f"Autofill run failed: {exc}")
                summary = AutofillSummary(status=RunStatus.ABORTED, abort_reason=AbortReason.ERROR, error=str(exc))
            final_url = page.url
            if keep_open_ms > 0 and not headless:
                _append_run_log(run_dir, f"Keeping browser open for {keep_open_ms}ms")
                try:
                    page.wait_for_timeout(keep_open_ms)
                except PlaywrightError as exc:
                    _append_run_log(run_dir, f"Keep-open interrupted: {exc}")
        finally:
            try:
                context.tracing.stop(path=str(trace_path))
            except PlaywrightError as exc:
                LOGGER.warning("Trace capture failed: %s", exc)
            if not keep_open:
                context.close()
                browser.close()
        return browser, context, page

    if keep_open:
        playwright = sync_playwright().start()
        browser, context, page = _run(playwright)
        OPEN_BROWSER_SESSIONS.append(
            {
                "run_dir": str(run_dir),
                "browser": browser,
                "context": context,
                "page": page,
                "playwright": playwright,
            }
        )
        _append_run_log(run_dir, "Browser kept open (keep_open_ms<0)")
    else:
        with sync_playwright() as playwright:
            _run(playwright)

    duration_ms = int((time.perf_counter() - start_time) * 1000)
    _append_run_log(run_dir, f"Autofill runtime: {duration_ms}ms")

    result = summary.model_dump(mode="json") if summary is not None else {}
    result.update(
        {
            "trace_path": str(trace_path),
            "final_url": final_url,
            "form_url": target_url,
            "browser_kept_open": keep_open,
            "runtime_ms": duration_ms,
        }
    )
    return result


def watch_shortcut(
    form_url: Optional[str] = None,
    shortcut: Optional[str] = None,
    config: Optional[AutofillConfig] = None,
    poll_ms: int = 100,
) -> List[AutofillSummary]:
    """Open a headed page and paste from the clipboard on every shortcut
    press until the page is closed."""
    autofill_cfg = config or CONFIG.autofill
    shortcut = shortcut or autofill_cfg.shortcut
    target_url = resolve_form_url(form_url)
    pending: List[object] = []
    summaries: List[AutofillSummary] = []

    def _on_trigger(source) -> None:
        pending.append(source.get("frame"))

    with sync_playwright() as playwright:
        browser = playwright.chromium.launch(headless=False, slow_mo=autofill_cfg.slow_mo_ms)
        context = browser.new_context()
        grant_clipboard(context)
        page = context.new_page()
        try:
            page.expose_binding(TRIGGER_BINDING, _on_trigger)
            context.add_init_script(shortcut_script(shortcut))
        except (PlaywrightError, ValueError) as exc:
            LOGGER.error("Shortcut injection failed: %s", exc)
            browser.close()
            return summaries

        page.goto(target_url, wait_until="domcontentloaded")
        LOGGER.info("Watching %s; press %s in a field to paste.", target_url, shortcut)
        while not page.is_closed():
            if not pending:
                try:
                    page.wait_for_timeout(poll_ms)
                except PlaywrightError:
                    break
                continue
            frame = pending.pop(0) or page.main_frame
            try:
                summary = paste_into_page(frame, None, autofill_cfg)
            except PlaywrightError as exc:
                LOGGER.warning("Autofill run failed: %s", exc)
                summary = AutofillSummary(status=RunStatus.ABORTED, abort_reason=AbortReason.ERROR, error=str(exc))
            LOGGER.info(
                "Run %s: %d/%d values used",
                summary.status.value,
                summary.values_used,
                summary.values_total,
            )
            summaries.append(summary)
        browser.close()
    return summaries


def with_select_overrides(
    config: AutofillConfig, run_delay_ms: Optional[int] = None, **select_overrides
) -> AutofillConfig:
    """Copy of ``config`` with the run-wide delay and selection settings replaced.

    ``select_overrides`` may carry the per-selection ``delay_ms``.
    """
    select = config.select.with_overrides(**select_overrides)
    if run_delay_ms is None:
        return replace(config, select=select)
    return replace(config, delay_ms=run_delay_ms, select=select)
