from __future__ import annotations

import logging
from typing import Dict, Optional

from playwright.sync_api import Error as PlaywrightError

LOGGER = logging.getLogger(__name__)

# Hidden or throttled tabs may never deliver an animation frame, so each
# frame wait is capped.
FRAME_CAP_MS = 100

_RENDER_JS = """async (frameCapMs) => {
    await Promise.resolve();
    await new Promise(resolve => {
        requestAnimationFrame(() => resolve());
        setTimeout(resolve, frameCapMs);
    });
    await new Promise(resolve => setTimeout(resolve, 0));
}"""

_YIELD_JS = """() => new Promise(resolve => setTimeout(resolve, 0))"""

_OPTIONS_STABLE_JS = """(el, opts) => new Promise(resolve => {
    const start = performance.now();
    const initial = el.options ? el.options.length : 0;
    const timers = [];
    let changes = 0;
    let done = false;
    let observer = null;
    const finish = (reason) => {
        if (done) return;
        done = true;
        if (observer) observer.disconnect();
        timers.forEach(clearTimeout);
        resolve({
            reason,
            initial,
            final: el.options ? el.options.length : 0,
            changes,
            elapsed_ms: Math.round(performance.now() - start),
        });
    };
    const nextFrame = () => new Promise(r => {
        requestAnimationFrame(() => r());
        setTimeout(r, opts.frameCapMs);
    });
    observer = new MutationObserver(() => {
        changes += 1;
        const mark = changes;
        if (performance.now() - start > opts.timeoutMs) {
            finish('timeout');
            return;
        }
        nextFrame().then(() => { if (changes === mark) finish('stable'); });
    });
    observer.observe(el, { childList: true, subtree: true });
    timers.push(setTimeout(() => finish('timeout'), opts.timeoutMs));
    timers.push(setTimeout(() => {
        const count = el.options ? el.options.length : 0;
        if (changes === 0 && count === initial) finish('unchanged');
    }, opts.graceMs));
})"""


def sleep(page, delay_ms: Optional[int]) -> None:
    if not delay_ms or delay_ms <= 0:
        return
    page.wait_for_timeout(delay_ms)


def wait_for_render(page, delay_ms: Optional[int] = 0) -> None:
    """Yield until the page had a chance to run microtasks, paint a frame and
    drain one macrotask, then apply the optional settling delay."""
    page.evaluate(_RENDER_JS, FRAME_CAP_MS)
    sleep(page, delay_ms)


def yield_task(page) -> None:
    page.evaluate(_YIELD_JS)


def wait_for_options_stable(element, timeout_ms: int = 500, grace_ms: int = 30) -> Dict[str, object]:
    """Block until the option list of ``element`` stops changing.

    Resolves one frame after the last structural mutation, after
    ``grace_ms`` when nothing changed at all, or at ``timeout_ms``.
    """
    try:
        return element.evaluate(
            _OPTIONS_STABLE_JS,
            {"timeoutMs": timeout_ms, "graceMs": grace_ms, "frameCapMs": FRAME_CAP_MS},
        )
    except PlaywrightError as exc:
        LOGGER.debug("Option stability wait failed: %s", exc)
        return {"reason": "error", "error": str(exc)}
