from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from tabpaste.automation.session import paste_into_form, watch_shortcut, with_select_overrides
from tabpaste.config import CONFIG, SelectConfig


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Paste tab-separated values into a form, field by field.")
    parser.add_argument("--url", help="Form URL (defaults to TABPASTE_FORM_URL)")
    parser.add_argument("--text", help="Values to paste; reads the clipboard when omitted")
    parser.add_argument("--stdin", action="store_true", help="Read the values from stdin")
    parser.add_argument("--focus", help="CSS selector of the first field to fill")
    parser.add_argument("--delay-ms", type=int, default=None, help="Settling delay between steps")
    parser.add_argument("--headless", action="store_true")
    parser.add_argument("--legacy", action="store_true", help="Plain prefix matching, no retry or option wait")
    parser.add_argument("--watch", action="store_true", help="Paste on every shortcut press until the page closes")
    parser.add_argument("--shortcut", default=None, help="Shortcut for --watch (default Alt+Shift+V)")
    parser.add_argument("--run-dir", type=Path, default=None)
    return parser


def main(argv=None) -> int:
    args = _build_parser().parse_args(argv)
    logging.basicConfig(level=CONFIG.log_level, format="%(asctime)s %(levelname)s %(name)s - %(message)s")

    config = CONFIG.autofill
    if args.legacy:
        legacy = SelectConfig.legacy()
        config = with_select_overrides(
            config,
            run_delay_ms=args.delay_ms,
            allow_contains_fallback=legacy.allow_contains_fallback,
            verify_and_retry=legacy.verify_and_retry,
            wait_options=legacy.wait_options,
        )
    elif args.delay_ms is not None:
        config = with_select_overrides(config, run_delay_ms=args.delay_ms)

    if args.watch:
        summaries = watch_shortcut(args.url, args.shortcut, config)
        print(json.dumps([summary.model_dump(mode="json") for summary in summaries], indent=2))
        return 0

    text = sys.stdin.read() if args.stdin else args.text
    run_dir = args.run_dir or (CONFIG.runs_dir / "cli")
    summary = paste_into_form(
        text,
        run_dir,
        form_url=args.url,
        headless=args.headless or None,
        focus_selector=args.focus,
        config=config,
    )
    print(json.dumps(summary, indent=2))
    return 0 if summary.get("status") == "completed" else 1


if __name__ == "__main__":
    raise SystemExit(main())
