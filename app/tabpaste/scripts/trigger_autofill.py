from __future__ import annotations

import argparse
import json

import pyperclip
import requests

DEFAULT_SERVICE_URL = "http://127.0.0.1:8000"


def main() -> None:
    parser = argparse.ArgumentParser(description="Send the system clipboard to a running tabpaste service.")
    parser.add_argument("--service", default=DEFAULT_SERVICE_URL)
    parser.add_argument("--url", help="Form URL to open")
    parser.add_argument("--focus", help="CSS selector of the first field to fill")
    args = parser.parse_args()

    payload = {
        "text": pyperclip.paste(),
        "form_url": args.url,
        "focus_selector": args.focus,
    }
    resp = requests.post(f"{args.service.rstrip('/')}/autofill", json=payload, timeout=300)
    resp.raise_for_status()
    print(json.dumps(resp.json(), indent=2))


if __name__ == "__main__":
    main()
