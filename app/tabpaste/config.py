from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Optional

BASE_DIR = Path(__file__).parent
FORM_URL_ENV = "TABPASTE_FORM_URL"


def _load_dotenv() -> None:
    repo_root = Path(__file__).resolve().parents[2]
    candidates = [repo_root / ".env", Path.cwd() / ".env"]
    for env_path in candidates:
        if not env_path.exists():
            continue
        try:
            for line in env_path.read_text().splitlines():
                stripped = line.strip()
                if not stripped or stripped.startswith("#") or "=" not in stripped:
                    continue
                key, value = stripped.split("=", 1)
                key = key.strip()
                value = value.strip().strip('"').strip("'")
                if key and key not in os.environ:
                    os.environ[key] = value
        except OSError:
            continue
        break


_load_dotenv()


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in {"1", "true", "yes"}


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, str(default)))
    except ValueError:
        return default


@dataclass(frozen=True)
class SelectConfig:
    value_first: bool = _env_flag("TABPASTE_SELECT_VALUE_FIRST", "true")
    allow_contains_fallback: bool = _env_flag("TABPASTE_SELECT_CONTAINS", "true")
    verify_and_retry: bool = _env_flag("TABPASTE_SELECT_VERIFY", "true")
    # Lazily rendered option lists need the stability wait.
    wait_options: bool = _env_flag("TABPASTE_SELECT_WAIT_OPTIONS", "true")
    options_timeout_ms: int = 500
    options_grace_ms: int = 30
    # None falls back to the run-wide delay.
    delay_ms: Optional[int] = None

    @classmethod
    def legacy(cls) -> "SelectConfig":
        """Plain prefix matching without retry or stability wait."""
        return cls(
            value_first=True,
            allow_contains_fallback=False,
            verify_and_retry=False,
            wait_options=False,
        )

    def with_overrides(self, **overrides) -> "SelectConfig":
        known = {key: value for key, value in overrides.items() if value is not None and hasattr(self, key)}
        return replace(self, **known)


@dataclass(frozen=True)
class AutofillConfig:
    delay_ms: int = _env_int("TABPASTE_DELAY_MS", 0)
    headless: bool = _env_flag("TABPASTE_HEADLESS", "false")
    slow_mo_ms: int = _env_int("TABPASTE_SLOW_MO_MS", 0)
    # Negative keeps the browser open until the user closes it.
    keep_open_ms: int = _env_int("TABPASTE_KEEP_OPEN_MS", 0)
    form_url: str = "about:blank"
    focus_selector: Optional[str] = os.getenv("TABPASTE_FOCUS_SELECTOR") or None
    clipboard_source: str = os.getenv("TABPASTE_CLIPBOARD_SOURCE", "page")
    shortcut: str = os.getenv("TABPASTE_SHORTCUT", "Alt+Shift+V")
    notify: bool = _env_flag("TABPASTE_NOTIFY", "true")
    select: SelectConfig = field(default_factory=SelectConfig)


@dataclass(frozen=True)
class AppConfig:
    log_level: str = os.getenv("TABPASTE_LOG_LEVEL", "INFO")
    runs_dir: Path = BASE_DIR / "runs"
    locale: str = os.getenv("TABPASTE_LOCALE", "en")
    autofill: AutofillConfig = field(default_factory=AutofillConfig)


CONFIG = AppConfig()


def resolve_form_url(override: Optional[str] = None) -> str:
    if override:
        return override
    env_value = os.getenv(FORM_URL_ENV)
    if env_value:
        return env_value
    return CONFIG.autofill.form_url
