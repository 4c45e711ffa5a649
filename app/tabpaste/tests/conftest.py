import sys
from pathlib import Path

import pytest
from playwright.sync_api import sync_playwright

ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from tabpaste.config import AutofillConfig  # noqa: E402

FIXTURES_DIR = Path(__file__).resolve().parent / "fixtures"
LOCAL_FORM_PATH = FIXTURES_DIR / "form.html"


@pytest.fixture(scope="session")
def form_fixture_url() -> str:
    if not LOCAL_FORM_PATH.exists():
        pytest.fail(f"Local form fixture missing at {LOCAL_FORM_PATH}")
    return LOCAL_FORM_PATH.resolve().as_uri()


# Module scope so the sync driver is stopped before modules that launch
# their own Playwright instance.
@pytest.fixture(scope="module")
def browser():
    with sync_playwright() as playwright:
        browser = playwright.chromium.launch(headless=True)
        yield browser
        browser.close()


@pytest.fixture
def page(browser):
    context = browser.new_context()
    page = context.new_page()
    yield page
    context.close()


@pytest.fixture
def quiet_config() -> AutofillConfig:
    return AutofillConfig(delay_ms=0, notify=False)
