from __future__ import annotations

from pathlib import Path

import pytest

from tabpaste.automation.session import paste_into_form, parse_shortcut, shortcut_script


def test_paste_into_form_records_run(tmp_path: Path, form_fixture_url: str, quiet_config) -> None:
    run_dir = tmp_path / "run"
    summary = paste_into_form(
        "Jane\tDoe\ts3cret\tWA",
        run_dir,
        form_url=form_fixture_url,
        headless=True,
        keep_open_ms=0,
        focus_selector="#first_name",
        config=quiet_config,
    )
    assert summary["status"] == "completed"
    assert summary["values_used"] == 4
    assert [field["readback"] for field in summary["fields"]] == ["Jane", "Doe", "s3cret", "WA"]
    assert summary["fields"][3]["matched_tier"] == "exact"
    assert Path(summary["trace_path"]).exists()
    assert form_fixture_url in summary["final_url"]
    log_text = (run_dir / "run.log").read_text()
    assert "Autofill start." in log_text
    assert "Autofill completed" in log_text


def test_paste_into_form_without_focus_aborts(tmp_path: Path, form_fixture_url: str, quiet_config) -> None:
    summary = paste_into_form(
        "Jane",
        tmp_path / "run",
        form_url=form_fixture_url,
        headless=True,
        keep_open_ms=0,
        config=quiet_config,
    )
    assert summary["status"] == "aborted"
    assert summary["abort_reason"] == "no_focus"
    assert summary["fields"] == []


def test_parse_shortcut() -> None:
    assert parse_shortcut("Alt+Shift+V") == {"alt": True, "shift": True, "ctrl": False, "meta": False, "key": "v"}
    assert parse_shortcut("Ctrl + P")["ctrl"] is True
    with pytest.raises(ValueError):
        parse_shortcut("Hyper+V")
    with pytest.raises(ValueError):
        parse_shortcut("")


def test_shortcut_script_embeds_binding() -> None:
    script = shortcut_script("Ctrl+Shift+Y")
    assert "__tabpasteTrigger" in script
    assert '"key": "y"' in script
