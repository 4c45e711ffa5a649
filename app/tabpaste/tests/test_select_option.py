from __future__ import annotations

from tabpaste.automation.render_sync import wait_for_options_stable
from tabpaste.automation.select_option import select_best_match
from tabpaste.config import SelectConfig
from tabpaste.pipeline.option_match import TIER_CONTAINS, TIER_EXACT

STATE_SELECT = """
<select id="s">
  <option value="">Select a state</option>
  <option value="NY">New York</option>
  <option value="NJ">New Jersey</option>
</select>
<script>
  window.__changes = 0;
  document.getElementById('s').addEventListener('change', () => { window.__changes += 1; });
</script>
"""

FAST = SelectConfig(wait_options=False)


def test_exact_value_selection_emits_change(page) -> None:
    page.set_content(STATE_SELECT)
    outcome = select_best_match(page, page.query_selector("#s"), "nj", FAST)
    assert outcome.applied
    assert outcome.match.tier == TIER_EXACT
    assert page.input_value("#s") == "NJ"
    assert page.evaluate("() => window.__changes") == 1


def test_contains_tie_break_shorter_label(page) -> None:
    page.set_content(STATE_SELECT)
    outcome = select_best_match(page, page.query_selector("#s"), "ew", FAST)
    assert outcome.match.tier == TIER_CONTAINS
    assert page.input_value("#s") == "NY"


def test_contains_tie_break_equal_labels_uses_document_order(page) -> None:
    page.set_content(
        """
        <select id="s">
          <option value="E">East Ham</option>
          <option value="W">West Ham</option>
        </select>
        """
    )
    page.select_option("#s", "W")
    outcome = select_best_match(page, page.query_selector("#s"), "ham", FAST)
    assert outcome.match.tier == TIER_CONTAINS
    assert page.input_value("#s") == "E"


def test_no_match_leaves_selection(page) -> None:
    page.set_content(STATE_SELECT)
    page.select_option("#s", "NY")
    outcome = select_best_match(page, page.query_selector("#s"), "Texas", FAST)
    assert outcome.match is None
    assert not outcome.applied
    assert page.input_value("#s") == "NY"
    assert page.evaluate("() => window.__changes") == 0


def test_empty_value_is_a_noop(page) -> None:
    page.set_content(STATE_SELECT)
    page.select_option("#s", "NJ")
    outcome = select_best_match(page, page.query_selector("#s"), "", FAST)
    assert outcome.match is None
    assert page.input_value("#s") == "NJ"


def test_verify_and_retry_reapplies_overwritten_value(page) -> None:
    page.set_content(
        STATE_SELECT
        + """
        <script>
          let reset = false;
          const s = document.getElementById('s');
          s.addEventListener('change', () => {
            if (reset) return;
            reset = true;
            setTimeout(() => { s.value = ''; }, 0);
          });
        </script>
        """
    )
    outcome = select_best_match(page, page.query_selector("#s"), "New Jersey", SelectConfig(wait_options=False))
    assert outcome.retried
    assert outcome.readback == "NJ"
    assert page.input_value("#s") == "NJ"


def test_without_verify_overwrite_sticks(page) -> None:
    page.set_content(
        STATE_SELECT
        + """
        <script>
          const s = document.getElementById('s');
          s.addEventListener('change', () => { setTimeout(() => { s.value = ''; }, 0); });
        </script>
        """
    )
    outcome = select_best_match(page, page.query_selector("#s"), "NJ", SelectConfig.legacy())
    assert outcome.applied
    assert not outcome.retried
    page.evaluate("() => new Promise(r => setTimeout(r, 10))")
    assert page.input_value("#s") == ""


def test_waits_for_async_options(page) -> None:
    page.set_content('<select id="s"><option value="">Loading…</option></select>')
    page.evaluate(
        """() => setTimeout(() => {
            const s = document.getElementById('s');
            for (const [value, text] of [['TK', 'Tokyo'], ['OS', 'Osaka']]) {
                const opt = document.createElement('option');
                opt.value = value;
                opt.textContent = text;
                s.appendChild(opt);
            }
        }, 10)"""
    )
    outcome = select_best_match(page, page.query_selector("#s"), "Osaka", SelectConfig(wait_options=True))
    assert outcome.match is not None
    assert page.input_value("#s") == "OS"


def test_stability_wait_returns_early_when_unchanged(page) -> None:
    page.set_content(STATE_SELECT)
    info = wait_for_options_stable(page.query_selector("#s"), timeout_ms=2000, grace_ms=30)
    assert info["reason"] == "unchanged"
    assert info["initial"] == info["final"] == 3
    assert info["elapsed_ms"] < 2000


def test_stability_wait_tracks_changes(page) -> None:
    page.set_content('<select id="s"></select>')
    page.evaluate(
        """() => {
            const s = document.getElementById('s');
            setTimeout(() => s.appendChild(new Option('A', 'a')), 200);
        }"""
    )
    info = wait_for_options_stable(page.query_selector("#s"), timeout_ms=2000, grace_ms=500)
    assert info["final"] == 1
    assert info["reason"] == "stable"
    assert info["changes"] >= 1
