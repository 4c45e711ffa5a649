from __future__ import annotations

import json
import logging
import uuid
from dataclasses import asdict
from datetime import datetime
from pathlib import Path
from typing import Dict

import anyio
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from .automation.session import paste_into_form, with_select_overrides
from .config import CONFIG
from .messages import get_message
from .schemas import AutofillRequest

RUNS_DIR = CONFIG.runs_dir

logging.basicConfig(level=CONFIG.log_level, format="%(asctime)s %(levelname)s %(name)s - %(message)s")
LOGGER = logging.getLogger("tabpaste")

app = FastAPI(title=get_message("contextMenuTitle", CONFIG.locale))

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
async def health() -> Dict[str, str]:
    return {"status": "ok"}


@app.get("/config")
async def config() -> Dict[str, object]:
    payload = asdict(CONFIG)
    payload["runs_dir"] = str(CONFIG.runs_dir)
    return payload


def _create_run_dir() -> Path:
    run_id = datetime.utcnow().strftime("%Y%m%d_%H%M%S") + "_" + uuid.uuid4().hex[:8]
    run_dir = RUNS_DIR / run_id
    run_dir.mkdir(parents=True, exist_ok=True)
    return run_dir


def _log_run(run_dir: Path, message: str) -> None:
    timestamp = datetime.utcnow().isoformat()
    with (run_dir / "run.log").open("a") as f:
        f.write(f"[{timestamp}] {message}\n")


def _write_json_artifact(run_dir: Path, filename: str, payload: Dict) -> None:
    path = run_dir / filename
    path.write_text(json.dumps(payload, indent=2, default=str))


@app.post("/autofill")
async def autofill(payload: Dict):
    if not isinstance(payload, dict):
        return JSONResponse({"error": "Invalid payload"}, status_code=400)
    try:
        request = AutofillRequest.model_validate(payload)
    except ValidationError as exc:
        return JSONResponse({"error": "Invalid payload", "details": exc.errors()}, status_code=400)

    run_dir = _create_run_dir()
    _log_run(run_dir, "Starting autofill")
    autofill_cfg = with_select_overrides(
        CONFIG.autofill,
        run_delay_ms=request.delay_ms,
        **request.select.model_dump(exclude_none=True),
    )
    try:
        summary = await anyio.to_thread.run_sync(
            paste_into_form,
            request.text,
            run_dir,
            request.form_url,
            autofill_cfg.headless,
            autofill_cfg.slow_mo_ms,
            autofill_cfg.keep_open_ms,
            request.focus_selector,
            autofill_cfg,
        )
    except Exception as exc:  # noqa: BLE001
        LOGGER.exception("Autofill failed")
        _log_run(run_dir, f"Autofill failed: {exc}")
        summary = {
            "status": "aborted",
            "abort_reason": "error",
            "fields": [],
            "trace_path": "",
            "final_url": "",
            "error": str(exc),
        }
        return JSONResponse({"run_id": run_dir.name, "summary": summary})

    _write_json_artifact(run_dir, "autofill_summary.json", summary)
    _log_run(
        run_dir,
        f"Autofill {summary.get('status')}. Values used: {summary.get('values_used', 0)}"
        f"/{summary.get('values_total', 0)}",
    )
    return JSONResponse({"run_id": run_dir.name, "summary": summary})
