from __future__ import annotations

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class RunStatus(str, Enum):
    COMPLETED = "completed"
    ABORTED = "aborted"


class AbortReason(str, Enum):
    CLIPBOARD_UNREADABLE = "clipboard_unreadable"
    CLIPBOARD_EMPTY = "clipboard_empty"
    NO_FIELDS = "no_fields"
    NO_FOCUS = "no_focus"
    ERROR = "error"


class StopReason(str, Enum):
    VALUES_EXHAUSTED = "values_exhausted"
    NO_CURRENT_TARGET = "no_current_target"
    NO_NEXT_TARGET = "no_next_target"


class FieldResult(BaseModel):
    index: int
    tag: str
    input_type: Optional[str] = None
    element_id: Optional[str] = None
    name: Optional[str] = None
    value: str
    result: str
    matched_tier: Optional[str] = None
    matched_key: Optional[str] = None
    retried: bool = False
    readback: Optional[str] = None
    error: Optional[str] = None


class AutofillSummary(BaseModel):
    status: RunStatus
    abort_reason: Optional[AbortReason] = None
    stop_reason: Optional[StopReason] = None
    values_total: int = 0
    values_used: int = 0
    fields: List[FieldResult] = Field(default_factory=list)
    duration_ms: int = 0
    error: Optional[str] = None


class SelectOverrides(BaseModel):
    value_first: Optional[bool] = None
    allow_contains_fallback: Optional[bool] = None
    verify_and_retry: Optional[bool] = None
    wait_options: Optional[bool] = None
    options_timeout_ms: Optional[int] = None
    delay_ms: Optional[int] = None


class AutofillRequest(BaseModel):
    text: Optional[str] = None
    form_url: Optional[str] = None
    focus_selector: Optional[str] = None
    delay_ms: Optional[int] = None
    select: SelectOverrides = Field(default_factory=SelectOverrides)
