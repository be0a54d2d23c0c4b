"""
Type definitions for the Work Log Assistant.

This module defines the data structures that flow through one processing cycle:
the extraction payload returned by the language model, the normalized work log
entries, and the per-entry submission outcomes.
"""

import re
from datetime import date, datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

ISO_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


class WorkLogEntry(BaseModel):
    """
    A normalized unit of extracted work, ready for submission.

    Attributes:
        ticket_id: Ticket key, usually PROJECT-123
        time_spent: Duration in the tracker's grammar (e.g. "1h 30m", "45m")
        comment: Free-text description of the work, may be empty
        work_date: Calendar date the work was done
    """

    model_config = ConfigDict(frozen=True)

    ticket_id: str = Field(..., min_length=1, description="Ticket key, e.g. PROJ-123")
    time_spent: str = Field(..., min_length=1, description="Tracker duration, e.g. 1h 30m")
    comment: str = Field(default="", description="Work description")
    work_date: date = Field(..., description="Date the work was done")

    @field_validator("ticket_id", mode="before")
    @classmethod
    def _coerce_ticket_id(cls, value: Any) -> Any:
        if isinstance(value, (int, str)) and not isinstance(value, bool):
            return str(value).strip()
        return value

    @field_validator("time_spent", mode="before")
    @classmethod
    def _collapse_whitespace(cls, value: Any) -> Any:
        if isinstance(value, str):
            return " ".join(value.split())
        return value

    @field_validator("comment", mode="before")
    @classmethod
    def _default_comment(cls, value: Any) -> Any:
        if value is None:
            return ""
        if isinstance(value, str):
            return value.strip()
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("work_date", mode="before")
    @classmethod
    def _iso_date_only(cls, value: Any) -> Any:
        # Lax mode would read numbers as Unix timestamps
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, date):
            return value
        if isinstance(value, str) and ISO_DATE_PATTERN.match(value.strip()):
            return date.fromisoformat(value.strip())
        raise ValueError(f"work_date must be a YYYY-MM-DD date, got {value!r}")


class SubmissionOutcome(BaseModel):
    """
    Result of attempting to record one WorkLogEntry against the tracker.
    """

    ticket_id: str = Field(..., description="Ticket the submission targeted")
    success: bool = Field(..., description="Whether the tracker accepted the work log")
    error: Optional[str] = Field(default=None, description="Human-readable failure detail")

    @classmethod
    def ok(cls, ticket_id: str) -> "SubmissionOutcome":
        return cls(ticket_id=ticket_id, success=True)

    @classmethod
    def failed(cls, ticket_id: str, error: str) -> "SubmissionOutcome":
        return cls(ticket_id=ticket_id, success=False, error=error)


class ExtractionPayload(BaseModel):
    """
    Top-level JSON document produced by the extraction model.

    Items are kept as raw values here and validated one by one during
    normalization, so a single bad item does not discard its siblings.
    """

    model_config = ConfigDict(extra="ignore")

    entries: List[Any] = Field(default_factory=list, description="Raw extracted entries")

    @field_validator("entries", mode="before")
    @classmethod
    def _missing_entries(cls, value: Any) -> Any:
        return [] if value is None else value


class ProcessingReport(BaseModel):
    """
    Everything one processing cycle produced, in input order.
    """

    entries: List[WorkLogEntry] = Field(default_factory=list)
    outcomes: List[SubmissionOutcome] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.entries

    @property
    def succeeded(self) -> List[SubmissionOutcome]:
        return [outcome for outcome in self.outcomes if outcome.success]

    @property
    def failed(self) -> List[SubmissionOutcome]:
        return [outcome for outcome in self.outcomes if not outcome.success]

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode="json")


class Transcript(BaseModel):
    """
    Result of automatic speech recognition.
    """

    text: str = Field(..., description="Transcribed text")
    lang_hint: str = Field(default="auto", description="Detected or hinted language code")
