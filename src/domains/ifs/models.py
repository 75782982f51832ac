"""Pydantic models for the IFS scoring domain."""

import datetime as dt
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

# --- Enums ---


class ScoreBand(StrEnum):
    GRADUATION_TRACK = "graduation_track"
    COMPLIANCE = "compliance"
    SANCTION_WARNING = "sanction_warning"
    REVIEW_FAILURE = "review_failure"


# --- Core Records ---


class SubScores(BaseModel):
    """The three self-reported category inputs.

    Range checks live in the calculator so that clamping can be requested
    explicitly by the input path.
    """

    model_config = ConfigDict(frozen=True)

    internal_fortitude: float
    external_accountability: float
    high_stakes_integrity: float


class ScoreRecord(BaseModel):
    """One composite score per owner per calendar day."""

    model_config = ConfigDict(frozen=True)

    owner_id: str
    date: dt.date
    sub_scores: SubScores
    composite_score: int
    note: str | None = None
    recorded_by: str | None = None
    recorded_at: dt.datetime | None = None


class DailyCheckin(BaseModel):
    """The daily crucible: three binary self-confrontation answers."""

    model_config = ConfigDict(frozen=True)

    owner_id: str
    date: dt.date
    truth: bool = False
    fidelity: bool = False
    courage: bool = False
    recorded_at: dt.datetime | None = None


# --- Derived Outputs ---


class TriggerReport(BaseModel):
    owner_id: str | None = None
    evaluation_date: dt.date
    latest_score: int | None = None
    consecutive_sanction_warning_days: int = 0
    consecutive_graduation_days: int = 0
    review_mandate_day_count: int = 0
    sanction_warning_triggered: bool = False
    review_mandate_triggered: bool = False
    graduation_triggered: bool = False
    records_evaluated: int = 0


class WindowSummary(BaseModel):
    window_start: dt.date
    window_end: dt.date
    average_score: int = 0
    compliance_days: int = 0
    total_days: int = 0


# --- API Request Models ---


class ScoreSubmission(BaseModel):
    owner_id: str
    # Defaults to the server's current date when omitted
    date: dt.date | None = None
    internal_fortitude: float
    external_accountability: float
    high_stakes_integrity: float
    note: str | None = None
    recorded_by: str | None = None

    def sub_scores(self) -> SubScores:
        return SubScores(
            internal_fortitude=self.internal_fortitude,
            external_accountability=self.external_accountability,
            high_stakes_integrity=self.high_stakes_integrity,
        )


class CompositePreviewRequest(BaseModel):
    internal_fortitude: float
    external_accountability: float
    high_stakes_integrity: float


class CheckinSubmission(BaseModel):
    date: dt.date | None = None
    truth: bool = False
    fidelity: bool = False
    courage: bool = False


# --- API Response Models ---


class CompositePreviewResponse(BaseModel):
    composite_score: int = Field(ge=0, le=100)
    band: ScoreBand


class HistoryItem(BaseModel):
    record: ScoreRecord
    band: ScoreBand


class HistoryResponse(BaseModel):
    owner_id: str
    items: list[HistoryItem]
    total: int


class OwnerSummaryResponse(BaseModel):
    owner_id: str
    triggers: TriggerReport
    window: WindowSummary


class TriggerRosterResponse(BaseModel):
    items: list[TriggerReport]
    total: int
