"""Score-history analytics for the accountability dashboard.

Band classification for individual records, the trailing-window summary
(average and compliance days), and helpers for splitting a mixed
collection of records into per-owner histories.
"""

from collections import defaultdict
from collections.abc import Iterable
from datetime import date
from decimal import Decimal

from .calculator import round_half_up
from .config import ThresholdConfig, default_thresholds
from .dates import in_trailing_window, window_start
from .models import ScoreBand, ScoreRecord, WindowSummary
from .triggers import deduplicate_by_date

DEFAULT_HISTORY_LIMIT = 15


def classify_band(score: int, config: ThresholdConfig | None = None) -> ScoreBand:
    cfg = config or default_thresholds
    if score >= cfg.graduation_score_threshold:
        return ScoreBand.GRADUATION_TRACK
    if score >= cfg.sanction_score_threshold:
        return ScoreBand.COMPLIANCE
    if score >= cfg.review_score_threshold:
        return ScoreBand.SANCTION_WARNING
    return ScoreBand.REVIEW_FAILURE


def summarize_window(
    history: Iterable[ScoreRecord],
    evaluation_date: date,
    config: ThresholdConfig | None = None,
) -> WindowSummary:
    """Average score and compliance days over the trailing review window."""
    cfg = config or default_thresholds
    recent = [
        r
        for r in deduplicate_by_date(history)
        if in_trailing_window(r.date, evaluation_date, cfg.review_window_days)
    ]

    average = 0
    if recent:
        total = sum(Decimal(r.composite_score) for r in recent)
        average = round_half_up(total / len(recent))

    return WindowSummary(
        window_start=window_start(evaluation_date, cfg.review_window_days),
        window_end=evaluation_date,
        average_score=average,
        compliance_days=sum(
            1 for r in recent if r.composite_score >= cfg.sanction_score_threshold
        ),
        total_days=len(recent),
    )


def recent_history(
    history: Iterable[ScoreRecord], limit: int = DEFAULT_HISTORY_LIMIT
) -> list[ScoreRecord]:
    """Most recent records first, one per date."""
    if limit <= 0:
        return []
    return deduplicate_by_date(history)[:limit]


def group_by_owner(records: Iterable[ScoreRecord]) -> dict[str, list[ScoreRecord]]:
    grouped: dict[str, list[ScoreRecord]] = defaultdict(list)
    for record in records:
        grouped[record.owner_id].append(record)
    return dict(grouped)
