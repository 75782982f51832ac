"""IFS trigger engine.

Evaluates one individual's score history against the accountability
thresholds:

1. Sanction warning (Virtue Council): consecutive most-recent calendar days
   with a composite below the sanction threshold.
2. Review mandate (Restorative Justice Board): total days below the review
   threshold inside the trailing window ending at the evaluation date.
3. Graduation track: consecutive most-recent calendar days at or above the
   graduation threshold.

Streaks follow calendar adjacency: a missing day ends the streak even when
older records would otherwise qualify. The engine never reads the clock;
the caller supplies the evaluation date.
"""

from collections.abc import Callable, Iterable, Sequence
from datetime import UTC, date, datetime

import structlog

from .calculator import SCORE_MAX, SCORE_MIN
from .config import ThresholdConfig, default_thresholds
from .dates import in_trailing_window, is_previous_day
from .errors import DataIntegrityWarning
from .models import ScoreRecord, TriggerReport

logger = structlog.get_logger()

ScorePredicate = Callable[[int], bool]


def _supersedes(candidate: ScoreRecord, current: ScoreRecord) -> bool:
    """Last write wins; undated writes lose; remaining ties keep the higher score."""
    if candidate.recorded_at is None and current.recorded_at is not None:
        return False
    if current.recorded_at is None and candidate.recorded_at is not None:
        return True
    if candidate.recorded_at is not None and current.recorded_at is not None:
        candidate_ts = _as_comparable(candidate.recorded_at)
        current_ts = _as_comparable(current.recorded_at)
        if candidate_ts != current_ts:
            return candidate_ts > current_ts
    return candidate.composite_score > current.composite_score


def _as_comparable(value: datetime) -> float:
    # Naive timestamps are treated as UTC so mixed inputs still order
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.timestamp()


def deduplicate_by_date(history: Iterable[ScoreRecord]) -> list[ScoreRecord]:
    """Collapse records sharing a date to the one that superseded the others.

    Returns the survivors sorted by date, most recent first.
    """
    by_date: dict[date, ScoreRecord] = {}
    for record in history:
        current = by_date.get(record.date)
        if current is None:
            by_date[record.date] = record
            continue
        logger.warning(
            "data_integrity_warning",
            kind="duplicate_date",
            category=DataIntegrityWarning.__name__,
            owner_id=record.owner_id,
            date=record.date.isoformat(),
        )
        if _supersedes(record, current):
            by_date[record.date] = record
    return sorted(by_date.values(), key=lambda r: r.date, reverse=True)


def streak_length(records: Sequence[ScoreRecord], predicate: ScorePredicate) -> int:
    """Length of the calendar-consecutive run at the head of ``records``.

    ``records`` must be sorted by date descending with unique dates. The
    scan stops at the first record whose score fails ``predicate`` or whose
    date is not exactly one day before the previous record's date.
    """
    count = 0
    previous: ScoreRecord | None = None
    for record in records:
        if previous is not None and not is_previous_day(record.date, previous.date):
            break
        if not predicate(record.composite_score):
            break
        count += 1
        previous = record
    return count


def window_count(
    records: Iterable[ScoreRecord],
    evaluation_date: date,
    window_days: int,
    predicate: ScorePredicate,
) -> int:
    """Count records inside the trailing window whose score satisfies ``predicate``."""
    return sum(
        1
        for record in records
        if in_trailing_window(record.date, evaluation_date, window_days)
        and predicate(record.composite_score)
    )


class TriggerEngine:
    """Computes accountability triggers from a score history snapshot."""

    def __init__(self, config: ThresholdConfig | None = None) -> None:
        self._config = config or default_thresholds

    def evaluate(
        self,
        history: Iterable[ScoreRecord],
        evaluation_date: date,
        owner_id: str | None = None,
    ) -> TriggerReport:
        """Evaluate triggers for one individual's history.

        Args:
            history: Score records for a single owner, in any order.
            evaluation_date: The day the report is evaluated for.
            owner_id: Optional owner label carried onto the report.

        Returns:
            TriggerReport with streak counters, window count and flags.
        """
        cfg = self._config
        records = deduplicate_by_date(history)

        if cfg.exclude_future_records:
            future = [r for r in records if r.date > evaluation_date]
            if future:
                logger.info(
                    "ifs_future_records_excluded",
                    owner_id=owner_id,
                    count=len(future),
                    evaluation_date=evaluation_date.isoformat(),
                )
                records = [r for r in records if r.date <= evaluation_date]

        self._warn_out_of_range(records)

        if not records:
            return TriggerReport(owner_id=owner_id, evaluation_date=evaluation_date)

        sanction_days = streak_length(
            records, lambda score: score < cfg.sanction_score_threshold
        )
        graduation_days = streak_length(
            records, lambda score: score >= cfg.graduation_score_threshold
        )
        review_days = window_count(
            records,
            evaluation_date,
            cfg.review_window_days,
            lambda score: score < cfg.review_score_threshold,
        )

        report = TriggerReport(
            owner_id=owner_id,
            evaluation_date=evaluation_date,
            latest_score=records[0].composite_score,
            consecutive_sanction_warning_days=sanction_days,
            consecutive_graduation_days=graduation_days,
            review_mandate_day_count=review_days,
            sanction_warning_triggered=sanction_days >= cfg.sanction_streak_days,
            review_mandate_triggered=review_days >= cfg.review_day_count,
            graduation_triggered=graduation_days >= cfg.graduation_streak_days,
            records_evaluated=len(records),
        )

        if report.sanction_warning_triggered or report.review_mandate_triggered:
            logger.info(
                "ifs_triggers_raised",
                owner_id=owner_id,
                sanction_warning=report.sanction_warning_triggered,
                review_mandate=report.review_mandate_triggered,
                sanction_days=sanction_days,
                review_days=review_days,
            )

        return report

    def _warn_out_of_range(self, records: Iterable[ScoreRecord]) -> None:
        for record in records:
            if not SCORE_MIN <= record.composite_score <= SCORE_MAX:
                logger.warning(
                    "data_integrity_warning",
                    kind="composite_out_of_range",
                    category=DataIntegrityWarning.__name__,
                    owner_id=record.owner_id,
                    date=record.date.isoformat(),
                    composite_score=record.composite_score,
                )


def evaluate_triggers(
    history: Iterable[ScoreRecord],
    evaluation_date: date,
    config: ThresholdConfig | None = None,
    owner_id: str | None = None,
) -> TriggerReport:
    """Functional entry point for :class:`TriggerEngine`."""
    return TriggerEngine(config).evaluate(history, evaluation_date, owner_id=owner_id)
