"""IFS composite score calculator.

IFS = internal * 0.40 + external * 0.40 + high_stakes * 0.20, rounded half-up
to an integer. Each sub-score must lie in [0, 100]; out-of-range input is
rejected unless the caller explicitly asks for clamping.
"""

import math
from collections.abc import Mapping
from datetime import UTC, date, datetime
from decimal import ROUND_HALF_UP, Decimal
from numbers import Real
from typing import Any

import structlog

from .config import ScoreWeights, default_weights
from .errors import ValidationError
from .models import ScoreRecord, SubScores

logger = structlog.get_logger()

SCORE_MIN = 0
SCORE_MAX = 100

SUB_SCORE_FIELDS = (
    "internal_fortitude",
    "external_accountability",
    "high_stakes_integrity",
)


def round_half_up(value: float | Decimal) -> int:
    """Round to the nearest integer, ties away from zero (72.5 -> 73)."""
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def _check_sub_score(name: str, value: Any, clamp: bool) -> float:
    if isinstance(value, bool) or not isinstance(value, Real):
        raise ValidationError(f"Sub-score {name} must be numeric, got {value!r}")
    if not math.isfinite(value):
        raise ValidationError(f"Sub-score {name} must be finite, got {value!r}")
    if SCORE_MIN <= value <= SCORE_MAX:
        return value
    if clamp:
        return max(SCORE_MIN, min(SCORE_MAX, value))
    raise ValidationError(
        f"Sub-score {name} must be between {SCORE_MIN} and {SCORE_MAX}, got {value}"
    )


def normalize_sub_scores(
    sub_scores: SubScores | Mapping[str, Any], *, clamp: bool = False
) -> SubScores:
    """Validate sub-scores, clamping into range only when ``clamp`` is set.

    Raises:
        ValidationError: A sub-score is missing, non-numeric, non-finite, or
            out of range while ``clamp`` is False.
    """
    raw = sub_scores.model_dump() if isinstance(sub_scores, SubScores) else sub_scores
    values: dict[str, float] = {}
    for name in SUB_SCORE_FIELDS:
        if name not in raw:
            raise ValidationError(f"Sub-score {name} is required")
        values[name] = _check_sub_score(name, raw[name], clamp)
    return SubScores(**values)


def compute_composite(
    sub_scores: SubScores | Mapping[str, Any],
    weights: ScoreWeights | None = None,
    *,
    clamp: bool = False,
) -> int:
    """Compute the 0-100 composite IFS from three sub-scores."""
    weights = weights or default_weights
    checked = normalize_sub_scores(sub_scores, clamp=clamp)
    return _weighted_composite(checked, weights)


def _weighted_composite(sub_scores: SubScores, weights: ScoreWeights) -> int:
    # Decimal keeps 0.4 * 85 from drifting below a .5 boundary
    total = sum(
        Decimal(str(getattr(sub_scores, name))) * Decimal(str(weight))
        for name, weight in weights.as_dict().items()
    )
    return round_half_up(total)


class ScoreCalculator:
    """Scores daily submissions and builds the records to persist."""

    def __init__(self, weights: ScoreWeights | None = None) -> None:
        self._weights = weights or default_weights

    @property
    def weights(self) -> ScoreWeights:
        return self._weights

    def score(self, sub_scores: SubScores | Mapping[str, Any], *, clamp: bool = False) -> int:
        return compute_composite(sub_scores, self._weights, clamp=clamp)

    def build_record(
        self,
        owner_id: str,
        day: date,
        sub_scores: SubScores | Mapping[str, Any],
        *,
        note: str | None = None,
        recorded_by: str | None = None,
        recorded_at: datetime | None = None,
        clamp: bool = False,
    ) -> ScoreRecord:
        """Validate a submission and produce its ScoreRecord.

        The stored sub-scores are the validated (and, if requested, clamped)
        values, so the record's composite always matches its own inputs.
        """
        if not owner_id:
            raise ValidationError("owner_id is required")
        checked = normalize_sub_scores(sub_scores, clamp=clamp)
        composite = _weighted_composite(checked, self._weights)

        record = ScoreRecord(
            owner_id=owner_id,
            date=day,
            sub_scores=checked,
            composite_score=composite,
            note=note or None,
            recorded_by=recorded_by,
            recorded_at=recorded_at or datetime.now(UTC),
        )

        logger.info(
            "ifs_score_computed",
            owner_id=owner_id,
            date=day.isoformat(),
            composite_score=composite,
            clamped=clamp,
        )
        return record
