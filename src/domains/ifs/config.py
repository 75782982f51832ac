"""IFS scoring and trigger policy configuration.

Category weights and every trigger threshold are explicit values handed to
the calculator and the trigger engine. Defaults follow the accountability
charter:

- Virtue Council sanction warning: 3 consecutive days below 75.
- Restorative Justice Board review: 5 days below 50 in the last 30 days.
- Graduation track: 180 consecutive days at or above 90.
"""

import math
import os
from dataclasses import dataclass, field

from .errors import ConfigurationError

WEIGHT_TOLERANCE = 1e-6


@dataclass(frozen=True)
class ScoreWeights:
    """Category weights for the composite score. Must sum to 1.0."""

    internal_fortitude: float = 0.40  # Category I
    external_accountability: float = 0.40  # Category II
    high_stakes_integrity: float = 0.20  # Category III

    def __post_init__(self) -> None:
        for name, value in self.as_dict().items():
            if not math.isfinite(value):
                raise ConfigurationError(f"Weight {name} must be finite, got {value}")
            if value < 0:
                raise ConfigurationError(f"Weight {name} must be non-negative, got {value}")
        total = sum(self.as_dict().values())
        if abs(total - 1.0) > WEIGHT_TOLERANCE:
            raise ConfigurationError(
                f"Category weights must sum to 1.0, got {total:.4f}. "
                f"Internal={self.internal_fortitude}, "
                f"External={self.external_accountability}, "
                f"HighStakes={self.high_stakes_integrity}"
            )

    def as_dict(self) -> dict[str, float]:
        return {
            "internal_fortitude": self.internal_fortitude,
            "external_accountability": self.external_accountability,
            "high_stakes_integrity": self.high_stakes_integrity,
        }


@dataclass(frozen=True)
class ThresholdConfig:
    """Trigger thresholds evaluated over a score history."""

    # Virtue Council: consecutive days strictly below this score
    sanction_score_threshold: int = 75
    sanction_streak_days: int = 3

    # Restorative Justice Board: total days strictly below this score
    # within the trailing window (not required to be consecutive)
    review_score_threshold: int = 50
    review_window_days: int = 30
    review_day_count: int = 5

    # Graduation track: consecutive days at or above this score
    graduation_score_threshold: int = 90
    graduation_streak_days: int = 180

    # Records dated after the evaluation date are left out of every scan
    exclude_future_records: bool = True

    def __post_init__(self) -> None:
        for name in (
            "sanction_score_threshold",
            "sanction_streak_days",
            "review_score_threshold",
            "review_window_days",
            "review_day_count",
            "graduation_score_threshold",
            "graduation_streak_days",
        ):
            value = getattr(self, name)
            if value < 0:
                raise ConfigurationError(f"Threshold {name} must be non-negative, got {value}")


@dataclass(frozen=True)
class IFSConfig:
    """Top-level IFS policy: weights plus trigger thresholds."""

    weights: ScoreWeights = field(default_factory=ScoreWeights)
    thresholds: ThresholdConfig = field(default_factory=ThresholdConfig)

    @classmethod
    def from_env(cls) -> "IFSConfig":
        """Load config with environment variable overrides (IFS_ prefix)."""
        weights = ScoreWeights(
            internal_fortitude=_env_float("IFS_WEIGHT_INTERNAL", 0.40),
            external_accountability=_env_float("IFS_WEIGHT_EXTERNAL", 0.40),
            high_stakes_integrity=_env_float("IFS_WEIGHT_HIGH_STAKES", 0.20),
        )
        thresholds = ThresholdConfig(
            sanction_score_threshold=_env_int("IFS_SANCTION_SCORE_THRESHOLD", 75),
            sanction_streak_days=_env_int("IFS_SANCTION_STREAK_DAYS", 3),
            review_score_threshold=_env_int("IFS_REVIEW_SCORE_THRESHOLD", 50),
            review_window_days=_env_int("IFS_REVIEW_WINDOW_DAYS", 30),
            review_day_count=_env_int("IFS_REVIEW_DAY_COUNT", 5),
            graduation_score_threshold=_env_int("IFS_GRADUATION_SCORE_THRESHOLD", 90),
            graduation_streak_days=_env_int("IFS_GRADUATION_STREAK_DAYS", 180),
            exclude_future_records=_env_bool("IFS_EXCLUDE_FUTURE_RECORDS", True),
        )
        return cls(weights=weights, thresholds=thresholds)


def _env_float(name: str, default: float) -> float:
    if v := os.getenv(name):
        try:
            return float(v)
        except ValueError as exc:
            raise ConfigurationError(f"{name} must be a number, got {v!r}") from exc
    return default


def _env_int(name: str, default: int) -> int:
    if v := os.getenv(name):
        try:
            return int(v)
        except ValueError as exc:
            raise ConfigurationError(f"{name} must be an integer, got {v!r}") from exc
    return default


_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def _env_bool(name: str, default: bool) -> bool:
    if v := os.getenv(name):
        flag = v.strip().lower()
        if flag in _TRUE_VALUES:
            return True
        if flag in _FALSE_VALUES:
            return False
        raise ConfigurationError(f"{name} must be a boolean, got {v!r}")
    return default


default_weights = ScoreWeights()
default_thresholds = ThresholdConfig()
