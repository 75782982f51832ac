"""Integrity & Functionality Score (IFS) domain."""

from .analytics import classify_band, group_by_owner, recent_history, summarize_window
from .calculator import ScoreCalculator, compute_composite, round_half_up
from .config import IFSConfig, ScoreWeights, ThresholdConfig
from .errors import ConfigurationError, DataIntegrityWarning, ValidationError
from .models import (
    DailyCheckin,
    ScoreBand,
    ScoreRecord,
    SubScores,
    TriggerReport,
    WindowSummary,
)
from .triggers import TriggerEngine, evaluate_triggers

__all__ = [
    "ConfigurationError",
    "DailyCheckin",
    "DataIntegrityWarning",
    "IFSConfig",
    "ScoreBand",
    "ScoreCalculator",
    "ScoreRecord",
    "ScoreWeights",
    "SubScores",
    "ThresholdConfig",
    "TriggerEngine",
    "TriggerReport",
    "ValidationError",
    "WindowSummary",
    "classify_band",
    "compute_composite",
    "evaluate_triggers",
    "group_by_owner",
    "recent_history",
    "round_half_up",
    "summarize_window",
]
