"""Calendar-date helpers for streak and window scans."""

from datetime import date, timedelta

ONE_DAY = timedelta(days=1)


def is_previous_day(candidate: date, reference: date) -> bool:
    """True when ``candidate`` is exactly one calendar day before ``reference``."""
    return reference - candidate == ONE_DAY


def window_start(evaluation_date: date, window_days: int) -> date:
    return evaluation_date - timedelta(days=window_days)


def in_trailing_window(day: date, evaluation_date: date, window_days: int) -> bool:
    """Inclusive ``[evaluation_date - window_days, evaluation_date]`` membership."""
    return window_start(evaluation_date, window_days) <= day <= evaluation_date
