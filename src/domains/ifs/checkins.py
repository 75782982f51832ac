"""Daily crucible check-in validation.

The crucible follows the score entry: three binary self-confrontation
questions (truth, fidelity, courage). A check-in is only accepted once all
three are affirmed.
"""

from datetime import UTC, date, datetime

import structlog

from .errors import ValidationError
from .models import DailyCheckin

logger = structlog.get_logger()

CRUCIBLE_QUESTIONS = ("truth", "fidelity", "courage")


def build_checkin(
    owner_id: str,
    day: date,
    *,
    truth: bool,
    fidelity: bool,
    courage: bool,
    recorded_at: datetime | None = None,
) -> DailyCheckin:
    """Validate and build a crucible check-in.

    Raises:
        ValidationError: owner_id is empty or any answer is not affirmed.
    """
    if not owner_id:
        raise ValidationError("owner_id is required")
    answers = {"truth": truth, "fidelity": fidelity, "courage": courage}
    missing = [q for q in CRUCIBLE_QUESTIONS if answers[q] is not True]
    if missing:
        raise ValidationError(
            f"All crucible questions must be affirmed; missing: {', '.join(missing)}"
        )

    checkin = DailyCheckin(
        owner_id=owner_id,
        date=day,
        recorded_at=recorded_at or datetime.now(UTC),
        **answers,
    )
    logger.info("ifs_checkin_recorded", owner_id=owner_id, date=day.isoformat())
    return checkin
