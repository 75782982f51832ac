"""IFS scoring, trigger and check-in API endpoints."""

from datetime import UTC, date, datetime

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from src.db.database import get_session
from src.domains.ifs.analytics import (
    classify_band,
    group_by_owner,
    recent_history,
    summarize_window,
)
from src.domains.ifs.calculator import ScoreCalculator
from src.domains.ifs.checkins import build_checkin
from src.domains.ifs.config import IFSConfig
from src.domains.ifs.models import (
    CheckinSubmission,
    CompositePreviewRequest,
    CompositePreviewResponse,
    DailyCheckin,
    HistoryItem,
    HistoryResponse,
    OwnerSummaryResponse,
    ScoreSubmission,
    TriggerReport,
    TriggerRosterResponse,
)
from src.domains.ifs.repository import ScoreRecordRepository
from src.domains.ifs.triggers import TriggerEngine, deduplicate_by_date

logger = structlog.get_logger()
router = APIRouter(prefix="/api/v1/ifs", tags=["ifs"])

# Invalid policy overrides fail at import, i.e. at startup
_config = IFSConfig.from_env()
_calculator = ScoreCalculator(_config.weights)
_engine = TriggerEngine(_config.thresholds)


def get_repository(
    session: AsyncSession = Depends(get_session),  # noqa: B008
) -> ScoreRecordRepository:
    return ScoreRecordRepository(session)


def _today() -> date:
    return datetime.now(UTC).date()


@router.post("/composite")
async def preview_composite(
    request: CompositePreviewRequest,
    clamp: bool = Query(default=False),
) -> CompositePreviewResponse:
    """Compute the composite for a set of sub-scores without storing it."""
    score = _calculator.score(request.model_dump(), clamp=clamp)
    return CompositePreviewResponse(
        composite_score=score, band=classify_band(score, _config.thresholds)
    )


@router.post("/scores")
async def submit_score(
    submission: ScoreSubmission,
    clamp: bool = Query(default=False),
    repo: ScoreRecordRepository = Depends(get_repository),  # noqa: B008
) -> HistoryItem:
    """Log (or amend) an owner's score for a day."""
    record = _calculator.build_record(
        submission.owner_id,
        submission.date or _today(),
        submission.sub_scores(),
        note=submission.note,
        recorded_by=submission.recorded_by,
        clamp=clamp,
    )
    stored = await repo.upsert(record)
    return HistoryItem(
        record=stored, band=classify_band(stored.composite_score, _config.thresholds)
    )


@router.get("/owners")
async def list_owners(
    repo: ScoreRecordRepository = Depends(get_repository),  # noqa: B008
) -> dict:
    owners = await repo.list_owners()
    return {"items": owners, "total": len(owners)}


@router.get("/triggers")
async def list_triggers(
    evaluation_date: date | None = Query(default=None),
    repo: ScoreRecordRepository = Depends(get_repository),  # noqa: B008
) -> TriggerRosterResponse:
    """Trigger report for every owner with history, for the staff roster."""
    as_of = evaluation_date or _today()
    grouped = group_by_owner(await repo.list_all())
    reports = [
        _engine.evaluate(history, as_of, owner_id=owner_id)
        for owner_id, history in sorted(grouped.items())
    ]
    return TriggerRosterResponse(items=reports, total=len(reports))


@router.get("/{owner_id}/history")
async def get_history(
    owner_id: str,
    limit: int = Query(default=15, ge=1, le=366),
    repo: ScoreRecordRepository = Depends(get_repository),  # noqa: B008
) -> HistoryResponse:
    records = recent_history(await repo.list_for_owner(owner_id), limit=limit)
    items = [
        HistoryItem(record=r, band=classify_band(r.composite_score, _config.thresholds))
        for r in records
    ]
    return HistoryResponse(owner_id=owner_id, items=items, total=len(items))


@router.get("/{owner_id}/triggers")
async def get_triggers(
    owner_id: str,
    evaluation_date: date | None = Query(default=None),
    repo: ScoreRecordRepository = Depends(get_repository),  # noqa: B008
) -> TriggerReport:
    history = await repo.list_for_owner(owner_id)
    return _engine.evaluate(history, evaluation_date or _today(), owner_id=owner_id)


@router.get("/{owner_id}/summary")
async def get_summary(
    owner_id: str,
    evaluation_date: date | None = Query(default=None),
    repo: ScoreRecordRepository = Depends(get_repository),  # noqa: B008
) -> OwnerSummaryResponse:
    """Trigger report plus trailing-window average and compliance days."""
    as_of = evaluation_date or _today()
    # Engine and window summary share one deduplicated snapshot
    history = deduplicate_by_date(await repo.list_for_owner(owner_id))
    return OwnerSummaryResponse(
        owner_id=owner_id,
        triggers=_engine.evaluate(history, as_of, owner_id=owner_id),
        window=summarize_window(history, as_of, _config.thresholds),
    )


@router.post("/{owner_id}/checkins")
async def submit_checkin(
    owner_id: str,
    submission: CheckinSubmission,
    repo: ScoreRecordRepository = Depends(get_repository),  # noqa: B008
) -> DailyCheckin:
    checkin = build_checkin(
        owner_id,
        submission.date or _today(),
        truth=submission.truth,
        fidelity=submission.fidelity,
        courage=submission.courage,
    )
    return await repo.upsert_checkin(checkin)


@router.get("/{owner_id}/checkins/{day}")
async def get_checkin(
    owner_id: str,
    day: date,
    repo: ScoreRecordRepository = Depends(get_repository),  # noqa: B008
) -> DailyCheckin:
    checkin = await repo.get_checkin(owner_id, day)
    if checkin is None:
        raise HTTPException(
            status_code=404,
            detail=f"No check-in for {owner_id} on {day.isoformat()}",
        )
    return checkin
