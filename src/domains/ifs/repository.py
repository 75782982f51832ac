"""Score record storage on top of an async SQLAlchemy session.

Records are keyed by ``(owner_id, date)``. Writing the same key again
amends the existing row in place, so a later read sees only the latest
write for that day.
"""

from datetime import date

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.db.models import DailyCheckinDB, ScoreRecordDB

from .models import DailyCheckin, ScoreRecord, SubScores

logger = structlog.get_logger()


def _to_record(row: ScoreRecordDB) -> ScoreRecord:
    return ScoreRecord(
        owner_id=row.owner_id,
        date=row.score_date,
        sub_scores=SubScores(
            internal_fortitude=row.internal_fortitude,
            external_accountability=row.external_accountability,
            high_stakes_integrity=row.high_stakes_integrity,
        ),
        composite_score=row.composite_score,
        note=row.note,
        recorded_by=row.recorded_by,
        recorded_at=row.recorded_at,
    )


def _to_checkin(row: DailyCheckinDB) -> DailyCheckin:
    return DailyCheckin(
        owner_id=row.owner_id,
        date=row.checkin_date,
        truth=row.truth,
        fidelity=row.fidelity,
        courage=row.courage,
        recorded_at=row.recorded_at,
    )


class ScoreRecordRepository:
    """Append, amend and read IFS records by owner and date."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def upsert(self, record: ScoreRecord) -> ScoreRecord:
        """Insert the record, or replace the existing one for the same day."""
        result = await self._session.execute(
            select(ScoreRecordDB).where(
                ScoreRecordDB.owner_id == record.owner_id,
                ScoreRecordDB.score_date == record.date,
            )
        )
        row = result.scalar_one_or_none()
        amended = row is not None
        if row is None:
            row = ScoreRecordDB(owner_id=record.owner_id, score_date=record.date)
            self._session.add(row)

        row.internal_fortitude = record.sub_scores.internal_fortitude
        row.external_accountability = record.sub_scores.external_accountability
        row.high_stakes_integrity = record.sub_scores.high_stakes_integrity
        row.composite_score = record.composite_score
        row.note = record.note
        row.recorded_by = record.recorded_by
        if record.recorded_at is not None:
            row.recorded_at = record.recorded_at

        await self._session.commit()
        logger.info(
            "ifs_record_stored",
            owner_id=record.owner_id,
            date=record.date.isoformat(),
            composite_score=record.composite_score,
            amended=amended,
        )
        return record

    async def list_for_owner(self, owner_id: str) -> list[ScoreRecord]:
        result = await self._session.execute(
            select(ScoreRecordDB)
            .where(ScoreRecordDB.owner_id == owner_id)
            .order_by(ScoreRecordDB.score_date.desc())
        )
        return [_to_record(row) for row in result.scalars().all()]

    async def list_all(self) -> list[ScoreRecord]:
        result = await self._session.execute(
            select(ScoreRecordDB).order_by(
                ScoreRecordDB.owner_id, ScoreRecordDB.score_date.desc()
            )
        )
        return [_to_record(row) for row in result.scalars().all()]

    async def list_owners(self) -> list[str]:
        result = await self._session.execute(
            select(ScoreRecordDB.owner_id).distinct().order_by(ScoreRecordDB.owner_id)
        )
        return list(result.scalars().all())

    async def upsert_checkin(self, checkin: DailyCheckin) -> DailyCheckin:
        result = await self._session.execute(
            select(DailyCheckinDB).where(
                DailyCheckinDB.owner_id == checkin.owner_id,
                DailyCheckinDB.checkin_date == checkin.date,
            )
        )
        row = result.scalar_one_or_none()
        if row is None:
            row = DailyCheckinDB(owner_id=checkin.owner_id, checkin_date=checkin.date)
            self._session.add(row)

        row.truth = checkin.truth
        row.fidelity = checkin.fidelity
        row.courage = checkin.courage
        if checkin.recorded_at is not None:
            row.recorded_at = checkin.recorded_at

        await self._session.commit()
        logger.info("ifs_checkin_stored", owner_id=checkin.owner_id, date=checkin.date.isoformat())
        return checkin

    async def get_checkin(self, owner_id: str, day: date) -> DailyCheckin | None:
        result = await self._session.execute(
            select(DailyCheckinDB).where(
                DailyCheckinDB.owner_id == owner_id,
                DailyCheckinDB.checkin_date == day,
            )
        )
        row = result.scalar_one_or_none()
        return _to_checkin(row) if row is not None else None
