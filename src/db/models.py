"""SQLAlchemy ORM models for IFS score storage."""

from datetime import date, datetime

from sqlalchemy import (
    BigInteger,
    Boolean,
    Date,
    DateTime,
    Float,
    Integer,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


class ScoreRecordDB(Base):
    __tablename__ = "ifs_score_records"
    __table_args__ = (UniqueConstraint("owner_id", "score_date", name="uq_ifs_owner_date"),)

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=True)
    owner_id: Mapped[str] = mapped_column(String, index=True)
    score_date: Mapped[date] = mapped_column(Date, index=True)
    internal_fortitude: Mapped[float] = mapped_column(Float)
    external_accountability: Mapped[float] = mapped_column(Float)
    high_stakes_integrity: Mapped[float] = mapped_column(Float)
    composite_score: Mapped[int] = mapped_column(Integer)
    note: Mapped[str | None] = mapped_column(Text, nullable=True)
    recorded_by: Mapped[str | None] = mapped_column(String, nullable=True)
    recorded_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )


class DailyCheckinDB(Base):
    __tablename__ = "ifs_daily_checkins"
    __table_args__ = (
        UniqueConstraint("owner_id", "checkin_date", name="uq_ifs_checkin_owner_date"),
    )

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=True)
    owner_id: Mapped[str] = mapped_column(String, index=True)
    checkin_date: Mapped[date] = mapped_column(Date, index=True)
    truth: Mapped[bool] = mapped_column(Boolean, default=False)
    fidelity: Mapped[bool] = mapped_column(Boolean, default=False)
    courage: Mapped[bool] = mapped_column(Boolean, default=False)
    recorded_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
