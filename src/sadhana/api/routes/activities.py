"""Activity log endpoints: day log fetch/save plus keyed chanting, book and association entries."""

import logging
from datetime import date, datetime, time, timedelta
from typing import Annotated, Any, TypeVar

from fastapi import APIRouter, Depends, HTTPException, Path, Response
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import InstrumentedAttribute

from sadhana.config import get_settings
from sadhana.database import Base, get_db
from sadhana.models.activity import ActivityLog, AssociationLog, BookReadingLog, ChantingLog
from sadhana.schemas.activity import (
    ActivityLogRead,
    ActivityLogUpdate,
    AssociationLogRead,
    AssociationLogUpsert,
    AssociationType,
    BookLogRead,
    BookLogUpsert,
    ChantingEntryRead,
    ChantingEntryUpsert,
    ChantingSlot,
    DailyScoreRead,
)
from sadhana.scoring import format_daily_report, score_activity

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/activities", tags=["activities"])

# MVP: single user, id=1
DEFAULT_USER_ID = 1

SLOT_ORDER: list[ChantingSlot] = list(ChantingSlot)
ASSOCIATION_ORDER: list[AssociationType] = list(AssociationType)

BookName = Annotated[str, Path(min_length=1, max_length=200)]

EntryT = TypeVar("EntryT", bound=Base)


def default_activity(today_date: date) -> ActivityLog:
    """A fresh log: slept at 22:00 the night before, woke at 04:00, all vows kept."""
    return ActivityLog(
        user_id=DEFAULT_USER_ID,
        today_date=today_date,
        sleep_at=datetime.combine(today_date - timedelta(days=1), time(22, 0)),
        wakeup_at=datetime.combine(today_date, time(4, 0)),
    )


async def _get_activity(session: AsyncSession, activity_id: int) -> ActivityLog:
    result = await session.execute(
        select(ActivityLog).where(
            ActivityLog.id == activity_id,
            ActivityLog.user_id == DEFAULT_USER_ID,
        )
    )
    activity = result.scalar_one_or_none()
    if activity is None:
        raise HTTPException(status_code=404, detail="Activity log not found")
    return activity


async def _get_entry(
    session: AsyncSession,
    model: type[EntryT],
    activity_id: int,
    key_column: InstrumentedAttribute[str],
    key: str,
) -> EntryT | None:
    result = await session.execute(
        select(model).where(
            model.activity_id == activity_id,  # type: ignore[attr-defined]
            key_column == key,
        )
    )
    return result.scalar_one_or_none()


async def _upsert_entry(
    session: AsyncSession,
    model: type[EntryT],
    activity_id: int,
    key_column: InstrumentedAttribute[str],
    key: str,
    values: dict[str, Any],
) -> EntryT:
    await _get_activity(session, activity_id)
    entry = await _get_entry(session, model, activity_id, key_column, key)
    if entry is None:
        entry = model(activity_id=activity_id, **{key_column.key: key})
        session.add(entry)
    for field, value in values.items():
        setattr(entry, field, value)
    await session.commit()
    await session.refresh(entry)
    return entry


async def _delete_entry(
    session: AsyncSession,
    model: type[Base],
    activity_id: int,
    key_column: InstrumentedAttribute[str],
    key: str,
) -> Response:
    await _get_activity(session, activity_id)
    entry = await _get_entry(session, model, activity_id, key_column, key)
    if entry is None:
        raise HTTPException(status_code=404, detail=f"No {model.__tablename__} entry for {key}")
    await session.delete(entry)
    await session.commit()
    return Response(status_code=204)


async def _to_read(session: AsyncSession, activity: ActivityLog) -> ActivityLogRead:
    item = ActivityLogRead.model_validate(activity)

    result = await session.execute(
        select(ChantingLog).where(ChantingLog.activity_id == activity.id)
    )
    chanting = [ChantingEntryRead.model_validate(c) for c in result.scalars().all()]
    item.chanting_logs = sorted(chanting, key=lambda e: SLOT_ORDER.index(e.slot))

    result = await session.execute(
        select(BookReadingLog)
        .where(BookReadingLog.activity_id == activity.id)
        .order_by(BookReadingLog.id)
    )
    item.book_reading_logs = [BookLogRead.model_validate(b) for b in result.scalars().all()]

    result = await session.execute(
        select(AssociationLog).where(AssociationLog.activity_id == activity.id)
    )
    association = [AssociationLogRead.model_validate(a) for a in result.scalars().all()]
    item.association_logs = sorted(
        association, key=lambda e: ASSOCIATION_ORDER.index(e.association_type)
    )
    return item


@router.get("/{today_date}", response_model=ActivityLogRead)
async def get_or_create_activity(
    today_date: date,
    session: AsyncSession = Depends(get_db),
) -> ActivityLogRead:
    """Get the log for a date, creating it with defaults on first access."""
    result = await session.execute(
        select(ActivityLog).where(
            ActivityLog.user_id == DEFAULT_USER_ID,
            ActivityLog.today_date == today_date,
        )
    )
    activity = result.scalar_one_or_none()
    if activity is None:
        activity = default_activity(today_date)
        session.add(activity)
        try:
            await session.commit()
        except IntegrityError:
            # Another request created it first
            await session.rollback()
            result = await session.execute(
                select(ActivityLog).where(
                    ActivityLog.user_id == DEFAULT_USER_ID,
                    ActivityLog.today_date == today_date,
                )
            )
            activity = result.scalar_one()
        else:
            await session.refresh(activity)
            logger.info("Created activity log %s for %s", activity.id, today_date)
    return await _to_read(session, activity)


@router.put("/{activity_id}", response_model=ActivityLogRead)
async def save_activity(
    activity_id: int,
    payload: ActivityLogUpdate,
    session: AsyncSession = Depends(get_db),
) -> ActivityLogRead:
    """Save the whole editable record and return the whole stored record."""
    activity = await _get_activity(session, activity_id)
    for field, value in payload.model_dump().items():
        setattr(activity, field, value)
    await session.commit()
    await session.refresh(activity)
    return await _to_read(session, activity)


# ── chanting ────────────────────────────────────────────────────────


@router.put("/{activity_id}/chanting-logs/{slot}", response_model=ChantingEntryRead)
async def upsert_chanting_slot(
    activity_id: int,
    slot: ChantingSlot,
    entry: ChantingEntryUpsert,
    session: AsyncSession = Depends(get_db),
) -> ChantingLog:
    """Create or replace the chanting entry for a slot."""
    return await _upsert_entry(
        session, ChantingLog, activity_id, ChantingLog.slot, slot.value, entry.model_dump()
    )


@router.delete("/{activity_id}/chanting-logs/{slot}", status_code=204)
async def delete_chanting_slot(
    activity_id: int,
    slot: ChantingSlot,
    session: AsyncSession = Depends(get_db),
) -> Response:
    return await _delete_entry(session, ChantingLog, activity_id, ChantingLog.slot, slot.value)


# ── book reading ────────────────────────────────────────────────────


@router.put("/{activity_id}/book-logs/{name}", response_model=BookLogRead)
async def upsert_book_log(
    activity_id: int,
    name: BookName,
    entry: BookLogUpsert,
    session: AsyncSession = Depends(get_db),
) -> BookReadingLog:
    """Create or replace the reading entry for a book."""
    return await _upsert_entry(
        session, BookReadingLog, activity_id, BookReadingLog.name, name, entry.model_dump()
    )


@router.delete("/{activity_id}/book-logs/{name}", status_code=204)
async def delete_book_log(
    activity_id: int,
    name: BookName,
    session: AsyncSession = Depends(get_db),
) -> Response:
    return await _delete_entry(session, BookReadingLog, activity_id, BookReadingLog.name, name)


# ── association ─────────────────────────────────────────────────────


@router.put(
    "/{activity_id}/association-logs/{association_type}", response_model=AssociationLogRead
)
async def upsert_association_log(
    activity_id: int,
    association_type: AssociationType,
    entry: AssociationLogUpsert,
    session: AsyncSession = Depends(get_db),
) -> AssociationLog:
    """Create or replace the association entry for a type."""
    return await _upsert_entry(
        session,
        AssociationLog,
        activity_id,
        AssociationLog.association_type,
        association_type.value,
        entry.model_dump(),
    )


@router.delete("/{activity_id}/association-logs/{association_type}", status_code=204)
async def delete_association_log(
    activity_id: int,
    association_type: AssociationType,
    session: AsyncSession = Depends(get_db),
) -> Response:
    return await _delete_entry(
        session,
        AssociationLog,
        activity_id,
        AssociationLog.association_type,
        association_type.value,
    )


# ── score ───────────────────────────────────────────────────────────


@router.get("/{activity_id}/score", response_model=DailyScoreRead)
async def get_activity_score(
    activity_id: int,
    session: AsyncSession = Depends(get_db),
) -> DailyScoreRead:
    """Daily Sadhana score breakdown plus the shareable report text."""
    activity = await _get_activity(session, activity_id)
    item = await _to_read(session, activity)
    target = get_settings().default_target_rounds

    breakdown = score_activity(item, target)
    return DailyScoreRead(
        **breakdown.to_dict(),
        report=format_daily_report(item, target),
    )
