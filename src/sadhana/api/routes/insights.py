"""Monthly insight endpoints: summary ingest from the aggregation job and classification."""

import json
import logging
from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, HTTPException, Path
from pydantic import BaseModel, ValidationError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from sadhana.database import get_db
from sadhana.insights.classifier import classify, classify_month
from sadhana.models.insight import MonthlySummary
from sadhana.schemas.insight import (
    SUMMARY_MODELS,
    Domain,
    HealthResult,
    InsightRead,
    MonthlySummaryRead,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/insights", tags=["insights"])

# MVP: single user, id=1
DEFAULT_USER_ID = 1

Year = Annotated[int, Path(ge=1970, le=9999)]
Month = Annotated[int, Path(ge=1, le=12)]


async def _get_summary_row(
    session: AsyncSession, domain: Domain, year: int, month: int
) -> MonthlySummary | None:
    result = await session.execute(
        select(MonthlySummary).where(
            MonthlySummary.user_id == DEFAULT_USER_ID,
            MonthlySummary.domain == domain.value,
            MonthlySummary.year == year,
            MonthlySummary.month == month,
        )
    )
    return result.scalar_one_or_none()


def _load_summary(row: MonthlySummary | None, domain: Domain) -> BaseModel | None:
    if row is None:
        return None
    return SUMMARY_MODELS[domain].model_validate_json(row.payload)


@router.put("/{domain}/{year}/{month}", response_model=MonthlySummaryRead)
async def put_monthly_summary(
    domain: Domain,
    year: Year,
    month: Month,
    payload: dict[str, Any] = Body(...),
    session: AsyncSession = Depends(get_db),
) -> MonthlySummaryRead:
    """Store (or replace) the aggregation job's summary for one domain and month."""
    try:
        summary = SUMMARY_MODELS[domain].model_validate(payload)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=json.loads(e.json())) from None

    row = await _get_summary_row(session, domain, year, month)
    if row is None:
        row = MonthlySummary(
            user_id=DEFAULT_USER_ID, domain=domain.value, year=year, month=month, payload=""
        )
        session.add(row)
    row.payload = summary.model_dump_json()
    await session.commit()
    await session.refresh(row)
    logger.info("Stored %s summary for %04d-%02d", domain.value, year, month)

    return MonthlySummaryRead(
        domain=domain,
        year=year,
        month=month,
        summary=summary.model_dump(mode="json"),
        updated_at=row.updated_at,
    )


@router.get("/{year}/{month}", response_model=dict[Domain, HealthResult])
async def get_month_overview(
    year: Year,
    month: Month,
    session: AsyncSession = Depends(get_db),
) -> dict[Domain, HealthResult]:
    """Health signal for every domain in a month."""
    result = await session.execute(
        select(MonthlySummary).where(
            MonthlySummary.user_id == DEFAULT_USER_ID,
            MonthlySummary.year == year,
            MonthlySummary.month == month,
        )
    )
    summaries = {}
    for row in result.scalars().all():
        domain = Domain(row.domain)
        summaries[domain] = _load_summary(row, domain)
    return classify_month(summaries, year, month)  # type: ignore[arg-type]


@router.get("/{domain}/{year}/{month}", response_model=InsightRead)
async def get_insight(
    domain: Domain,
    year: Year,
    month: Month,
    session: AsyncSession = Depends(get_db),
) -> InsightRead:
    """Classify the stored summary; a month without one reads as waiting for data."""
    row = await _get_summary_row(session, domain, year, month)
    summary = _load_summary(row, domain)
    return InsightRead(
        domain=domain,
        year=year,
        month=month,
        result=classify(domain, summary, year, month),  # type: ignore[arg-type]
    )
