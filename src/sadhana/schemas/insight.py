from datetime import datetime, time
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field, field_validator


class Domain(StrEnum):
    SLEEP = "sleep"
    CHANTING = "chanting"
    READING = "reading"
    ASSOCIATION = "association"
    ARATI = "arati"
    EXERCISE = "exercise"


class HealthStatus(StrEnum):
    GREEN = "GREEN"
    YELLOW = "YELLOW"
    RED = "RED"


class HealthResult(BaseModel):
    status: HealthStatus
    title: str
    reflection: str

    model_config = {"frozen": True}


class SleepSummary(BaseModel):
    days_count: int = 0
    median_wakeup_time: time | None = None
    iqr_wakeup_minutes: float | None = None
    percent_wakeup_before_5am: float = 0
    median_sleep_time: time | None = None
    iqr_sleep_minutes: float | None = None
    median_sleep_duration_minutes: float | None = None

    @field_validator("median_wakeup_time", "median_sleep_time", mode="before")
    @classmethod
    def _clock_time(cls, value: Any) -> Any:
        """Accept full timestamps from the aggregation job and keep the wall-clock part."""
        if isinstance(value, datetime):
            return value.time()
        if isinstance(value, str) and "T" in value:
            return datetime.fromisoformat(value).time()
        return value


class ChantingSummary(BaseModel):
    days_count: int = 0
    daily_target_rounds: int | None = None
    median_daily_rounds: float | None = None
    iqr_daily_rounds: float | None = None
    percent_days_meeting_target: float = 0
    zero_round_days: int = 0
    percent_rounds_before_7_30_am: float = 0
    percent_rounds_7_30_to_12_00: float = 0
    percent_rounds_12_00_to_6_00: float = 0
    percent_rounds_6_00_to_12_00: float = 0
    percent_rounds_after_12_00_am: float = 0
    percent_rounds_after_9_30_pm: float = 0
    median_rating: float | None = None
    iqr_rating: float | None = None


class ReadingSummary(BaseModel):
    days_count: int = 0
    reading_days: int = 0
    median_daily_reading_minutes: float | None = None
    iqr_daily_reading_minutes: float | None = None
    longest_reading_streak: int = 0
    primary_book_name: str | None = None
    primary_book_return_ratio: float | None = None
    books_read: list[str] = Field(default_factory=list)


class AssociationSummary(BaseModel):
    days_count: int = 0
    association_days: int = 0
    median_daily_association_minutes: float | None = None
    iqr_daily_association_minutes: float | None = None
    median_minutes_by_type: dict[str, float] = Field(default_factory=dict)
    association_days_by_type: dict[str, int] = Field(default_factory=dict)
    unique_devotee_names: list[str] = Field(default_factory=list)


class AratiSummary(BaseModel):
    days_count: int = 0
    total_arati_attendance_days: int = 0
    mangla_attended_days: int = 0
    morning_arati_days: int = 0
    narasimha_attended_days: int = 0
    tulsi_arati_attended_days: int = 0
    darshan_arati_attended_days: int = 0
    guru_puja_attended_days: int = 0
    sandhya_arati_attended_days: int = 0
    japa_sanga_attended_days: int = 0


class ExerciseSummary(BaseModel):
    days_count: int = 0
    exercise_days: int = 0
    percent_days_exercised: float = 0
    median_exercise_minutes: float | None = None
    iqr_exercise_minutes: float | None = None


MonthlyDomainSummary = (
    SleepSummary
    | ChantingSummary
    | ReadingSummary
    | AssociationSummary
    | AratiSummary
    | ExerciseSummary
)

SUMMARY_MODELS: dict[Domain, type[BaseModel]] = {
    Domain.SLEEP: SleepSummary,
    Domain.CHANTING: ChantingSummary,
    Domain.READING: ReadingSummary,
    Domain.ASSOCIATION: AssociationSummary,
    Domain.ARATI: AratiSummary,
    Domain.EXERCISE: ExerciseSummary,
}


class MonthlySummaryRead(BaseModel):
    domain: Domain
    year: int
    month: int
    summary: dict[str, Any]
    updated_at: datetime


class InsightRead(BaseModel):
    domain: Domain
    year: int
    month: int
    result: HealthResult
