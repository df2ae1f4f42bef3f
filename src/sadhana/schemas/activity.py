from datetime import date, datetime
from enum import StrEnum

from pydantic import BaseModel, Field

MAX_ROUNDS_PER_SLOT = 108
MINUTES_PER_DAY = 24 * 60


class ChantingSlot(StrEnum):
    """Time-of-day buckets for japa rounds. The slot is the entry's key within a log."""

    BEFORE_7_30_AM = "before_7_30_am"
    MORNING = "7_30_to_12_00_pm"
    AFTERNOON = "12_00_to_6_00_pm"
    EVENING = "6_00_to_12_00_am"
    AFTER_MIDNIGHT = "after_12_00_am"


class AssociationType(StrEnum):
    """Whose association was heard. The type is the entry's key within a log."""

    PRABHUPADA = "PRABHUPADA"
    GURU = "GURU"
    OTHER_ISKCON_DEVOTEE = "OTHER_ISKCON_DEVOTEE"


class ChantingEntryBase(BaseModel):
    rounds: int = Field(ge=0, le=MAX_ROUNDS_PER_SLOT)
    rating: int | None = Field(default=None, ge=1, le=10)


class ChantingEntryUpsert(ChantingEntryBase):
    pass


class ChantingEntryRead(ChantingEntryBase):
    slot: ChantingSlot

    model_config = {"from_attributes": True}


class BookLogBase(BaseModel):
    reading_time: int = Field(ge=0, le=MINUTES_PER_DAY)
    chapter_name: str | None = Field(default=None, max_length=200)


class BookLogUpsert(BookLogBase):
    pass


class BookLogRead(BookLogBase):
    name: str

    model_config = {"from_attributes": True}


class AssociationLogBase(BaseModel):
    duration: int = Field(ge=0, le=MINUTES_PER_DAY)
    devotee_name: str | None = Field(default=None, max_length=200)


class AssociationLogUpsert(AssociationLogBase):
    pass


class AssociationLogRead(AssociationLogBase):
    association_type: AssociationType

    model_config = {"from_attributes": True}


class ActivityLogBase(BaseModel):
    """User-editable fields of a day's activity log."""

    sleep_at: datetime | None = None
    wakeup_at: datetime | None = None

    # Regulative principles
    no_meat: bool = True
    no_intoxication: bool = True
    no_illicit_sex: bool = True
    no_gambling: bool = True
    only_prasadam: bool = True

    # Temple programs
    mangla_attended: bool = False
    narasimha_attended: bool = False
    tulsi_arati_attended: bool = False
    darshan_arati_attended: bool = False
    guru_puja_attended: bool = False
    sandhya_arati_attended: bool = False

    exercise_time: int = Field(default=0, ge=0, le=MINUTES_PER_DAY)
    notes: str | None = None


class ActivityLogUpdate(ActivityLogBase):
    """Whole-record save payload."""


class ActivityLogRead(ActivityLogBase):
    id: int
    user_id: int
    today_date: date
    japa_sanga: bool = False
    chanting_logs: list[ChantingEntryRead] = Field(default_factory=list)
    book_reading_logs: list[BookLogRead] = Field(default_factory=list)
    association_logs: list[AssociationLogRead] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}

    def chanting_entry(self, slot: ChantingSlot) -> ChantingEntryRead | None:
        for entry in self.chanting_logs:
            if entry.slot == slot:
                return entry
        return None

    @property
    def total_rounds(self) -> int:
        return sum(entry.rounds for entry in self.chanting_logs)

    @property
    def total_reading_minutes(self) -> int:
        return sum(entry.reading_time for entry in self.book_reading_logs)

    @property
    def total_association_minutes(self) -> int:
        return sum(entry.duration for entry in self.association_logs)


EDITABLE_FIELDS: frozenset[str] = frozenset(ActivityLogBase.model_fields)


class DailyScoreRead(BaseModel):
    chanting: float
    reading: float
    association: float
    exercise: float
    regulations: float
    arati: float
    sleep: float
    wake: float
    total: float
    report: str
