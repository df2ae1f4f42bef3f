from datetime import date, datetime

from sqlalchemy import ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from sadhana.database import Base


class ActivityLog(Base):
    __tablename__ = "activity_logs"
    __table_args__ = (UniqueConstraint("user_id", "today_date"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(index=True)
    today_date: Mapped[date]

    # Sleep (sleep_at may fall on the previous calendar day)
    sleep_at: Mapped[datetime | None] = mapped_column(default=None)
    wakeup_at: Mapped[datetime | None] = mapped_column(default=None)

    # Regulative principles
    no_meat: Mapped[bool] = mapped_column(default=True)
    no_intoxication: Mapped[bool] = mapped_column(default=True)
    no_illicit_sex: Mapped[bool] = mapped_column(default=True)
    no_gambling: Mapped[bool] = mapped_column(default=True)
    only_prasadam: Mapped[bool] = mapped_column(default=True)

    # Temple programs
    mangla_attended: Mapped[bool] = mapped_column(default=False)
    narasimha_attended: Mapped[bool] = mapped_column(default=False)
    tulsi_arati_attended: Mapped[bool] = mapped_column(default=False)
    darshan_arati_attended: Mapped[bool] = mapped_column(default=False)
    guru_puja_attended: Mapped[bool] = mapped_column(default=False)
    sandhya_arati_attended: Mapped[bool] = mapped_column(default=False)
    japa_sanga: Mapped[bool] = mapped_column(default=False)  # from attendance records

    exercise_time: Mapped[int] = mapped_column(default=0)  # minutes

    notes: Mapped[str | None] = mapped_column(Text, default=None)

    created_at: Mapped[datetime] = mapped_column(default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(default=datetime.utcnow, onupdate=datetime.utcnow)


class ChantingLog(Base):
    __tablename__ = "chanting_logs"
    __table_args__ = (UniqueConstraint("activity_id", "slot"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    activity_id: Mapped[int] = mapped_column(ForeignKey("activity_logs.id"))
    slot: Mapped[str] = mapped_column(String(30))  # see schemas.activity.ChantingSlot
    rounds: Mapped[int] = mapped_column(default=0)
    rating: Mapped[int | None] = mapped_column(default=None)  # 1-10


class BookReadingLog(Base):
    __tablename__ = "book_reading_logs"
    __table_args__ = (UniqueConstraint("activity_id", "name"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    activity_id: Mapped[int] = mapped_column(ForeignKey("activity_logs.id"))
    name: Mapped[str] = mapped_column(String(200))
    reading_time: Mapped[int] = mapped_column(default=0)  # minutes
    chapter_name: Mapped[str | None] = mapped_column(String(200), default=None)


class AssociationLog(Base):
    __tablename__ = "association_logs"
    __table_args__ = (UniqueConstraint("activity_id", "association_type"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    activity_id: Mapped[int] = mapped_column(ForeignKey("activity_logs.id"))
    association_type: Mapped[str] = mapped_column(String(30))  # AssociationType value
    duration: Mapped[int] = mapped_column(default=0)  # minutes
    devotee_name: Mapped[str | None] = mapped_column(String(200), default=None)
