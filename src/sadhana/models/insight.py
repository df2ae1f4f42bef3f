from datetime import datetime

from sqlalchemy import String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from sadhana.database import Base


class MonthlySummary(Base):
    """Precomputed monthly statistics for one domain, delivered by the aggregation job."""

    __tablename__ = "monthly_summaries"
    __table_args__ = (UniqueConstraint("user_id", "domain", "year", "month"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(index=True)
    domain: Mapped[str] = mapped_column(String(20))  # sleep, chanting, reading, ...
    year: Mapped[int]
    month: Mapped[int]
    payload: Mapped[str] = mapped_column(Text)  # JSON blob, validated per domain on read

    created_at: Mapped[datetime] = mapped_column(default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(default=datetime.utcnow, onupdate=datetime.utcnow)
