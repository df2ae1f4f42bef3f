"""Daily Sadhana score and shareable report for a single activity log."""

from dataclasses import asdict, dataclass
from datetime import datetime

from sadhana.insights.classifier import effective_sleep_minutes
from sadhana.insights.thresholds import DEFAULT_TARGET_ROUNDS
from sadhana.schemas.activity import (
    ActivityLogRead,
    AssociationLogRead,
    BookLogRead,
    ChantingEntryRead,
    ChantingSlot,
)

# Points per round, by the time of day it was chanted
SLOT_ROUND_POINTS: dict[ChantingSlot, float] = {
    ChantingSlot.BEFORE_7_30_AM: 10,
    ChantingSlot.MORNING: 7.5,
    ChantingSlot.AFTERNOON: 5,
    ChantingSlot.EVENING: 2.5,
    ChantingSlot.AFTER_MIDNIGHT: 1,
}
EXCESS_ROUND_POINTS = 1

# Reading and association earn points per minute up to a cap (120 minutes)
READING_POINTS_PER_MINUTE = 0.5
READING_MAX_POINTS = 60
ASSOCIATION_POINTS_PER_MINUTE = 0.5
ASSOCIATION_MAX_POINTS = 60

EXERCISE_POINTS = 20

REGULATION_POINTS: dict[str, int] = {
    "no_meat": 5,
    "no_intoxication": 5,
    "no_illicit_sex": 5,
    "no_gambling": 5,
    "only_prasadam": 20,
}

ARATI_POINTS: dict[str, int] = {
    "mangla_attended": 10,
    "narasimha_attended": 5,
    "tulsi_arati_attended": 5,
    "darshan_arati_attended": 5,
    "guru_puja_attended": 5,
    "sandhya_arati_attended": 5,
    "japa_sanga": 10,
}

# (upper bound exclusive in effective minutes, points); later than all -> 5
SLEEP_BANDS: list[tuple[int, int]] = [(22 * 60, 25), (22 * 60 + 30, 20), (23 * 60, 15)]
LATE_SLEEP_POINTS = 5

# (start inclusive, end exclusive, points) in minutes from midnight
WAKE_BANDS: list[tuple[int, int, int]] = [
    (3 * 60 + 30, 4 * 60, 25),
    (4 * 60, 4 * 60 + 30, 20),
    (4 * 60 + 30, 5 * 60 + 30, 15),
]


@dataclass
class ScoreBreakdown:
    chanting: float = 0
    reading: float = 0
    association: float = 0
    exercise: float = 0
    regulations: float = 0
    arati: float = 0
    sleep: float = 0
    wake: float = 0

    @property
    def total(self) -> float:
        return sum(asdict(self).values())

    def to_dict(self) -> dict[str, float]:
        return {**asdict(self), "total": self.total}


def chanting_score(
    entries: list[ChantingEntryRead], target_rounds: int = DEFAULT_TARGET_ROUNDS
) -> float:
    """Best-valued rounds up to the target earn full slot points; the rest earn 1 each."""
    remaining = max(target_rounds, 0)
    score: float = 0
    for entry in sorted(entries, key=lambda e: SLOT_ROUND_POINTS[e.slot], reverse=True):
        counted = min(entry.rounds, remaining)
        score += counted * SLOT_ROUND_POINTS[entry.slot]
        score += (entry.rounds - counted) * EXCESS_ROUND_POINTS
        remaining -= counted
    return score


def reading_score(entries: list[BookLogRead]) -> float:
    minutes = sum(entry.reading_time for entry in entries)
    return min(minutes * READING_POINTS_PER_MINUTE, READING_MAX_POINTS)


def association_score(entries: list[AssociationLogRead]) -> float:
    minutes = sum(entry.duration for entry in entries)
    return min(minutes * ASSOCIATION_POINTS_PER_MINUTE, ASSOCIATION_MAX_POINTS)


def exercise_score(exercise_time: int) -> float:
    return EXERCISE_POINTS if exercise_time > 0 else 0


def sleep_score(sleep_at: datetime | None) -> float:
    if sleep_at is None:
        return 0
    minutes = effective_sleep_minutes(sleep_at.time())
    for upper, points in SLEEP_BANDS:
        if minutes < upper:
            return points
    return LATE_SLEEP_POINTS


def wake_score(wakeup_at: datetime | None) -> float:
    if wakeup_at is None:
        return 0
    minutes = wakeup_at.hour * 60 + wakeup_at.minute
    for start, end, points in WAKE_BANDS:
        if start <= minutes < end:
            return points
    return 0


def score_activity(
    log: ActivityLogRead, target_rounds: int = DEFAULT_TARGET_ROUNDS
) -> ScoreBreakdown:
    return ScoreBreakdown(
        chanting=chanting_score(log.chanting_logs, target_rounds),
        reading=reading_score(log.book_reading_logs),
        association=association_score(log.association_logs),
        exercise=exercise_score(log.exercise_time),
        regulations=sum(p for field, p in REGULATION_POINTS.items() if getattr(log, field)),
        arati=sum(p for field, p in ARATI_POINTS.items() if getattr(log, field)),
        sleep=sleep_score(log.sleep_at),
        wake=wake_score(log.wakeup_at),
    )


def _clock(value: datetime | None) -> str:
    if value is None:
        return "N/A"
    return value.strftime("%I:%M %p").lstrip("0")


def format_daily_report(
    log: ActivityLogRead,
    target_rounds: int = DEFAULT_TARGET_ROUNDS,
) -> str:
    """Render a day's log as a short chat-friendly report."""
    early = log.chanting_entry(ChantingSlot.BEFORE_7_30_AM)
    chanting_line = f"📿 *Chanting:* {log.total_rounds}/{target_rounds}"
    if early is not None and early.rounds > 0:
        chanting_line += f" (Before 7:30 AM: {early.rounds})"

    reading_line = f"📚 *Reading:* {log.total_reading_minutes} mins"
    if log.book_reading_logs:
        books = ", ".join(f"{b.name} ({b.reading_time}m)" for b in log.book_reading_logs)
        reading_line += f" - {books}"

    programs = []
    if log.mangla_attended:
        programs.append("Mangala Arati")
    if log.guru_puja_attended:
        programs.append("Guru Puja")

    lines = [
        f"*Sadhana Report - {log.today_date:%d %b %Y}*",
        "",
        f"🌅 *Wake Up:* {_clock(log.wakeup_at)}",
        chanting_line,
        reading_line,
        f"🤝 *Shravan:* {log.total_association_minutes} mins",
        f"🧘 *Exercise:* {log.exercise_time} mins",
        f"🛌 *Sleep:* {_clock(log.sleep_at)}",
        "",
        f"*Morning Program:* {', '.join(programs) if programs else 'None'}",
    ]
    return "\n".join(lines)
