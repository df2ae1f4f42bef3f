"""Rule-based monthly health signal per Sadhana domain.

Every classifier has the same shape: a missing summary yields a neutral
"Waiting for Data" result; otherwise a RED ladder (any rule firing makes the
month RED, the first firing rule names it), then the GREEN conjunction, then
YELLOW. All functions are pure; identical inputs give identical results.

Inputs are trusted: negative or out-of-range statistics are the aggregation
job's responsibility and pass through unchanged.
"""

from collections.abc import Mapping
from datetime import time
from typing import assert_never

from sadhana.insights import thresholds as th
from sadhana.insights.reflections import (
    LATE_NIGHT_DRAG_REFLECTION,
    WAITING_REFLECTIONS,
    pick_reflection,
)
from sadhana.schemas.insight import (
    SUMMARY_MODELS,
    AratiSummary,
    AssociationSummary,
    ChantingSummary,
    Domain,
    ExerciseSummary,
    HealthResult,
    HealthStatus,
    MonthlyDomainSummary,
    ReadingSummary,
    SleepSummary,
)

# (fired, title) pairs in evaluation order
Ladder = list[tuple[bool, str]]

GREEN_TITLES: dict[Domain, str] = {
    Domain.SLEEP: "Aligned Rhythm",
    Domain.CHANTING: "Aligned",
    Domain.READING: "Habit Integrated",
    Domain.ASSOCIATION: "Nourishing",
    Domain.ARATI: "Stable Ritual Rhythm",
    Domain.EXERCISE: "Body Supported",
}

YELLOW_TITLES: dict[Domain, str] = {
    Domain.SLEEP: "Present but Misaligned",
    Domain.CHANTING: "Committed but Uneven",
    Domain.READING: "Present but Light",
    Domain.ASSOCIATION: "Present but Light",
    Domain.ARATI: "Present but Narrow",
    Domain.EXERCISE: "Some Movement",
}

WAITING_TITLE = "Waiting for Data"
LATE_NIGHT_DRAG_TITLE = "Late Night Drag"


# ── shared helpers ──────────────────────────────────────────────────


def waiting_result(domain: Domain) -> HealthResult:
    return HealthResult(
        status=HealthStatus.YELLOW,
        title=WAITING_TITLE,
        reflection=WAITING_REFLECTIONS[domain],
    )


def _result(
    domain: Domain, status: HealthStatus, title: str, year: int, month: int
) -> HealthResult:
    return HealthResult(
        status=status,
        title=title,
        reflection=pick_reflection(domain, status, year, month),
    )


def _first_fired(ladder: Ladder) -> str | None:
    for fired, title in ladder:
        if fired:
            return title
    return None


def _grade(
    domain: Domain, red_ladder: Ladder, is_green: bool, year: int, month: int
) -> HealthResult:
    red_title = _first_fired(red_ladder)
    if red_title is not None:
        return _result(domain, HealthStatus.RED, red_title, year, month)
    if is_green:
        return _result(domain, HealthStatus.GREEN, GREEN_TITLES[domain], year, month)
    return _result(domain, HealthStatus.YELLOW, YELLOW_TITLES[domain], year, month)


def _day_ratio(active_days: int, days_count: int) -> float:
    return active_days / (days_count or th.DEFAULT_TRACKED_DAYS)


def _median(value: float | None) -> float:
    return 0.0 if value is None else value


def _iqr(value: float | None) -> float:
    return th.MISSING_IQR if value is None else value


def _is_burst(iqr: float, median: float) -> bool:
    return median > 0 and iqr > th.BURST_IQR_MULTIPLE * median


def effective_sleep_minutes(value: time | None) -> int:
    """Minutes from midnight, with morning hours pushed past 24:00."""
    if value is None:
        return 0
    minutes = value.hour * 60 + value.minute
    if value.hour < 12:
        minutes += th.MINUTES_PER_DAY
    return minutes


# ── domain classifiers ──────────────────────────────────────────────


def classify_sleep(summary: SleepSummary | None, year: int, month: int) -> HealthResult:
    if summary is None:
        return waiting_result(Domain.SLEEP)

    sleep_time = effective_sleep_minutes(summary.median_sleep_time)
    iqr_sleep = _iqr(summary.iqr_sleep_minutes)
    iqr_wake = _iqr(summary.iqr_wakeup_minutes)
    duration = _median(summary.median_sleep_duration_minutes)

    late = sleep_time >= th.SLEEP_LATE_RED
    short = duration < th.SLEEP_DURATION_RED
    unstable = iqr_sleep > th.SLEEP_IQR_RED or iqr_wake > th.SLEEP_IQR_RED
    # Very early rising on top of late nights cannot be sustained
    conflict = (
        summary.percent_wakeup_before_5am >= th.EARLY_WAKE_PERCENT_RED
        and sleep_time >= th.SLEEP_LATE_WITH_EARLY_WAKE_RED
    )

    start, end = th.SLEEP_WINDOW_GREEN
    is_green = (
        start <= sleep_time <= end
        and iqr_sleep <= th.SLEEP_IQR_GREEN
        and iqr_wake <= th.SLEEP_IQR_GREEN
        and duration >= th.SLEEP_DURATION_GREEN
    )

    return _grade(
        Domain.SLEEP,
        [
            (late, "Late Sleep Pattern"),
            (short, "Insufficient Rest"),
            (unstable, "Unstable Rhythm"),
            (conflict, "Rhythm Conflict"),
        ],
        is_green,
        year,
        month,
    )


def classify_chanting(summary: ChantingSummary | None, year: int, month: int) -> HealthResult:
    if summary is None:
        return waiting_result(Domain.CHANTING)

    target = summary.daily_target_rounds or th.DEFAULT_TARGET_ROUNDS
    median_ratio = _median(summary.median_daily_rounds) / target
    iqr_ratio = _iqr(summary.iqr_daily_rounds) / target
    zero_days = summary.zero_round_days
    late_pct = summary.percent_rounds_after_9_30_pm

    red_ladder: Ladder = [
        (zero_days >= th.ZERO_ROUND_DAYS_RED, "Frequent Absence"),
        (late_pct >= th.LATE_ROUNDS_PERCENT_RED, "Time Inversion"),
        (median_ratio < th.CHANTING_MEDIAN_RATIO_RED, "Target Not Integrated"),
        (iqr_ratio > th.CHANTING_IQR_RATIO_RED, "Target Not Integrated"),
    ]
    red_title = _first_fired(red_ladder)
    if red_title is not None:
        return _result(Domain.CHANTING, HealthStatus.RED, red_title, year, month)

    steady = (
        zero_days <= th.ZERO_ROUND_DAYS_GREEN
        and median_ratio >= th.CHANTING_MEDIAN_RATIO_GREEN
        and iqr_ratio <= th.CHANTING_IQR_RATIO_GREEN
        and summary.percent_rounds_before_7_30_am >= th.EARLY_ROUNDS_PERCENT_GREEN
    )
    # Downgrade only: a late-night share this high never reads as GREEN
    if steady and late_pct >= th.LATE_ROUNDS_PERCENT_DRAG:
        return HealthResult(
            status=HealthStatus.YELLOW,
            title=LATE_NIGHT_DRAG_TITLE,
            reflection=LATE_NIGHT_DRAG_REFLECTION,
        )

    is_green = steady and late_pct <= th.LATE_ROUNDS_PERCENT_GREEN
    return _grade(Domain.CHANTING, [], is_green, year, month)


def classify_reading(summary: ReadingSummary | None, year: int, month: int) -> HealthResult:
    if summary is None:
        return waiting_result(Domain.READING)

    day_ratio = _day_ratio(summary.reading_days, summary.days_count)
    median = _median(summary.median_daily_reading_minutes)
    iqr = _iqr(summary.iqr_daily_reading_minutes)

    return _grade(
        Domain.READING,
        [
            # Titles a zero median with any spread as a burst too
            # Unguarded: a zero median with any spread still reads as a burst
            (iqr > th.BURST_IQR_MULTIPLE * median, "Burst Pattern"),
            (median < th.READING_MEDIAN_RED, "Not Yet a Habit"),
        ],
        day_ratio >= th.READING_DAY_RATIO_GREEN
        and iqr <= median
        and median >= th.READING_MEDIAN_GREEN,
        year,
        month,
    )


def classify_association(
    summary: AssociationSummary | None, year: int, month: int
) -> HealthResult:
    if summary is None:
        return waiting_result(Domain.ASSOCIATION)

    day_ratio = _day_ratio(summary.association_days, summary.days_count)
    median = _median(summary.median_daily_association_minutes)
    iqr = _iqr(summary.iqr_daily_association_minutes)

    return _grade(
        Domain.ASSOCIATION,
        [
            (day_ratio < th.ASSOCIATION_DAY_RATIO_RED, "Not Yet Nourishing"),
            (median < th.ASSOCIATION_MEDIAN_RED, "Not Yet Nourishing"),
            (_is_burst(iqr, median), "Not Yet Nourishing"),
        ],
        day_ratio >= th.ASSOCIATION_DAY_RATIO_GREEN
        and iqr <= median
        and median >= th.ASSOCIATION_MEDIAN_GREEN,
        year,
        month,
    )


def morning_share(summary: AratiSummary) -> float:
    """Fraction of all program attendances that were early-morning programs."""
    morning = summary.mangla_attended_days + summary.morning_arati_days
    total = (
        morning
        + summary.narasimha_attended_days
        + summary.tulsi_arati_attended_days
        + summary.darshan_arati_attended_days
        + summary.guru_puja_attended_days
        + summary.sandhya_arati_attended_days
    )
    return morning / total if total > 0 else 0.0


def classify_arati(summary: AratiSummary | None, year: int, month: int) -> HealthResult:
    if summary is None:
        return waiting_result(Domain.ARATI)

    day_ratio = _day_ratio(summary.total_arati_attendance_days, summary.days_count)
    share = morning_share(summary)

    return _grade(
        Domain.ARATI,
        [
            (day_ratio < th.ARATI_DAY_RATIO_RED, "Rare Presence"),
            (share < th.ARATI_MORNING_SHARE_RED, "No Morning Anchor"),
        ],
        day_ratio >= th.ARATI_DAY_RATIO_GREEN and share >= th.ARATI_MORNING_SHARE_GREEN,
        year,
        month,
    )


def classify_exercise(summary: ExerciseSummary | None, year: int, month: int) -> HealthResult:
    if summary is None:
        return waiting_result(Domain.EXERCISE)

    day_ratio = _day_ratio(summary.exercise_days, summary.days_count)
    median = _median(summary.median_exercise_minutes)
    iqr = _iqr(summary.iqr_exercise_minutes)

    return _grade(
        Domain.EXERCISE,
        [
            (day_ratio < th.EXERCISE_DAY_RATIO_RED, "Body Undersupported"),
            (median < th.EXERCISE_MEDIAN_RED, "Body Undersupported"),
            (_is_burst(iqr, median), "Body Undersupported"),
        ],
        day_ratio >= th.EXERCISE_DAY_RATIO_GREEN
        and iqr <= median
        and median >= th.EXERCISE_MEDIAN_GREEN,
        year,
        month,
    )


# ── dispatch ────────────────────────────────────────────────────────


def classify(
    domain: Domain, summary: MonthlyDomainSummary | None, year: int, month: int
) -> HealthResult:
    """Classify one domain's monthly summary.

    Raises:
        TypeError: If the summary model does not belong to ``domain``.
    """
    if summary is not None and not isinstance(summary, SUMMARY_MODELS[domain]):
        raise TypeError(f"{type(summary).__name__} is not a {domain.value} summary")

    match domain:
        case Domain.SLEEP:
            return classify_sleep(summary, year, month)  # type: ignore[arg-type]
        case Domain.CHANTING:
            return classify_chanting(summary, year, month)  # type: ignore[arg-type]
        case Domain.READING:
            return classify_reading(summary, year, month)  # type: ignore[arg-type]
        case Domain.ASSOCIATION:
            return classify_association(summary, year, month)  # type: ignore[arg-type]
        case Domain.ARATI:
            return classify_arati(summary, year, month)  # type: ignore[arg-type]
        case Domain.EXERCISE:
            return classify_exercise(summary, year, month)  # type: ignore[arg-type]
        case _:
            assert_never(domain)


def classify_month(
    summaries: Mapping[Domain, MonthlyDomainSummary | None], year: int, month: int
) -> dict[Domain, HealthResult]:
    """Classify every domain; domains without a summary come back as waiting."""
    return {domain: classify(domain, summaries.get(domain), year, month) for domain in Domain}
