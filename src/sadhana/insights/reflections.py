"""Reflection text pools, three per (domain, status), rotated by month."""

from sadhana.schemas.insight import Domain, HealthStatus

REFLECTIONS: dict[Domain, dict[HealthStatus, tuple[str, str, str]]] = {
    Domain.SLEEP: {
        HealthStatus.GREEN: (
            "Sleep timing is well-aligned, allowing mornings to flow naturally. "
            "An excellent foundation.",
            "Your rest is anchored and consistent, providing deep stability for your sadhana.",
            "Harmony with the sun is evident. "
            "This rhythm naturally supports both energy and clarity.",
        ),
        HealthStatus.YELLOW: (
            "Sleep is present but slightly drifting. "
            "Tightening the window will return power to your mornings.",
            "Your rhythm is holding, but late nights are creating subtle drag. "
            "A shift earlier would help.",
            "Consistency is visible, but precision is missing. "
            "Anchoring the sleep time will stabilize the rest.",
        ),
        HealthStatus.RED: (
            "Rhythm conflict detected. "
            "Late hours or high variance are undermining the restorative power of sleep.",
            "The current pattern battles biology. "
            "Prioritizing a stable, earlier sleep time is the path to ease.",
            "Rest is fragmented. "
            "A gentle but firm reset of the sleep anchor is needed to support your energy.",
        ),
    },
    Domain.CHANTING: {
        HealthStatus.GREEN: (
            "Your practice honors your chosen target. "
            "Consistency, timing, and volume are all aligned.",
            "A beautiful integration of the Holy Name. "
            "The rhythm is steady, supported by strong morning focus.",
            "Commitment is fully manifest. "
            "Your chanting indicates a practice that is both disciplined and nourished.",
        ),
        HealthStatus.YELLOW: (
            "You are holding the vow, but the rhythm is uneven. "
            "Greater consistency will deepen the experience.",
            "Chanting is present, but often late or fluctuating. "
            "Bringing it earlier will increase its potency.",
            "The commitment is there, but the timing slips. "
            "Stabilizing the morning block will transform the quality.",
        ),
        HealthStatus.RED: (
            "Target not yet integrated. "
            "Frequent gaps or late hours are preventing the habit from taking root.",
            "The rhythm is fractured. "
            "Re-committing to a smaller, steady number might help build the foundation.",
            "Absence or instability is high. "
            "A gentle, non-negotiable restarting of the habit is invited.",
        ),
    },
    Domain.READING: {
        HealthStatus.GREEN: (
            "Reading has become a steady, immersive part of your days. "
            "Frequency and depth are aligned.",
            "Your engagement with sacred texts is providing consistent nourishment and clarity.",
            "The habit is beautifully integrated. "
            "Both the rhythm and the depth of reading are stable.",
        ),
        HealthStatus.YELLOW: (
            "You’re returning to reading, but rhythm is still settling. "
            "Consistency will unlock deeper absorption.",
            "Reading is present and real, though the depth is not yet fully anchored.",
            "The habit is alive but still forming. Reducing fluctuation will help it take root.",
        ),
        HealthStatus.RED: (
            "Reading appears occasionally; "
            "a gentler, more regular rhythm may help build the habit.",
            "Current duration is too brief for deep absorption. "
            "Aim for small but daily contact.",
            "Occasional long sessions without continuity are preventing habit stability. "
            "Frequency matters more than volume.",
        ),
    },
    Domain.ASSOCIATION: {
        HealthStatus.GREEN: (
            "Association is deep, regular, and directionally clear. "
            "It serves as a stable anchor.",
            "Your connection with spiritual community is strong, "
            "providing essential protection.",
            "The consistency of your exchanges indicates that association is a valued, "
            "integral part of your life.",
        ),
        HealthStatus.YELLOW: (
            "You connect meaningfully, but rhythm or depth still varies. "
            "Steadier contact will increase the benefit.",
            "Association is present, but often light. "
            "Deepening the exchanges would provide more substantial nourishment.",
            "Contact exists, but influence feels scattered. "
            "Focusing on steady, quality association will help.",
        ),
        HealthStatus.RED: (
            "Association appears occasionally; steadier contact may help build a supportive net.",
            "Brief interactions are good, "
            "but deeper exchange is needed for true spiritual nourishment.",
            "Sporadic high-volume days are not a substitute for steady connection. "
            "Regularity is key.",
        ),
    },
    Domain.ARATI: {
        HealthStatus.GREEN: (
            "Āratī has become a steady part of your daily rhythm, "
            "creating a powerful spiritual anchor.",
            "Your ritual presence is strong and consistent. "
            "The morning attendance particularly grounds the day.",
            "A beautiful balance of attendance. "
            "The rhythm of greeting the Deities is well-established.",
        ),
        HealthStatus.YELLOW: (
            "Ritual presence exists, but the consistency is still forming. "
            "Anchoring one daily slot will help.",
            "You are showing up, but the morning anchor is light. "
            "Starting the day with the Deities changes everything.",
            "Ritual exists but depends heavily on a single time slot. "
            "Expanding the range can bring more stability.",
        ),
        HealthStatus.RED: (
            "Āratī appears occasionally; gentle re-anchoring with a single steady slot may help.",
            "Ritual is currently detached from the morning anchor, "
            "reducing its grounding effect on the day.",
            "Attendance is fragmented. "
            "Reconnecting with the temple rhythm, even briefly, can restore the flow.",
        ),
    },
    Domain.EXERCISE: {
        HealthStatus.GREEN: (
            "Your body is being supported consistently. Rhythm and duration are healthy.",
            "A healthy foundation for your energy. "
            "The consistency of movement is serving you well.",
            "Movement has become a steady, reliable support for your physical well-being.",
        ),
        HealthStatus.YELLOW: (
            "Movement is present, but rhythm isn’t settled yet. "
            "Steadying the pattern will increase the benefit.",
            "Daily movement is real but light. "
            "Slightly longer duration would provide stronger support.",
            "Consistency varies. "
            "Establishing a baseline of daily movement will stabilize your energy.",
        ),
        HealthStatus.RED: (
            "Movement is rare; gentle re-entry could help build the physical support you need.",
            "Brief movement helps, but minimum viability for health is slightly higher.",
            "Sporadic intense sessions may strain the body. "
            "Consistent, moderate movement is a safer path.",
        ),
    },
}

# Shown in place of a classification until the month has a summary
WAITING_REFLECTIONS: dict[Domain, str] = {
    Domain.SLEEP: "Log sleep to track rhythm.",
    Domain.CHANTING: "Log chanting to track commitment.",
    Domain.READING: "Log reading.",
    Domain.ASSOCIATION: "Log association.",
    Domain.ARATI: "Log arati.",
    Domain.EXERCISE: "Log exercise.",
}

LATE_NIGHT_DRAG_REFLECTION = "Good volume, but late chanting is creating drag."


def rotation_index(year: int, month: int) -> int:
    return (year + month) % 3


def pick_reflection(domain: Domain, status: HealthStatus, year: int, month: int) -> str:
    """Select the month's reflection; the same (year, month) always yields the same text."""
    return REFLECTIONS[domain][status][rotation_index(year, month)]
