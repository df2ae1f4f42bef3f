from sadhana.schemas.activity import (
    EDITABLE_FIELDS,
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
from sadhana.schemas.insight import (
    SUMMARY_MODELS,
    AratiSummary,
    AssociationSummary,
    ChantingSummary,
    Domain,
    ExerciseSummary,
    HealthResult,
    HealthStatus,
    InsightRead,
    MonthlyDomainSummary,
    MonthlySummaryRead,
    ReadingSummary,
    SleepSummary,
)
from sadhana.schemas.system import StatusResponse

__all__ = [
    "EDITABLE_FIELDS",
    "SUMMARY_MODELS",
    "ActivityLogRead",
    "ActivityLogUpdate",
    "AssociationLogRead",
    "AssociationLogUpsert",
    "AssociationType",
    "BookLogRead",
    "BookLogUpsert",
    "AratiSummary",
    "AssociationSummary",
    "ChantingEntryRead",
    "ChantingEntryUpsert",
    "ChantingSlot",
    "ChantingSummary",
    "DailyScoreRead",
    "Domain",
    "ExerciseSummary",
    "HealthResult",
    "HealthStatus",
    "InsightRead",
    "MonthlyDomainSummary",
    "MonthlySummaryRead",
    "ReadingSummary",
    "SleepSummary",
    "StatusResponse",
]
