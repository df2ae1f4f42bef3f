from sadhana.models.activity import ActivityLog, AssociationLog, BookReadingLog, ChantingLog
from sadhana.models.insight import MonthlySummary

__all__ = [
    "ActivityLog",
    "AssociationLog",
    "BookReadingLog",
    "ChantingLog",
    "MonthlySummary",
]
