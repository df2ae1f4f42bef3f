"""HTTP client for the activity-log API, usable as the sync controller's store."""

import logging
from datetime import date
from types import TracebackType
from urllib.parse import quote

import httpx

from sadhana.config import get_settings
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
)
from sadhana.schemas.insight import Domain, HealthResult, InsightRead

logger = logging.getLogger(__name__)


class ActivityApiClient:
    """Wraps an ``httpx.AsyncClient`` bound to the service's base URL.

    Failed requests raise ``httpx.HTTPStatusError``; callers decide how to surface them.
    """

    def __init__(
        self,
        base_url: str | None = None,
        *,
        token: str | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        settings = get_settings()
        headers = {}
        token = token if token is not None else settings.api_token
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self._client = client or httpx.AsyncClient(
            base_url=base_url or settings.api_base_url,
            headers=headers,
            timeout=settings.api_timeout_seconds,
        )

    async def __aenter__(self) -> "ActivityApiClient":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def fetch_activity(self, today_date: date) -> ActivityLogRead:
        """Fetch the log for ``today_date``; the server creates it on first access."""
        response = await self._client.get(f"/api/activities/{today_date.isoformat()}")
        response.raise_for_status()
        return ActivityLogRead.model_validate(response.json())

    async def save_activity(self, log: ActivityLogRead) -> ActivityLogRead:
        payload = ActivityLogUpdate.model_validate(log.model_dump(include=set(EDITABLE_FIELDS)))
        response = await self._client.put(
            f"/api/activities/{log.id}", json=payload.model_dump(mode="json")
        )
        response.raise_for_status()
        logger.debug("Saved activity log %s", log.id)
        return ActivityLogRead.model_validate(response.json())

    async def upsert_chanting_slot(
        self, activity_id: int, slot: ChantingSlot, entry: ChantingEntryUpsert
    ) -> ChantingEntryRead:
        response = await self._client.put(
            f"/api/activities/{activity_id}/chanting-logs/{slot.value}",
            json=entry.model_dump(mode="json"),
        )
        response.raise_for_status()
        return ChantingEntryRead.model_validate(response.json())

    async def delete_chanting_slot(self, activity_id: int, slot: ChantingSlot) -> None:
        response = await self._client.delete(
            f"/api/activities/{activity_id}/chanting-logs/{slot.value}"
        )
        response.raise_for_status()

    async def upsert_book_log(
        self, activity_id: int, name: str, entry: BookLogUpsert
    ) -> BookLogRead:
        response = await self._client.put(
            f"/api/activities/{activity_id}/book-logs/{quote(name, safe='')}",
            json=entry.model_dump(mode="json"),
        )
        response.raise_for_status()
        return BookLogRead.model_validate(response.json())

    async def delete_book_log(self, activity_id: int, name: str) -> None:
        response = await self._client.delete(
            f"/api/activities/{activity_id}/book-logs/{quote(name, safe='')}"
        )
        response.raise_for_status()

    async def upsert_association_log(
        self, activity_id: int, association_type: AssociationType, entry: AssociationLogUpsert
    ) -> AssociationLogRead:
        response = await self._client.put(
            f"/api/activities/{activity_id}/association-logs/{association_type.value}",
            json=entry.model_dump(mode="json"),
        )
        response.raise_for_status()
        return AssociationLogRead.model_validate(response.json())

    async def delete_association_log(
        self, activity_id: int, association_type: AssociationType
    ) -> None:
        response = await self._client.delete(
            f"/api/activities/{activity_id}/association-logs/{association_type.value}"
        )
        response.raise_for_status()

    async def fetch_insight(self, domain: Domain, year: int, month: int) -> HealthResult:
        response = await self._client.get(f"/api/insights/{domain.value}/{year}/{month}")
        response.raise_for_status()
        return InsightRead.model_validate(response.json()).result
