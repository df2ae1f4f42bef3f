"""Optimistic, debounced synchronization of one day's activity log.

The controller owns the local copy of an ``ActivityLog``. Field edits are
applied to that copy immediately and coalesced into one save after a quiet
period. Every save sends the whole current record, so a later save always
contains everything an earlier one did and out-of-order completions cannot
lose an edit. Server responses never overwrite the local copy; ``load`` only
replaces it when the log id changes (the user moved to another day), which
means a concurrent edit from another session stays invisible until then.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Mapping
from typing import Any, Protocol, TypeVar

from sadhana.config import get_settings
from sadhana.schemas.activity import (
    EDITABLE_FIELDS,
    ActivityLogRead,
    AssociationLogRead,
    AssociationLogUpsert,
    AssociationType,
    BookLogRead,
    BookLogUpsert,
    ChantingEntryRead,
    ChantingEntryUpsert,
    ChantingSlot,
)

logger = logging.getLogger(__name__)

SLOT_ORDER: list[ChantingSlot] = list(ChantingSlot)
ASSOCIATION_ORDER: list[AssociationType] = list(AssociationType)

T = TypeVar("T")


class ActivityStore(Protocol):
    """Persistence collaborator: whole-record save plus key-addressed entry calls."""

    async def save_activity(self, log: ActivityLogRead) -> ActivityLogRead: ...

    async def upsert_chanting_slot(
        self, activity_id: int, slot: ChantingSlot, entry: ChantingEntryUpsert
    ) -> ChantingEntryRead: ...

    async def delete_chanting_slot(self, activity_id: int, slot: ChantingSlot) -> None: ...

    async def upsert_book_log(
        self, activity_id: int, name: str, entry: BookLogUpsert
    ) -> BookLogRead: ...

    async def delete_book_log(self, activity_id: int, name: str) -> None: ...

    async def upsert_association_log(
        self, activity_id: int, association_type: AssociationType, entry: AssociationLogUpsert
    ) -> AssociationLogRead: ...

    async def delete_association_log(
        self, activity_id: int, association_type: AssociationType
    ) -> None: ...


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


Scheduler = Callable[[float, Callable[[], None]], TimerHandle]
SavedListener = Callable[[ActivityLogRead], None]
ErrorListener = Callable[[Exception], None]


def loop_scheduler(delay: float, callback: Callable[[], None]) -> TimerHandle:
    return asyncio.get_running_loop().call_later(delay, callback)


def merge_patch(log: ActivityLogRead, patch: Mapping[str, Any]) -> ActivityLogRead:
    """Return ``log`` with ``patch`` applied, re-validating the patched values."""
    return ActivityLogRead.model_validate({**log.model_dump(), **patch})


def check_patch(patch: Mapping[str, Any]) -> None:
    rejected = sorted(set(patch) - EDITABLE_FIELDS)
    if rejected:
        raise ValueError(f"Fields are not editable: {', '.join(rejected)}")


class ActivitySyncController:
    """Holds ``{local state, pending timer, saving indicator}`` for one activity log."""

    def __init__(
        self,
        store: ActivityStore,
        *,
        debounce_seconds: float | None = None,
        scheduler: Scheduler | None = None,
    ) -> None:
        if debounce_seconds is None:
            debounce_seconds = get_settings().sync_debounce_ms / 1000
        self._store = store
        self._debounce_seconds = debounce_seconds
        self._schedule = scheduler or loop_scheduler
        self._state: ActivityLogRead | None = None
        self._timer: TimerHandle | None = None
        self._active_saves = 0
        self._saves_started = 0
        self._tasks: set[asyncio.Task[None]] = set()
        self._saved_listeners: list[SavedListener] = []
        self._error_listeners: list[ErrorListener] = []
        self.last_error: Exception | None = None

    # ── state ───────────────────────────────────────────────────────

    @property
    def state(self) -> ActivityLogRead | None:
        return self._state

    @property
    def is_saving(self) -> bool:
        return self._timer is not None or self._active_saves > 0

    def add_saved_listener(self, listener: SavedListener) -> None:
        self._saved_listeners.append(listener)

    def add_error_listener(self, listener: ErrorListener) -> None:
        self._error_listeners.append(listener)

    def load(self, remote_log: ActivityLogRead) -> bool:
        """Adopt ``remote_log`` if it is a different log than the one held.

        Returns True when local state was replaced. A refetch of the same log is
        ignored so it cannot revert edits that have not round-tripped yet.
        """
        if self._state is not None and self._state.id == remote_log.id:
            return False

        if self._timer is not None and self._state is not None:
            # Leaving a day with unsaved edits: send them now rather than drop them
            self._cancel_timer()
            self._spawn_save(self._state)

        logger.info("Loaded activity log %s for %s", remote_log.id, remote_log.today_date)
        self._state = remote_log
        return True

    # ── field edits ─────────────────────────────────────────────────

    def apply_field_update(self, patch: Mapping[str, Any]) -> ActivityLogRead:
        """Apply ``patch`` locally now and (re)start the debounce timer."""
        state = self._require_state()
        check_patch(patch)
        self._state = merge_patch(state, patch)
        self._arm_timer()
        return self._state

    async def apply_immediate(self, patch: Mapping[str, Any]) -> ActivityLogRead:
        """Apply ``patch`` locally and save the whole record at once, bypassing the debounce.

        A pending debounced save is folded into this one. Any save issued while
        the request is in flight already carries the patch. On failure, each
        patched field that has not been edited since is put back, a folded
        debounce is re-armed, and the error is reported to listeners and
        re-raised for the caller.
        """
        state = self._require_state()
        check_patch(patch)
        candidate = merge_patch(state, patch)
        previous = {field: getattr(state, field) for field in patch}
        had_pending = self._timer is not None
        saves_before = self._saves_started

        self._cancel_timer()
        self._state = candidate
        self._active_saves += 1
        try:
            saved = await self._store.save_activity(candidate)
        except Exception as exc:
            sent_alongside = self._saves_started > saves_before
            self._revert(candidate, previous, rearm=had_pending or sent_alongside)
            self._report_error(exc, "Immediate save of activity log %s failed", candidate.id)
            raise
        finally:
            self._active_saves -= 1

        self._notify_saved(saved)
        return saved

    # ── chanting slots ──────────────────────────────────────────────

    async def upsert_chanting_slot(
        self, slot: ChantingSlot, rounds: int, rating: int | None = None
    ) -> ChantingEntryRead:
        """Create or replace the entry for ``slot``; local state changes only on success."""
        state = self._require_state()
        entry = ChantingEntryUpsert(rounds=rounds, rating=rating)
        saved = await self._call_store(
            self._store.upsert_chanting_slot(state.id, slot, entry),
            "Saving chanting slot %s failed",
            slot.value,
        )
        self._update_entries(
            state.id,
            "chanting_logs",
            lambda entries: sorted(
                [e for e in entries if e.slot != slot] + [saved],
                key=lambda e: SLOT_ORDER.index(e.slot),
            ),
        )
        return saved

    async def delete_chanting_slot(self, slot: ChantingSlot) -> None:
        state = self._require_state()
        await self._call_store(
            self._store.delete_chanting_slot(state.id, slot),
            "Deleting chanting slot %s failed",
            slot.value,
        )
        self._update_entries(
            state.id, "chanting_logs", lambda entries: [e for e in entries if e.slot != slot]
        )

    # ── book reading ────────────────────────────────────────────────

    async def upsert_book_log(
        self, name: str, reading_time: int, chapter_name: str | None = None
    ) -> BookLogRead:
        """Create or replace the reading entry for the book ``name``."""
        state = self._require_state()
        entry = BookLogUpsert(reading_time=reading_time, chapter_name=chapter_name)
        saved = await self._call_store(
            self._store.upsert_book_log(state.id, name, entry),
            "Saving book log %r failed",
            name,
        )

        def replace(entries: list[BookLogRead]) -> list[BookLogRead]:
            # An existing book keeps its position; a new one goes last
            if any(e.name == name for e in entries):
                return [saved if e.name == name else e for e in entries]
            return [*entries, saved]

        self._update_entries(state.id, "book_reading_logs", replace)
        return saved

    async def delete_book_log(self, name: str) -> None:
        state = self._require_state()
        await self._call_store(
            self._store.delete_book_log(state.id, name),
            "Deleting book log %r failed",
            name,
        )
        self._update_entries(
            state.id, "book_reading_logs", lambda entries: [e for e in entries if e.name != name]
        )

    # ── association ─────────────────────────────────────────────────

    async def upsert_association_log(
        self,
        association_type: AssociationType,
        duration: int,
        devotee_name: str | None = None,
    ) -> AssociationLogRead:
        state = self._require_state()
        entry = AssociationLogUpsert(duration=duration, devotee_name=devotee_name)
        saved = await self._call_store(
            self._store.upsert_association_log(state.id, association_type, entry),
            "Saving association log %s failed",
            association_type.value,
        )
        self._update_entries(
            state.id,
            "association_logs",
            lambda entries: sorted(
                [e for e in entries if e.association_type != association_type] + [saved],
                key=lambda e: ASSOCIATION_ORDER.index(e.association_type),
            ),
        )
        return saved

    async def delete_association_log(self, association_type: AssociationType) -> None:
        state = self._require_state()
        await self._call_store(
            self._store.delete_association_log(state.id, association_type),
            "Deleting association log %s failed",
            association_type.value,
        )
        self._update_entries(
            state.id,
            "association_logs",
            lambda entries: [e for e in entries if e.association_type != association_type],
        )

    # ── lifecycle ───────────────────────────────────────────────────

    async def flush(self) -> None:
        """Fire a pending debounced save now and wait for every save in flight."""
        if self._timer is not None and self._state is not None:
            self._cancel_timer()
            self._spawn_save(self._state)
        await self.wait_idle()

    async def wait_idle(self) -> None:
        while self._tasks:
            await asyncio.gather(*self._tasks)

    # ── internals ───────────────────────────────────────────────────

    def _require_state(self) -> ActivityLogRead:
        if self._state is None:
            raise RuntimeError("No activity log loaded")
        return self._state

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _arm_timer(self) -> None:
        self._cancel_timer()
        self._timer = self._schedule(self._debounce_seconds, self._on_timer)

    def _revert(
        self, candidate: ActivityLogRead, previous: Mapping[str, Any], *, rearm: bool
    ) -> None:
        if self._state is None or self._state.id != candidate.id:
            return
        untouched = {
            field: value
            for field, value in previous.items()
            if getattr(self._state, field) == getattr(candidate, field)
        }
        if untouched:
            self._state = merge_patch(self._state, untouched)
        # Edits folded into the failed save, or sent alongside it, must go out again
        if rearm and self._timer is None:
            self._arm_timer()

    def _on_timer(self) -> None:
        self._timer = None
        if self._state is not None:
            self._spawn_save(self._state)

    def _spawn_save(self, snapshot: ActivityLogRead) -> None:
        self._active_saves += 1
        self._saves_started += 1
        task = asyncio.ensure_future(self._save(snapshot))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _save(self, snapshot: ActivityLogRead) -> None:
        error: Exception | None = None
        saved: ActivityLogRead | None = None
        try:
            saved = await self._store.save_activity(snapshot)
        except Exception as exc:
            error = exc
        finally:
            self._active_saves -= 1

        if error is not None:
            # Local state is kept; the next edit resends the cumulative record
            self._report_error(error, "Saving activity log %s failed", snapshot.id)
            return
        logger.debug("Saved activity log %s", snapshot.id)
        if saved is not None:
            self._notify_saved(saved)

    async def _call_store(self, call: Awaitable[T], message: str, *args: object) -> T:
        try:
            return await call
        except Exception as exc:
            self._report_error(exc, message, *args)
            raise

    def _update_entries(
        self, activity_id: int, field: str, update: Callable[[list[Any]], list[Any]]
    ) -> None:
        if self._state is None or self._state.id != activity_id:
            return
        entries = update(getattr(self._state, field))
        self._state = self._state.model_copy(update={field: entries})
        self._notify_saved(self._state)

    def _notify_saved(self, log: ActivityLogRead) -> None:
        self.last_error = None
        for listener in self._saved_listeners:
            listener(log)

    def _report_error(self, error: Exception, message: str, *args: object) -> None:
        logger.error(message + ": %s", *args, error)
        self.last_error = error
        for listener in self._error_listeners:
            listener(error)
