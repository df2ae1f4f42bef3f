"""Tests for activity log API endpoints."""

from datetime import date, datetime

import pytest
from httpx import AsyncClient
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from sadhana.models.activity import ActivityLog, AssociationLog, BookReadingLog, ChantingLog
from tests.conftest import test_session


async def _create_activity(session: AsyncSession, today: date = date(2024, 6, 10)) -> ActivityLog:
    activity = ActivityLog(
        user_id=1,
        today_date=today,
        sleep_at=datetime(2024, 6, 9, 22, 0),
        wakeup_at=datetime(2024, 6, 10, 4, 0),
    )
    session.add(activity)
    await session.commit()
    return activity


async def _add_chanting(session: AsyncSession, activity_id: int, slot: str, rounds: int) -> None:
    session.add(ChantingLog(activity_id=activity_id, slot=slot, rounds=rounds))
    await session.commit()


def _whole_record(**overrides: object) -> dict[str, object]:
    record: dict[str, object] = {
        "sleep_at": "2024-06-09T22:00:00",
        "wakeup_at": "2024-06-10T04:00:00",
        "no_meat": True,
        "no_intoxication": True,
        "no_illicit_sex": True,
        "no_gambling": True,
        "only_prasadam": True,
        "mangla_attended": False,
        "narasimha_attended": False,
        "tulsi_arati_attended": False,
        "darshan_arati_attended": False,
        "guru_puja_attended": False,
        "sandhya_arati_attended": False,
        "notes": None,
    }
    record.update(overrides)
    return record


# ── GET /api/activities/{today_date} ────────────────────────────────


async def test_get_creates_log_with_defaults(client: AsyncClient) -> None:
    response = await client.get("/api/activities/2024-06-10")
    assert response.status_code == 200
    data = response.json()
    assert data["today_date"] == "2024-06-10"
    assert data["sleep_at"] == "2024-06-09T22:00:00"
    assert data["wakeup_at"] == "2024-06-10T04:00:00"
    assert data["no_meat"] is True
    assert data["mangla_attended"] is False
    assert data["chanting_logs"] == []


async def test_get_returns_existing_log(client: AsyncClient) -> None:
    async with test_session() as session:
        activity = await _create_activity(session)
        await _add_chanting(session, activity.id, "7_30_to_12_00_pm", 4)
        await _add_chanting(session, activity.id, "before_7_30_am", 12)

    response = await client.get("/api/activities/2024-06-10")
    assert response.status_code == 200
    data = response.json()
    assert data["id"] == activity.id
    # Entries come back in time-of-day order
    assert [e["slot"] for e in data["chanting_logs"]] == ["before_7_30_am", "7_30_to_12_00_pm"]


async def test_get_twice_creates_one_log(client: AsyncClient) -> None:
    first = await client.get("/api/activities/2024-06-10")
    second = await client.get("/api/activities/2024-06-10")
    assert first.json()["id"] == second.json()["id"]

    async with test_session() as session:
        result = await session.execute(select(ActivityLog))
        assert len(result.scalars().all()) == 1


async def test_get_invalid_date(client: AsyncClient) -> None:
    response = await client.get("/api/activities/not-a-date")
    assert response.status_code == 422


# ── PUT /api/activities/{id} ────────────────────────────────────────


async def test_save_whole_record(client: AsyncClient) -> None:
    async with test_session() as session:
        activity = await _create_activity(session)

    response = await client.put(
        f"/api/activities/{activity.id}",
        json=_whole_record(mangla_attended=True, notes="Kirtan in the evening"),
    )
    assert response.status_code == 200
    data = response.json()
    assert data["mangla_attended"] is True
    assert data["notes"] == "Kirtan in the evening"
    assert data["today_date"] == "2024-06-10"


async def test_save_is_idempotent(client: AsyncClient) -> None:
    async with test_session() as session:
        activity = await _create_activity(session)

    body = _whole_record(guru_puja_attended=True)
    first = await client.put(f"/api/activities/{activity.id}", json=body)
    second = await client.put(f"/api/activities/{activity.id}", json=body)
    assert first.status_code == second.status_code == 200
    first_data, second_data = first.json(), second.json()
    first_data.pop("updated_at")
    second_data.pop("updated_at")
    assert first_data == second_data


async def test_save_ignores_read_only_fields(client: AsyncClient) -> None:
    async with test_session() as session:
        activity = await _create_activity(session)

    body = _whole_record(japa_sanga=True, today_date="2030-01-01")
    response = await client.put(f"/api/activities/{activity.id}", json=body)
    assert response.status_code == 200
    assert response.json()["japa_sanga"] is False
    assert response.json()["today_date"] == "2024-06-10"


async def test_save_not_found(client: AsyncClient) -> None:
    response = await client.put("/api/activities/999", json=_whole_record())
    assert response.status_code == 404


async def test_save_rejects_bad_timestamp(client: AsyncClient) -> None:
    async with test_session() as session:
        activity = await _create_activity(session)

    response = await client.put(
        f"/api/activities/{activity.id}", json=_whole_record(sleep_at="yesterday-ish")
    )
    assert response.status_code == 422


# ── chanting slots ──────────────────────────────────────────────────


async def test_upsert_chanting_slot_creates_then_replaces(client: AsyncClient) -> None:
    async with test_session() as session:
        activity = await _create_activity(session)

    url = f"/api/activities/{activity.id}/chanting-logs/before_7_30_am"
    created = await client.put(url, json={"rounds": 8, "rating": 7})
    assert created.status_code == 200
    assert created.json() == {"slot": "before_7_30_am", "rounds": 8, "rating": 7}

    replaced = await client.put(url, json={"rounds": 16})
    assert replaced.json() == {"slot": "before_7_30_am", "rounds": 16, "rating": None}

    async with test_session() as session:
        result = await session.execute(select(ChantingLog))
        assert len(result.scalars().all()) == 1


async def test_upsert_chanting_slot_validates(client: AsyncClient) -> None:
    async with test_session() as session:
        activity = await _create_activity(session)

    base = f"/api/activities/{activity.id}/chanting-logs"
    assert (await client.put(f"{base}/before_7_30_am", json={"rounds": -1})).status_code == 422
    bad_rating = await client.put(f"{base}/before_7_30_am", json={"rounds": 2, "rating": 11})
    assert bad_rating.status_code == 422
    assert (await client.put(f"{base}/midday", json={"rounds": 2})).status_code == 422


async def test_upsert_chanting_slot_unknown_activity(client: AsyncClient) -> None:
    response = await client.put(
        "/api/activities/999/chanting-logs/before_7_30_am", json={"rounds": 4}
    )
    assert response.status_code == 404


async def test_delete_chanting_slot(client: AsyncClient) -> None:
    async with test_session() as session:
        activity = await _create_activity(session)
        await _add_chanting(session, activity.id, "after_12_00_am", 2)

    url = f"/api/activities/{activity.id}/chanting-logs/after_12_00_am"
    response = await client.delete(url)
    assert response.status_code == 204

    again = await client.delete(url)
    assert again.status_code == 404

    log = await client.get("/api/activities/2024-06-10")
    assert log.json()["chanting_logs"] == []


async def test_upsert_chanting_slot_caps_rounds(
    client: AsyncClient, activity: ActivityLog
) -> None:
    base = f"/api/activities/{activity.id}/chanting-logs/before_7_30_am"
    assert (await client.put(base, json={"rounds": 108})).status_code == 200
    assert (await client.put(base, json={"rounds": 109})).status_code == 422
    assert (await client.put(base, json={"rounds": 2_000_000_000})).status_code == 422


async def test_child_rows_need_an_activity_log() -> None:
    async with test_session() as session:
        session.add(ChantingLog(activity_id=999, slot="before_7_30_am", rounds=4))
        with pytest.raises(IntegrityError):
            await session.commit()


# ── exercise ────────────────────────────────────────────────────────


async def test_save_exercise_time(client: AsyncClient, activity: ActivityLog) -> None:
    response = await client.put(
        f"/api/activities/{activity.id}", json=_whole_record(exercise_time=30)
    )
    assert response.status_code == 200
    assert response.json()["exercise_time"] == 30

    too_long = await client.put(
        f"/api/activities/{activity.id}", json=_whole_record(exercise_time=1441)
    )
    assert too_long.status_code == 422


# ── book reading logs ───────────────────────────────────────────────


async def test_upsert_book_log_creates_then_replaces(
    client: AsyncClient, activity: ActivityLog
) -> None:
    url = f"/api/activities/{activity.id}/book-logs/Bhagavad Gita"
    created = await client.put(url, json={"reading_time": 20, "chapter_name": "Chapter 2"})
    assert created.status_code == 200
    assert created.json() == {
        "name": "Bhagavad Gita",
        "reading_time": 20,
        "chapter_name": "Chapter 2",
    }

    replaced = await client.put(url, json={"reading_time": 35})
    assert replaced.json() == {"name": "Bhagavad Gita", "reading_time": 35, "chapter_name": None}

    async with test_session() as session:
        result = await session.execute(select(BookReadingLog))
        assert len(result.scalars().all()) == 1


async def test_book_logs_come_back_in_entry_order(
    client: AsyncClient, activity: ActivityLog
) -> None:
    base = f"/api/activities/{activity.id}/book-logs"
    await client.put(f"{base}/Srimad Bhagavatam", json={"reading_time": 15})
    await client.put(f"{base}/Bhagavad Gita", json={"reading_time": 10})
    await client.put(f"{base}/Srimad Bhagavatam", json={"reading_time": 25})

    log = (await client.get("/api/activities/2024-06-10")).json()
    assert [(b["name"], b["reading_time"]) for b in log["book_reading_logs"]] == [
        ("Srimad Bhagavatam", 25),
        ("Bhagavad Gita", 10),
    ]


async def test_upsert_book_log_validates(client: AsyncClient, activity: ActivityLog) -> None:
    base = f"/api/activities/{activity.id}/book-logs"
    assert (await client.put(f"{base}/Gita", json={"reading_time": -5})).status_code == 422
    assert (await client.put(f"{base}/Gita", json={"reading_time": 1441})).status_code == 422
    long_name = "x" * 201
    assert (await client.put(f"{base}/{long_name}", json={"reading_time": 5})).status_code == 422


async def test_upsert_book_log_unknown_activity(client: AsyncClient) -> None:
    response = await client.put("/api/activities/999/book-logs/Gita", json={"reading_time": 5})
    assert response.status_code == 404


async def test_delete_book_log(client: AsyncClient, activity: ActivityLog) -> None:
    url = f"/api/activities/{activity.id}/book-logs/Nectar of Devotion"
    await client.put(url, json={"reading_time": 10})

    assert (await client.delete(url)).status_code == 204
    assert (await client.delete(url)).status_code == 404

    log = await client.get("/api/activities/2024-06-10")
    assert log.json()["book_reading_logs"] == []


# ── association logs ────────────────────────────────────────────────


async def test_upsert_association_log_creates_then_replaces(
    client: AsyncClient, activity: ActivityLog
) -> None:
    url = f"/api/activities/{activity.id}/association-logs/GURU"
    created = await client.put(url, json={"duration": 45, "devotee_name": "Maharaj"})
    assert created.status_code == 200
    assert created.json() == {
        "association_type": "GURU",
        "duration": 45,
        "devotee_name": "Maharaj",
    }

    replaced = await client.put(url, json={"duration": 60})
    assert replaced.json()["duration"] == 60

    async with test_session() as session:
        result = await session.execute(select(AssociationLog))
        assert len(result.scalars().all()) == 1


async def test_association_logs_come_back_in_type_order(
    client: AsyncClient, activity: ActivityLog
) -> None:
    base = f"/api/activities/{activity.id}/association-logs"
    await client.put(f"{base}/OTHER_ISKCON_DEVOTEE", json={"duration": 10})
    await client.put(f"{base}/PRABHUPADA", json={"duration": 30})

    log = (await client.get("/api/activities/2024-06-10")).json()
    assert [a["association_type"] for a in log["association_logs"]] == [
        "PRABHUPADA",
        "OTHER_ISKCON_DEVOTEE",
    ]


async def test_upsert_association_log_validates(
    client: AsyncClient, activity: ActivityLog
) -> None:
    base = f"/api/activities/{activity.id}/association-logs"
    assert (await client.put(f"{base}/NEIGHBOUR", json={"duration": 5})).status_code == 422
    assert (await client.put(f"{base}/GURU", json={"duration": -1})).status_code == 422


async def test_delete_association_log(client: AsyncClient, activity: ActivityLog) -> None:
    url = f"/api/activities/{activity.id}/association-logs/PRABHUPADA"
    await client.put(url, json={"duration": 20})

    assert (await client.delete(url)).status_code == 204
    assert (await client.delete(url)).status_code == 404


# ── GET /api/activities/{id}/score ──────────────────────────────────


async def test_score_defaults(client: AsyncClient) -> None:
    async with test_session() as session:
        activity = await _create_activity(session)

    response = await client.get(f"/api/activities/{activity.id}/score")
    assert response.status_code == 200
    data = response.json()
    assert data["chanting"] == 0
    assert data["regulations"] == 40
    assert data["arati"] == 0
    assert data["sleep"] == 20
    assert data["wake"] == 20
    assert data["total"] == 80


async def test_score_with_chanting_and_report(client: AsyncClient) -> None:
    async with test_session() as session:
        activity = await _create_activity(session)
        await _add_chanting(session, activity.id, "before_7_30_am", 10)
        await _add_chanting(session, activity.id, "7_30_to_12_00_pm", 8)

    response = await client.get(f"/api/activities/{activity.id}/score")
    data = response.json()
    # 10 x 10 + 6 x 7.5 within the 16-round target, 2 excess rounds at 1 point
    assert data["chanting"] == 147
    report = data["report"]
    assert report.startswith("*Sadhana Report - 10 Jun 2024*")
    assert "📿 *Chanting:* 18/16 (Before 7:30 AM: 10)" in report
    assert "🌅 *Wake Up:* 4:00 AM" in report
    assert "🛌 *Sleep:* 10:00 PM" in report
    assert report.endswith("*Morning Program:* None")


async def test_score_not_found(client: AsyncClient) -> None:
    response = await client.get("/api/activities/999/score")
    assert response.status_code == 404


async def test_score_reading_association_and_exercise(
    client: AsyncClient, activity: ActivityLog
) -> None:
    base = f"/api/activities/{activity.id}"
    await client.put(f"{base}/book-logs/Bhagavad Gita", json={"reading_time": 30})
    await client.put(f"{base}/book-logs/Krishna Book", json={"reading_time": 20})
    await client.put(f"{base}/association-logs/PRABHUPADA", json={"duration": 100})
    await client.put(f"{base}/association-logs/GURU", json={"duration": 60})
    await client.put(base, json=_whole_record(exercise_time=15))

    data = (await client.get(f"{base}/score")).json()
    assert data["reading"] == 25
    # 160 minutes would be 80 points; capped at 60
    assert data["association"] == 60
    assert data["exercise"] == 20
    assert data["total"] == 80 + 25 + 60 + 20
    assert "📚 *Reading:* 50 mins - Bhagavad Gita (30m), Krishna Book (20m)" in data["report"]
    assert "🤝 *Shravan:* 160 mins" in data["report"]
    assert "🧘 *Exercise:* 15 mins" in data["report"]
