from datetime import datetime, timedelta, timezone

import pytest

from gymtracker.core.config import get_settings
from gymtracker.core.constants import REST_ALERT_ID
from gymtracker.main import build_rest_timer
from gymtracker.models.app_settings import AppSettings
from gymtracker.services.app_settings import get_or_create_settings
from gymtracker.services.live_status import DeliveredAlert

API = "/api/v1"


async def create_session(client, **payload):
    payload.setdefault("exercise_names", ["Bench"])
    resp = await client.post(f"{API}/sessions", json=payload)
    assert resp.status_code == 201, resp.text
    return resp.json()


async def log(client, session, weight, reps, exercise_index=0, **extra):
    es_id = session["exercise_sessions"][exercise_index]["id"]
    resp = await client.post(
        f"{API}/sessions/{session['id']}/exercises/{es_id}/sets",
        json={"weight": weight, "reps": reps, **extra},
    )
    assert resp.status_code == 201, resp.text
    return resp.json()


@pytest.mark.asyncio
async def test_root_and_health(client):
    assert (await client.get("/")).json()["status"] == "ok"
    assert (await client.get(f"{API}/health")).json()["status"] == "ok"
    ready = (await client.get(f"{API}/health/ready")).json()
    assert ready == {"status": "ok", "database": "connected", "live_status": True}


@pytest.mark.asyncio
async def test_plan_crud(client):
    resp = await client.post(
        f"{API}/plans",
        json={
            "name": "Strength",
            "plan_type": "AB",
            "exercises": [{"name": "Squat", "label": "A"}, {"name": "Deadlift", "label": "B"}],
            "schedule": [{"weekday": 1, "label": "A"}, {"weekday": 4, "label": "B"}],
        },
    )
    assert resp.status_code == 201, resp.text
    plan = resp.json()
    assert [e["name"] for e in plan["exercises"]] == ["Squat", "Deadlift"]
    assert [e["position"] for e in plan["exercises"]] == [0, 1]

    resp = await client.post(f"{API}/plans/{plan['id']}/exercises", json={"name": "Row", "label": "B"})
    assert resp.status_code == 201
    assert resp.json()["position"] == 2
    resp = await client.post(f"{API}/plans/{plan['id']}/exercises", json={"name": "Row"})
    assert resp.status_code == 409

    # A full-body plan cannot schedule A/B days
    resp = await client.patch(f"{API}/plans/{plan['id']}", json={"plan_type": "Full Body"})
    assert resp.status_code == 400

    resp = await client.patch(
        f"{API}/plans/{plan['id']}",
        json={"plan_type": "Full Body", "schedule": [{"weekday": 2, "label": "Full"}]},
    )
    assert resp.status_code == 200
    assert resp.json()["schedule"] == [{"weekday": 2, "label": "Full"}]

    squat_id = plan["exercises"][0]["id"]
    assert (await client.delete(f"{API}/plans/{plan['id']}/exercises/{squat_id}")).status_code == 204
    names = [e["name"] for e in (await client.get(f"{API}/plans/{plan['id']}")).json()["exercises"]]
    assert names == ["Deadlift", "Row"]

    assert (await client.delete(f"{API}/plans/{plan['id']}")).status_code == 204
    assert (await client.get(f"{API}/plans/{plan['id']}")).status_code == 404


@pytest.mark.asyncio
async def test_plan_validation(client):
    resp = await client.post(
        f"{API}/plans",
        json={"name": "Bad", "plan_type": "AB", "schedule": [{"weekday": 1, "label": "C"}]},
    )
    assert resp.status_code == 422

    resp = await client.post(
        f"{API}/plans",
        json={"name": "Dupes", "exercises": [{"name": "Squat"}, {"name": "Squat"}]},
    )
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_logging_sets_detects_records(client):
    session = await create_session(client, plan_name="Strength", workout_label="A")

    first = await log(client, session, 100.0, 5)
    assert first["personal_record"]["weight"] == 100.0
    assert first["set"]["position"] == 0

    second = await log(client, session, 95.0, 5)
    assert second["personal_record"] is None

    warmup = await log(client, session, 120.0, 5, is_warmup=True)
    assert warmup["personal_record"] is None

    records = (await client.get(f"{API}/records/exercises/Bench")).json()
    assert [(r["weight"], r["reps"]) for r in records] == [(100.0, 5)]

    current = (await client.get(f"{API}/records/exercises/Bench/current", params={"reps": 5})).json()
    assert current["weight"] == 100.0
    assert (await client.get(f"{API}/records/exercises/Bench/current", params={"reps": 3})).json() is None

    stats = (await client.get(f"{API}/records/stats")).json()
    assert stats["total_records"] == 1
    assert stats["total_weight"] == 500.0
    assert (await client.get(f"{API}/records/exercises/Squat/stats")).status_code == 404

    detail = (await client.get(f"{API}/sessions/{session['id']}")).json()
    assert [s["weight"] for s in detail["exercise_sessions"][0]["set_logs"]] == [100.0, 95.0, 120.0]


@pytest.mark.asyncio
async def test_session_crud(client):
    session = await create_session(client, date="2026-03-03T10:00:00Z", exercise_names=["Squat"])
    assert session["exercise_sessions"][0]["exercise_name"] == "Squat"

    resp = await client.post(f"{API}/sessions/{session['id']}/exercises", json={"exercise_name": "Squat"})
    assert resp.status_code == 409
    resp = await client.post(f"{API}/sessions/{session['id']}/exercises", json={"exercise_name": "Lunge"})
    assert resp.status_code == 201
    assert resp.json()["position"] == 1

    resp = await client.patch(f"{API}/sessions/{session['id']}", json={"is_completed": True, "duration_seconds": 3600})
    assert resp.json()["is_completed"] is True

    listed = (await client.get(f"{API}/sessions")).json()
    assert [s["id"] for s in listed] == [session["id"]]

    assert (await client.delete(f"{API}/sessions/{session['id']}")).status_code == 204
    assert (await client.get(f"{API}/sessions/{session['id']}")).status_code == 404


@pytest.mark.asyncio
async def test_delete_set_keeps_record(client):
    session = await create_session(client)
    logged = await log(client, session, 80.0, 8)
    es_id = session["exercise_sessions"][0]["id"]

    resp = await client.delete(f"{API}/sessions/{session['id']}/exercises/{es_id}/sets/{logged['set']['id']}")
    assert resp.status_code == 204
    assert len((await client.get(f"{API}/records")).json()) == 1


@pytest.mark.asyncio
async def test_warmup_ramp_endpoint(client):
    session = await create_session(client, exercise_names=["Squat"])
    await log(client, session, 100.0, 5)
    es_id = session["exercise_sessions"][0]["id"]

    resp = await client.post(f"{API}/sessions/{session['id']}/exercises/{es_id}/warmup-ramp")
    assert resp.status_code == 200
    assert [s["weight"] for s in resp.json()] == [40.0, 55.0, 70.0, 80.0, 90.0]

    again = await client.post(f"{API}/sessions/{session['id']}/exercises/{es_id}/warmup-ramp")
    assert again.json() == []

    sets = (await client.get(f"{API}/sessions/{session['id']}")).json()["exercise_sessions"][0]["set_logs"]
    assert [s["weight"] for s in sets] == [40.0, 55.0, 70.0, 80.0, 90.0, 100.0]


@pytest.mark.asyncio
async def test_suggestions_from_history(client):
    plan = (
        await client.post(
            f"{API}/plans",
            json={"name": "Full", "exercises": [{"name": "Bench", "planned_sets": 3, "planned_reps": 8}]},
        )
    ).json()
    exercise_id = plan["exercises"][0]["id"]
    url = f"{API}/plans/{plan['id']}/exercises/{exercise_id}/suggestions"

    empty = (await client.get(url)).json()
    assert [(s["weight"], s["reps"]) for s in empty] == [(0.0, 8)] * 3

    session = await create_session(client, plan_name="Full", workout_label="Full")
    await log(client, session, 100.0, 8)

    suggested = (await client.get(url)).json()
    assert [(s["weight"], s["reps"]) for s in suggested] == [(102.5, 8), (100.0, 8), (100.0, 8)]


@pytest.mark.asyncio
async def test_monthly_report(client, monkeypatch, tmp_path):
    march3 = await create_session(client, date="2026-03-03T10:00:00Z", exercise_names=["Squat"])
    await log(client, march3, 60.0, 5, is_warmup=True)
    await log(client, march3, 100.0, 5)
    march17 = await create_session(client, date="2026-03-17T10:00:00Z", exercise_names=["Squat"])
    await log(client, march17, 110.0, 3)
    april = await create_session(client, date="2026-04-02T10:00:00Z", exercise_names=["Squat"])
    await log(client, april, 200.0, 1)

    resp = await client.get(f"{API}/reports/2026/3")
    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/html")
    assert "100.0 × 5" in resp.text
    assert "110.0 × 3" in resp.text
    assert "200.0 × 1" not in resp.text
    assert '<div class="stat-value">830.0</div>' in resp.text

    assert (await client.get(f"{API}/reports/2026/13")).status_code == 422

    monkeypatch.setattr(get_settings(), "reports_dir", str(tmp_path))
    resp = await client.post(f"{API}/reports/2026/3")
    assert resp.status_code == 201
    assert resp.json()["filename"] == "gymtracker-2026-03.html"
    assert (tmp_path / "gymtracker-2026-03.html").read_text(encoding="utf-8") == (
        await client.get(f"{API}/reports/2026/3")
    ).text


@pytest.mark.asyncio
async def test_settings(client):
    settings = (await client.get(f"{API}/settings")).json()
    assert settings["weight_unit"] == "kg"
    assert settings["default_rest_seconds"] == 90
    assert settings["progression_mode"] == "percent"

    resp = await client.patch(f"{API}/settings", json={"default_rest_seconds": 120, "weight_unit": "lb"})
    assert resp.json()["default_rest_seconds"] == 120
    assert resp.json()["weight_unit"] == "lb"
    assert (await client.patch(f"{API}/settings", json={"default_rest_seconds": 0})).status_code == 422


@pytest.mark.asyncio
async def test_rest_timer_flow(client, app):
    resp = await client.post(
        f"{API}/timer/start",
        json={"duration_seconds": 90, "exercise_name": "Squat", "workout_label": "A"},
    )
    body = resp.json()
    assert body["applied"] is True
    assert body["timer"]["state"] == "running"
    assert app.state.alerts.is_pending("rest_end_notification")

    live = (await client.get(f"{API}/timer/live-status")).json()
    assert (live["exercise_name"], live["workout_label"]) == ("Squat", "A")

    body = (await client.post(f"{API}/timer/add-minute")).json()
    assert body["applied"] is True
    assert body["timer"]["remaining_seconds"] > 90

    assert (await client.post(f"{API}/timer/tick", json={"remaining_seconds": 100})).json()["applied"] is True

    body = (await client.post(f"{API}/timer/stop")).json()
    assert body["applied"] is True
    assert body["timer"]["state"] == "idle"
    assert app.state.alerts.pending == {}
    assert (await client.get(f"{API}/timer/live-status")).json() is None

    # Nothing running: transitions are no-ops
    assert (await client.post(f"{API}/timer/skip")).json()["applied"] is False
    assert (await client.post(f"{API}/timer/add-minute")).json()["applied"] is False
    assert (await client.post(f"{API}/timer/start", json={"duration_seconds": 0})).json()["applied"] is False


@pytest.mark.asyncio
async def test_timer_uses_settings_default(client):
    await client.patch(f"{API}/settings", json={"default_rest_seconds": 150})
    body = (await client.post(f"{API}/timer/start", json={})).json()
    assert body["timer"]["remaining_seconds"] == 150
    await client.post(f"{API}/timer/skip")


@pytest.mark.asyncio
async def test_timer_without_live_status(client, app):
    build_rest_timer(app, live_status_enabled=False)
    body = (await client.post(f"{API}/timer/start", json={"duration_seconds": 60})).json()
    assert body["applied"] is False
    assert body["timer"]["state"] == "idle"
    assert app.state.alerts.pending == {}


@pytest.mark.asyncio
async def test_control_events(client, app):
    session = await create_session(client, workout_label="B")
    await log(client, session, 60.0, 10)  # sets the context for externally started rests

    assert (await client.post(f"{API}/controls/start_rest")).status_code == 202
    timer = (await client.get(f"{API}/timer")).json()
    assert timer["state"] == "running"
    assert (timer["exercise_name"], timer["workout_label"]) == ("Bench", "B")

    await client.post(f"{API}/controls/add_rest_minute")
    assert (await client.get(f"{API}/timer")).json()["remaining_seconds"] > 90

    await client.post(f"{API}/controls/skip_rest")
    assert (await client.get(f"{API}/timer")).json()["state"] == "idle"
    assert (await client.get(f"{API}/controls/pending")).json() == {"actions": ["next_exercise"]}

    # Skipping again while idle is accepted and ignored
    assert (await client.post(f"{API}/controls/skip_rest")).status_code == 202

    await client.post(f"{API}/controls/log_set")
    await client.post(f"{API}/controls/finish_workout")
    assert (await client.get(f"{API}/controls/pending")).json() == {"actions": ["log_set", "finish_workout"]}
    assert (await client.get(f"{API}/controls/pending")).json() == {"actions": []}

    assert (await client.post(f"{API}/controls/reboot")).status_code == 422


@pytest.mark.asyncio
async def test_start_rest_signal_uses_stored_rest_length(client, session_maker):
    async with session_maker() as db:
        settings = AppSettings.with_defaults()
        settings.default_rest_seconds = 150
        db.add(settings)
        await db.commit()

    assert (await client.post(f"{API}/controls/start_rest")).status_code == 202
    assert (await client.get(f"{API}/timer")).json()["remaining_seconds"] == 150

    # A second start while resting leaves the running rest alone
    assert (await client.post(f"{API}/controls/start_rest")).status_code == 202
    assert (await client.get(f"{API}/timer")).json()["remaining_seconds"] <= 150
    await client.post(f"{API}/controls/stop_rest")


@pytest.mark.asyncio
async def test_delivered_alert_ends_the_rest(client, app):
    await client.post(f"{API}/timer/start", json={"duration_seconds": 90, "exercise_name": "Squat"})
    app.state.alerts.on_fire(
        DeliveredAlert(alert_id=REST_ALERT_ID, title="t", body="b", delivered_at=datetime.now(timezone.utc))
    )
    assert (await client.get(f"{API}/timer")).json()["state"] == "idle"
    assert (await client.get(f"{API}/timer/live-status")).json() is None


@pytest.mark.asyncio
async def test_oldest_settings_row_wins(db):
    now = datetime.now(timezone.utc)
    newer, older = AppSettings.with_defaults(), AppSettings.with_defaults()
    newer.default_rest_seconds, newer.created_at = 60, now
    older.default_rest_seconds, older.created_at = 200, now - timedelta(days=1)
    db.add_all([newer, older])
    await db.commit()

    assert (await get_or_create_settings(db)).default_rest_seconds == 200
