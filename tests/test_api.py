"""Tests for the HTTP API."""

from datetime import datetime

from dayflow.services.reminder_scheduler import ReminderScheduler

DEVICE = "device-123"


def iso(value: datetime) -> str:
    return value.isoformat()


def fire_first(client, clock) -> dict:
    """Schedule the first reminder, wait it out, then fire it."""
    client.post(f"/reminders/{DEVICE}/next", json={})
    clock.advance(minutes=20)
    return client.post(f"/reminders/{DEVICE}/fire", json={}).json()


class TestHealth:
    def test_health(self, client):
        resp = client.get("/health")
        assert resp.status_code == 200
        assert resp.json()["status"] == "ok"


class TestSettings:
    def test_defaults_created_on_first_read(self, client):
        resp = client.get(f"/settings/{DEVICE}")
        assert resp.status_code == 200
        data = resp.json()
        assert data["notifications_enabled"] is True
        assert data["smart_reminders_enabled"] is True
        assert data["min_interval_minutes"] == 20
        assert data["max_interval_minutes"] == 45
        assert data["fixed_interval_minutes"] == 30
        assert data["reminder_mode"] == "medium"
        assert data["timezone"] == "UTC"
        assert data["quiet_hours_start"] is None

    def test_reminder_mode_applies_preset(self, client):
        resp = client.patch(f"/settings/{DEVICE}", json={"reminder_mode": "high"})
        assert resp.status_code == 200
        data = resp.json()
        assert data["reminder_mode"] == "high"
        assert (data["min_interval_minutes"], data["max_interval_minutes"]) == (15, 30)

    def test_quiet_hours_are_normalized(self, client):
        resp = client.patch(
            f"/settings/{DEVICE}",
            json={"quiet_hours_start": "7:05", "quiet_hours_end": "22:00:00"},
        )
        assert resp.status_code == 200
        assert resp.json()["quiet_hours_start"] == "07:05"
        assert resp.json()["quiet_hours_end"] == "22:00"

    def test_quiet_hours_can_be_cleared(self, client):
        client.patch(f"/settings/{DEVICE}", json={"quiet_hours_start": "22:00", "quiet_hours_end": "07:00"})
        resp = client.patch(f"/settings/{DEVICE}", json={"quiet_hours_start": None})
        assert resp.status_code == 200
        assert resp.json()["quiet_hours_start"] is None
        assert resp.json()["quiet_hours_end"] == "07:00"

    def test_rejects_malformed_time(self, client):
        resp = client.patch(f"/settings/{DEVICE}", json={"quiet_hours_start": "25:00"})
        assert resp.status_code == 422

    def test_rejects_inverted_range_in_request(self, client):
        resp = client.patch(
            f"/settings/{DEVICE}",
            json={"min_interval_minutes": 50, "max_interval_minutes": 40},
        )
        assert resp.status_code == 422

    def test_rejects_inverted_range_against_stored_value(self, client):
        resp = client.patch(f"/settings/{DEVICE}", json={"min_interval_minutes": 50})
        assert resp.status_code == 422
        assert client.get(f"/settings/{DEVICE}").json()["min_interval_minutes"] == 20

    def test_timezone_validation(self, client):
        assert client.patch(f"/settings/{DEVICE}", json={"timezone": "Nowhere/Land"}).status_code == 422
        resp = client.patch(f"/settings/{DEVICE}", json={"timezone": "Europe/Berlin"})
        assert resp.status_code == 200
        assert resp.json()["timezone"] == "Europe/Berlin"

    def test_null_reminder_mode_is_ignored(self, client):
        resp = client.patch(f"/settings/{DEVICE}", json={"reminder_mode": None})
        assert resp.status_code == 200
        assert resp.json()["reminder_mode"] == "medium"

    def test_rejects_preset_with_explicit_bounds(self, client):
        resp = client.patch(
            f"/settings/{DEVICE}",
            json={"reminder_mode": "low", "min_interval_minutes": 10},
        )
        assert resp.status_code == 422
        data = client.get(f"/settings/{DEVICE}").json()
        assert data["reminder_mode"] == "medium"
        assert data["min_interval_minutes"] == 20


class TestActivities:
    def test_start_end_and_summary(self, client, clock):
        resp = client.post(f"/activities/{DEVICE}/start", json={"activity": "Coding", "category": "deep_work"})
        assert resp.status_code == 200
        first = resp.json()
        assert first["ended_at"] is None

        clock.advance(minutes=30)
        resp = client.post(f"/activities/{DEVICE}/start", json={"activity": "Email"})
        assert resp.status_code == 200

        logs = client.get(f"/activities/{DEVICE}").json()
        assert [log["activity"] for log in logs] == ["Email", "Coding"]
        assert logs[1]["duration_seconds"] == 1800

        summary = client.get(f"/activities/{DEVICE}/summary").json()
        assert summary["logs_today_count"] == 2
        assert summary["last_activity"] == "Email"
        assert summary["has_logs_today"] is True

        clock.advance(minutes=10)
        ended = client.post(f"/activities/{DEVICE}/end", json={})
        assert ended.status_code == 200
        assert ended.json()[0]["duration_seconds"] == 600

        assert client.post(f"/activities/{DEVICE}/end", json={}).status_code == 404

    def test_blank_activity_rejected(self, client):
        resp = client.post(f"/activities/{DEVICE}/start", json={"activity": "   "})
        assert resp.status_code == 422

    def test_summary_uses_local_day(self, client, clock):
        client.patch(f"/settings/{DEVICE}", json={"timezone": "America/New_York"})
        # 03:00 UTC on the 15th is the evening of the 14th in New York
        client.post(
            f"/activities/{DEVICE}/start",
            json={"activity": "Reading", "started_at": iso(datetime(2026, 1, 15, 3, 0))},
        )
        summary = client.get(f"/activities/{DEVICE}/summary").json()
        assert summary["logs_today_count"] == 0
        assert summary["last_activity"] is None


class TestReminders:
    def test_first_reminder_after_minimum_interval(self, client, clock):
        resp = client.post(f"/reminders/{DEVICE}/next", json={})
        assert resp.status_code == 200
        data = resp.json()
        assert datetime.fromisoformat(data["next_reminder_at"]) == datetime(2026, 1, 15, 9, 20)
        assert data["interval_minutes"] == 33
        assert data["focus_state"] == "shallow"
        assert data["reason"] == "scheduled"

    def test_first_reminder_does_not_drift_between_polls(self, client, clock):
        client.post(f"/reminders/{DEVICE}/next", json={})
        clock.advance(minutes=10)
        data = client.post(f"/reminders/{DEVICE}/next", json={}).json()
        assert datetime.fromisoformat(data["next_reminder_at"]) == datetime(2026, 1, 15, 9, 20)

    def test_disabled(self, client):
        client.patch(f"/settings/{DEVICE}", json={"notifications_enabled": False})
        data = client.post(f"/reminders/{DEVICE}/next").json()
        assert data["next_reminder_at"] is None
        assert data["reason"] == "disabled"

    def test_quiet_hours(self, client):
        client.patch(f"/settings/{DEVICE}", json={"quiet_hours_start": "08:00", "quiet_hours_end": "10:00"})
        data = client.post(f"/reminders/{DEVICE}/next", json={}).json()
        assert data["next_reminder_at"] is None
        assert data["reason"] == "quiet_hours"

    def test_idle_signal(self, client):
        data = client.post(f"/reminders/{DEVICE}/next", json={"is_idle": False, "idle_minutes": 12}).json()
        assert data["focus_state"] == "idle"
        assert data["interval_minutes"] == 24

    def test_deep_focus_from_running_activity(self, client, clock):
        client.post(f"/activities/{DEVICE}/start", json={"activity": "Coding"})
        clock.advance(minutes=40)
        data = client.post(f"/reminders/{DEVICE}/next", json={}).json()
        assert data["focus_state"] == "deep"
        assert data["interval_minutes"] == 38

    def test_fire_lifecycle(self, client, clock):
        skipped = client.post(f"/reminders/{DEVICE}/fire", json={}).json()
        assert skipped["status"] == "skipped"
        assert skipped["reminder"] is None

        clock.advance(minutes=20)
        fired = client.post(f"/reminders/{DEVICE}/fire", json={}).json()
        assert fired["status"] == "fired"
        assert fired["reminder"]["title"] == "Start tracking"
        assert fired["reminder"]["status"] == "pending"
        # Next one is a full interval after this reminder
        assert datetime.fromisoformat(fired["next_reminder_at"]) == datetime(2026, 1, 15, 9, 53)

        pending = client.get(f"/reminders/{DEVICE}/pending").json()
        assert pending["count"] == 1

        session = client.get(f"/session/{DEVICE}").json()
        assert session["reminders_today"] == 1
        assert datetime.fromisoformat(session["last_reminder_at"]) == datetime(2026, 1, 15, 9, 20)

        again = client.post(f"/reminders/{DEVICE}/fire", json={}).json()
        assert again["status"] == "skipped"

    def test_quiet_hours_added_after_first_poll(self, client, clock):
        clock.now = datetime(2026, 1, 15, 21, 30)
        data = client.post(f"/reminders/{DEVICE}/next", json={}).json()
        assert datetime.fromisoformat(data["next_reminder_at"]) == datetime(2026, 1, 15, 21, 50)

        client.patch(f"/settings/{DEVICE}", json={"quiet_hours_start": "21:40", "quiet_hours_end": "07:00"})
        assert client.get(f"/session/{DEVICE}").json()["next_reminder_at"] is None

        clock.advance(minutes=5)
        data = client.post(f"/reminders/{DEVICE}/next", json={}).json()
        assert datetime.fromisoformat(data["next_reminder_at"]) == datetime(2026, 1, 16, 7, 0)

    def test_stored_first_reminder_inside_quiet_hours_is_dropped(self, db_session):
        scheduler = ReminderScheduler(db_session)
        user_settings = scheduler.get_or_create_settings(DEVICE)
        user_settings.quiet_hours_start = "21:40"
        user_settings.quiet_hours_end = "07:00"
        session = scheduler.get_or_create_session(DEVICE)
        session.next_reminder_at = datetime(2026, 1, 15, 21, 50)
        db_session.commit()

        decision, _ = scheduler.check(DEVICE, datetime(2026, 1, 15, 21, 35))
        assert decision.next_reminder_at == datetime(2026, 1, 16, 7, 0)
        assert session.next_reminder_at == datetime(2026, 1, 16, 7, 0)

    def test_fire_suggests_task_from_active_tab(self, client, clock):
        client.post(f"/reminders/{DEVICE}/next", json={})
        clock.advance(minutes=20)
        fired = client.post(
            f"/reminders/{DEVICE}/fire",
            json={"active_tab": "main.py - Visual Studio Code"},
        ).json()
        assert fired["status"] == "fired"
        assert fired["suggestion"]["activity"] == "Coding"
        assert fired["suggestion"]["source"] == "context"

    def test_fire_without_active_tab_has_no_suggestion(self, client, clock):
        assert fire_first(client, clock)["suggestion"] is None

    def test_mark_shown(self, client, clock):
        reminder_id = fire_first(client, clock)["reminder"]["id"]
        resp = client.patch(f"/reminders/{reminder_id}/status", json={"status": "shown"})
        assert resp.status_code == 200
        assert resp.json()["status"] == "shown"
        assert resp.json()["shown_at"] is not None
        assert client.get(f"/reminders/{DEVICE}/pending").json()["count"] == 0

    def test_repeated_dismissals_snooze(self, client, clock):
        client.post(f"/reminders/{DEVICE}/next", json={})
        clock.advance(minutes=20)
        for _ in range(3):
            reminder_id = client.post(f"/reminders/{DEVICE}/fire", json={}).json()["reminder"]["id"]
            resp = client.patch(f"/reminders/{reminder_id}/status", json={"status": "dismissed"})
            assert resp.json()["dismissed_at"] is not None
            last_fired = clock.now
            clock.advance(minutes=60)
        clock.now = last_fired

        session = client.get(f"/session/{DEVICE}").json()
        assert session["dismissals_count"] == 0
        assert datetime.fromisoformat(session["snooze_until"]) == datetime(2026, 1, 15, 12, 20)

        data = client.post(f"/reminders/{DEVICE}/next", json={}).json()
        assert data["reason"] == "snoozed"
        assert datetime.fromisoformat(data["next_reminder_at"]) == datetime(2026, 1, 15, 12, 20)

    def test_logging_resets_dismissals(self, client, clock):
        reminder_id = fire_first(client, clock)["reminder"]["id"]
        client.patch(f"/reminders/{reminder_id}/status", json={"status": "dismissed"})
        assert client.get(f"/session/{DEVICE}").json()["dismissals_count"] == 1

        client.post(f"/activities/{DEVICE}/start", json={"activity": "Planning"})
        assert client.get(f"/session/{DEVICE}").json()["dismissals_count"] == 0

    def test_unknown_reminder(self, client):
        resp = client.patch("/reminders/999/status", json={"status": "shown"})
        assert resp.status_code == 404


class TestSession:
    def test_manual_snooze_and_cancel(self, client, clock):
        resp = client.patch(f"/session/{DEVICE}", json={"snooze_minutes": 30})
        assert resp.status_code == 200
        assert datetime.fromisoformat(resp.json()["snooze_until"]) == datetime(2026, 1, 15, 9, 30)

        data = client.post(f"/reminders/{DEVICE}/next", json={}).json()
        assert data["reason"] == "snoozed"

        resp = client.patch(f"/session/{DEVICE}", json={"snooze_minutes": 0})
        assert resp.json()["snooze_until"] is None

    def test_rejects_snooze_longer_than_a_day(self, client):
        resp = client.patch(f"/session/{DEVICE}", json={"snooze_minutes": 10**10})
        assert resp.status_code == 422
        assert client.patch(f"/session/{DEVICE}", json={"snooze_minutes": 24 * 60}).status_code == 200

    def test_permission(self, client):
        resp = client.patch(f"/session/{DEVICE}", json={"notification_permission": "granted"})
        assert resp.json()["notification_permission"] == "granted"
        assert client.patch(f"/session/{DEVICE}", json={"notification_permission": "maybe"}).status_code == 422

    def test_clear_on_logout(self, client, clock):
        fire_first(client, clock)
        assert client.delete(f"/session/{DEVICE}").json()["status"] == "cleared"
        assert client.delete(f"/session/{DEVICE}").json()["status"] == "not_found"

        session = client.get(f"/session/{DEVICE}").json()
        assert session["reminders_today"] == 0
        assert session["last_reminder_at"] is None

    def test_daily_counter_rolls_over(self, client, clock):
        fire_first(client, clock)
        assert client.get(f"/session/{DEVICE}").json()["reminders_today"] == 1

        clock.advance(days=1)
        assert client.get(f"/session/{DEVICE}").json()["reminders_today"] == 0


class TestContext:
    def test_detect(self, client):
        resp = client.post("/context/detect", json={"active_tab": "GitHub - pull requests"})
        assert resp.status_code == 200
        data = resp.json()
        assert data["likely_task"] == "Coding"
        assert data["category"] == "deep_work"
        assert data["confidence"] == 75

    def test_suggestions_from_history(self, client, clock):
        for _ in range(2):
            client.post(f"/activities/{DEVICE}/start", json={"activity": "Email"})
            clock.advance(minutes=15)
            client.post(f"/activities/{DEVICE}/start", json={"activity": "Review"})
            clock.advance(minutes=15)

        resp = client.post(f"/context/{DEVICE}/suggestions", json={"active_tab": "YouTube"})
        assert resp.status_code == 200
        data = resp.json()
        activities = [s["activity"] for s in data["suggestions"]]
        assert "Watching Videos" in activities
        assert "Email" in activities
        assert "Review" in activities
        assert data["count"] == len(activities)
