# tests/test_alerts.py
from datetime import datetime, timedelta

import pytest

T0 = datetime(2026, 7, 1, 6, 0)


@pytest.fixture
def alerts(storage, user_id):
    """Three alerts, created one hour apart (oldest first)."""
    created = []
    for i, (kind, priority) in enumerate((("weather", "low"), ("health", "critical"), ("yield", "medium"))):
        alert = storage.create_alert({
            "user_id": user_id,
            "type": kind,
            "priority": priority,
            "title": f"Alert {i}",
            "created_at": T0 + timedelta(hours=i),
        })
        created.append(alert.id)
    return created


def test_new_alert_is_unread_and_active(storage, user_id):
    alert = storage.create_alert({"user_id": user_id, "type": "health", "priority": "high", "title": "Check crop"})

    assert alert.is_read is False
    assert alert.is_active is True
    assert alert.field_id is None


def test_list_alerts_newest_first(storage, user_id, alerts):
    assert [a.id for a in storage.list_alerts(user_id)] == list(reversed(alerts))


def test_list_alerts_is_per_user(storage, user_id, alerts):
    other = storage.upsert_user({"id": "farmer-2"}).id
    storage.create_alert({"user_id": other, "type": "weather", "priority": "low", "title": "Theirs"})

    assert len(storage.list_alerts(user_id)) == 3
    assert [a.title for a in storage.list_alerts(other)] == ["Theirs"]


def test_mark_read_removes_alert_from_unread(storage, user_id, alerts):
    oldest, middle, newest = alerts

    assert storage.mark_alert_read(middle, user_id) is True

    unread = storage.list_unread_alerts(user_id)
    assert [a.id for a in unread] == [newest, oldest]
    assert all(a.is_read is False for a in unread)


def test_mark_read_is_idempotent(storage, user_id, alerts):
    assert storage.mark_alert_read(alerts[0], user_id) is True
    assert storage.mark_alert_read(alerts[0], user_id) is False

    read = [a for a in storage.list_alerts(user_id) if a.id == alerts[0]]
    assert read[0].is_read is True


def test_mark_read_unknown_id_is_a_noop(storage, user_id, alerts):
    assert storage.mark_alert_read("no-such-alert", user_id) is False
    assert len(storage.list_unread_alerts(user_id)) == 3


def test_mark_read_ignores_other_users_alert(storage, user_id, alerts):
    storage.upsert_user({"id": "farmer-2"})

    assert storage.mark_alert_read(alerts[0], "farmer-2") is False
    assert len(storage.list_unread_alerts(user_id)) == 3


def test_active_alerts_exclude_inactive(storage, user_id, alerts):
    storage.create_alert({
        "user_id": user_id,
        "type": "weather",
        "priority": "low",
        "title": "Expired frost warning",
        "is_active": False,
        "created_at": T0 + timedelta(hours=5),
    })

    active = storage.list_active_alerts(user_id)

    assert [a.id for a in active] == list(reversed(alerts))
    assert len(storage.list_alerts(user_id)) == 4
