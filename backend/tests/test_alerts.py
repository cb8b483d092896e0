"""
Tests for the alerts feed and the cached unread count
"""
from apps.notifications.services import AlertService

from conftest import FakeBackend


def alerts(responses=None):
    backend = FakeBackend(responses or {("GET", "alerts/unread-count"): {"count": 3}})
    return AlertService(backend, "user-1"), backend


def test_unread_count_is_cached_between_polls():
    service, backend = alerts()

    assert service.unread_count() == 3
    assert service.unread_count() == 3

    assert backend.endpoints("GET") == ["alerts/unread-count"]


def test_cache_is_per_user():
    service, backend = alerts()
    other = AlertService(backend, "user-2")

    service.unread_count()
    other.unread_count()

    assert len(backend.endpoints("GET")) == 2


def test_mark_read_refreshes_the_count():
    service, backend = alerts()
    service.unread_count()

    service.mark_read("a1")
    service.unread_count()

    assert backend.endpoints("PUT") == ["alerts/a1/read"]
    assert backend.endpoints("GET") == ["alerts/unread-count", "alerts/unread-count"]


def test_read_all_and_delete_refresh_the_count():
    service, backend = alerts()

    service.unread_count()
    service.mark_all_read()
    service.unread_count()
    service.delete("a2")
    service.unread_count()

    assert backend.endpoints("PUT") == ["alerts/read-all"]
    assert backend.endpoints("DELETE") == ["alerts/a2"]
    assert backend.endpoints("GET").count("alerts/unread-count") == 3


def test_list_alerts_page():
    service, backend = alerts({
        ("GET", "alerts"): {
            "alerts": [{"id": "a1", "title": "Post failed", "read": False}],
            "hasMore": True,
            "nextCursor": "a1",
        },
    })

    page = service.list_alerts(limit=500, cursor="a0", unread_only=True)

    assert backend.calls[-1] == ("GET", "alerts", {"limit": 50, "cursor": "a0", "unreadOnly": "true"})
    assert page == {
        "alerts": [{"id": "a1", "title": "Post failed", "read": False}],
        "has_more": True,
        "next_cursor": "a1",
    }


def test_list_alerts_defaults():
    service, backend = alerts({("GET", "alerts"): []})

    page = service.list_alerts()

    assert backend.calls[-1] == ("GET", "alerts", {"limit": 4})
    assert page == {"alerts": [], "has_more": False, "next_cursor": None}


def test_missing_count_is_zero():
    service, _ = alerts({("GET", "alerts/unread-count"): {}})
    assert service.unread_count() == 0
