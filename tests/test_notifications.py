"""
Tests for in-app notifications.
"""

import uuid

from worknexus.core.realtime import change_feed
from worknexus.services.notifications import notify


class TestNotifications:

    def test_list_newest_first(self, client, db_session, worker, worker_headers):
        notify(db_session, worker.id, "First", "one")
        notify(db_session, worker.id, "Second", "two")

        response = client.get("/api/v1/notifications", headers=worker_headers)

        assert response.status_code == 200
        assert [n["title"] for n in response.json()] == ["Second", "First"]

    def test_list_capped_at_fifty(self, client, db_session, worker, worker_headers):
        for i in range(55):
            notify(db_session, worker.id, f"N{i}", "body")

        response = client.get("/api/v1/notifications", headers=worker_headers)

        assert len(response.json()) == 50

    def test_only_own_notifications(self, client, db_session, worker, other_worker, worker_headers):
        notify(db_session, other_worker.id, "Not yours", "body")

        assert client.get("/api/v1/notifications", headers=worker_headers).json() == []

    def test_mark_read(self, client, db_session, worker, worker_headers):
        notification = notify(db_session, worker.id, "Hello", "body")

        response = client.post(f"/api/v1/notifications/{notification.id}/read", headers=worker_headers)

        assert response.status_code == 200
        assert response.json()["is_read"] is True

    def test_mark_read_other_users_notification(self, client, db_session, other_worker, worker_headers):
        notification = notify(db_session, other_worker.id, "Private", "body")

        response = client.post(f"/api/v1/notifications/{notification.id}/read", headers=worker_headers)

        assert response.status_code == 404

    def test_mark_unknown(self, client, worker_headers):
        response = client.post(f"/api/v1/notifications/{uuid.uuid4()}/read", headers=worker_headers)

        assert response.status_code == 404

    def test_read_all_and_unread_count(self, client, db_session, worker, worker_headers):
        for i in range(3):
            notify(db_session, worker.id, f"N{i}", "body")

        assert client.get("/api/v1/notifications/unread-count", headers=worker_headers).json() == {"unread": 3}

        response = client.post("/api/v1/notifications/read-all", headers=worker_headers)

        assert response.json() == {"updated": 3}
        assert client.get("/api/v1/notifications/unread-count", headers=worker_headers).json() == {"unread": 0}

    def test_notify_publishes_insert(self, db_session, worker):
        subscription = change_feed.subscribe(worker.id, ["notifications"])
        try:
            notification = notify(db_session, worker.id, "Live", "body", type="payment")

            event = subscription.queue.get_nowait()
            assert event.event_type == "INSERT"
            assert event.record["id"] == str(notification.id)
            assert event.record["type"] == "payment"
        finally:
            change_feed.unsubscribe(subscription)
