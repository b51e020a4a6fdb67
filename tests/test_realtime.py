"""
Tests for the in-process change feed and realtime endpoints.
"""

import asyncio
import json
import uuid

import pytest
from fastapi import HTTPException
from sse_starlette.sse import ServerSentEvent

from worknexus.api.endpoints.realtime import parse_tables, stream_events
from worknexus.core.config import settings
from worknexus.core.realtime import INSERT, ChangeFeed, change_feed
from worknexus.services.notifications import notify


class FakeRequest:
    def __init__(self, disconnected=False):
        self.disconnected = disconnected

    async def is_disconnected(self):
        return self.disconnected


async def wait_for_subscriber(baseline):
    for _ in range(100):
        if change_feed.subscriber_count > baseline:
            return
        await asyncio.sleep(0)
    raise AssertionError("stream never subscribed")


class TestChangeFeed:

    def test_delivers_only_to_audience(self):
        feed = ChangeFeed()
        alice, bob = uuid.uuid4(), uuid.uuid4()
        alice_sub = feed.subscribe(alice)
        bob_sub = feed.subscribe(bob)

        delivered = feed.emit("messages", INSERT, {"content": "hi"}, [alice])

        assert delivered == 1
        assert alice_sub.queue.get_nowait().record == {"content": "hi"}
        assert bob_sub.queue.empty()

    def test_table_filter(self):
        feed = ChangeFeed()
        user_id = uuid.uuid4()
        subscription = feed.subscribe(user_id, ["notifications"])

        feed.emit("messages", INSERT, {}, [user_id])
        feed.emit("notifications", INSERT, {"title": "x"}, [user_id])

        event = subscription.queue.get_nowait()
        assert event.table == "notifications"
        assert subscription.queue.empty()

    def test_full_queue_drops_oldest(self):
        feed = ChangeFeed(queue_size=2)
        user_id = uuid.uuid4()
        subscription = feed.subscribe(user_id)

        for i in range(3):
            feed.emit("messages", INSERT, {"n": i}, [user_id])

        assert subscription.dropped == 1
        assert [subscription.queue.get_nowait().record["n"] for _ in range(2)] == [1, 2]

    def test_unsubscribe(self):
        feed = ChangeFeed()
        user_id = uuid.uuid4()
        subscription = feed.subscribe(user_id)
        assert feed.subscriber_count == 1

        feed.unsubscribe(subscription)

        assert feed.subscriber_count == 0
        assert feed.emit("messages", INSERT, {}, [user_id]) == 0

    def test_payload_shape(self):
        feed = ChangeFeed()
        user_id = uuid.uuid4()
        subscription = feed.subscribe(user_id)

        feed.emit("job_applications", "UPDATE", {"status": "accepted"}, [user_id])

        payload = subscription.queue.get_nowait().to_payload()
        assert payload["table"] == "job_applications"
        assert payload["eventType"] == "UPDATE"
        assert payload["new"] == {"status": "accepted"}
        assert payload["commit_timestamp"]


class TestParseTables:

    def test_none_means_all(self):
        assert parse_tables(None) is None
        assert parse_tables("") is None

    def test_comma_separated(self):
        assert parse_tables("messages, notifications") == {"messages", "notifications"}

    def test_unknown_table(self):
        with pytest.raises(HTTPException) as exc_info:
            parse_tables("messages,users")

        assert exc_info.value.status_code == 400
        assert "users" in exc_info.value.detail


class TestRealtimeEndpoints:

    def test_stream_rejects_unknown_table(self, client, worker_headers):
        response = client.get("/api/v1/realtime/stream?tables=payments", headers=worker_headers)

        assert response.status_code == 400

    def test_stream_requires_auth(self, client):
        response = client.get("/api/v1/realtime/stream")

        assert response.status_code in (401, 403)

    def test_counts(self, client, db_session, worker, organizer, worker_headers, organizer_headers):
        notify(db_session, worker.id, "Hello", "body")
        notify(db_session, worker.id, "Again", "body")
        conversation_id = client.post(
            "/api/v1/conversations", json={"receiver_id": str(worker.id)}, headers=organizer_headers
        ).json()["id"]
        client.post(
            f"/api/v1/conversations/{conversation_id}/messages",
            json={"content": "See you at 9"},
            headers=organizer_headers,
        )

        response = client.get("/api/v1/realtime/counts", headers=worker_headers)

        assert response.json() == {"unread_notifications": 2, "unread_messages": 1}


class TestEventStream:

    def test_first_frame_is_published_notification(self, db_session, worker):
        baseline = change_feed.subscriber_count

        async def scenario():
            stream = stream_events(FakeRequest(), worker.id, {"notifications"})
            first = asyncio.ensure_future(stream.__anext__())
            await wait_for_subscriber(baseline)

            change_feed.emit("messages", INSERT, {"content": "filtered out"}, [worker.id])
            notification = notify(db_session, worker.id, "Shift tomorrow", "Report at 9")

            item = await asyncio.wait_for(first, timeout=2)
            await stream.aclose()
            return item, notification

        item, notification = asyncio.run(scenario())

        frame = ServerSentEvent(**item).encode()
        if isinstance(frame, bytes):
            frame = frame.decode()
        lines = frame.splitlines()
        assert "event: notifications" in lines
        data = next(line for line in lines if line.startswith("data: "))
        payload = json.loads(data[len("data: "):])
        assert payload["table"] == "notifications"
        assert payload["eventType"] == "INSERT"
        assert payload["new"]["id"] == str(notification.id)
        assert change_feed.subscriber_count == baseline

    def test_ping_when_idle(self, monkeypatch, worker):
        monkeypatch.setattr(settings, "REALTIME_KEEPALIVE_SECONDS", 0.01)

        async def scenario():
            stream = stream_events(FakeRequest(), worker.id)
            item = await asyncio.wait_for(stream.__anext__(), timeout=2)
            await stream.aclose()
            return item

        assert asyncio.run(scenario()) == {"event": "ping", "data": "{}"}

    def test_unsubscribes_on_disconnect(self, worker):
        baseline = change_feed.subscriber_count
        request = FakeRequest()

        async def scenario():
            stream = stream_events(request, worker.id)
            first = asyncio.ensure_future(stream.__anext__())
            await wait_for_subscriber(baseline)
            assert change_feed.subscriber_count == baseline + 1

            change_feed.emit("messages", INSERT, {"content": "hi"}, [worker.id])
            await asyncio.wait_for(first, timeout=2)
            request.disconnected = True
            return [item async for item in stream]

        assert asyncio.run(scenario()) == []
        assert change_feed.subscriber_count == baseline

    def test_no_subscription_until_streaming_starts(self, worker):
        baseline = change_feed.subscriber_count

        stream = stream_events(FakeRequest(disconnected=True), worker.id)

        assert change_feed.subscriber_count == baseline
        assert asyncio.run(self._drain(stream)) == []
        assert change_feed.subscriber_count == baseline

    @staticmethod
    async def _drain(stream):
        return [item async for item in stream]
