"""
Tests for the job application workflow.

Tests:
- Submitting (including the blank cover letter case)
- Withdrawing
- Organizer review and the manage view
- Notifications and change events produced along the way
"""

import uuid

import pytest

from worknexus.core.realtime import change_feed
from worknexus.models.application import ApplicationStatus, JobApplication
from worknexus.models.notification import Notification
from worknexus.models.worker import UserActivity


def apply(client, job, headers, **overrides):
    body = {"cover_letter": "I have worked at three weddings this season.", **overrides}
    return client.post(f"/api/v1/jobs/{job.id}/applications", json=body, headers=headers)


@pytest.fixture
def feed_subscription(worker):
    subscription = change_feed.subscribe(worker.id)
    yield subscription
    change_feed.unsubscribe(subscription)


class TestSubmitApplication:

    def test_apply_success(self, client, db_session, make_job, worker, organizer, worker_headers):
        job = make_job()

        response = apply(client, job, worker_headers, expected_wage=180, years_experience=2)

        assert response.status_code == 201
        data = response.json()
        assert data["status"] == "pending"
        assert data["applicant_id"] == str(worker.id)
        assert data["expected_wage"] == 180

        notification = db_session.query(Notification).filter(Notification.user_id == organizer.id).one()
        assert notification.type == "new_application"
        assert notification.related_id == job.id

        activity = db_session.query(UserActivity).filter(UserActivity.user_id == worker.id).one()
        assert activity.activity_type == "job_application"

    @pytest.mark.parametrize("cover_letter", ["", "   ", "\n\t"])
    def test_blank_cover_letter_rejected_without_insert(
        self, client, db_session, make_job, organizer, worker_headers, cover_letter
    ):
        job = make_job()

        response = apply(client, job, worker_headers, cover_letter=cover_letter)

        assert response.status_code == 400
        assert "cover letter" in response.json()["detail"].lower()
        assert db_session.query(JobApplication).count() == 0
        assert db_session.query(Notification).count() == 0

    def test_cover_letter_is_trimmed(self, client, make_job, worker_headers):
        job = make_job()

        response = apply(client, job, worker_headers, cover_letter="  Ready to help  ")

        assert response.json()["cover_letter"] == "Ready to help"

    def test_duplicate_application(self, client, make_job, worker_headers):
        job = make_job()
        apply(client, job, worker_headers)

        response = apply(client, job, worker_headers)

        assert response.status_code == 409

    def test_cannot_apply_to_own_job(self, client, make_job, organizer_headers):
        job = make_job()

        response = apply(client, job, organizer_headers)

        assert response.status_code == 400

    def test_cannot_apply_to_closed_job(self, client, make_job, worker_headers):
        job = make_job(status="draft")

        response = apply(client, job, worker_headers)

        assert response.status_code == 400

    def test_unknown_job(self, client, worker_headers):
        response = client.post(
            f"/api/v1/jobs/{uuid.uuid4()}/applications",
            json={"cover_letter": "Hello"},
            headers=worker_headers,
        )

        assert response.status_code == 404

    def test_insert_event_published(self, client, make_job, worker, worker_headers, feed_subscription):
        job = make_job()

        apply(client, job, worker_headers)

        event = feed_subscription.queue.get_nowait()
        assert event.table == "job_applications"
        assert event.event_type == "INSERT"
        assert event.record["applicant_id"] == str(worker.id)
        assert feed_subscription.queue.empty()


class TestMyApplications:

    def test_list_merged_with_job(self, client, make_job, worker_headers):
        first = make_job(title="First")
        second = make_job(title="Second")
        apply(client, first, worker_headers)
        apply(client, second, worker_headers)

        response = client.get("/api/v1/applications/me", headers=worker_headers)

        assert response.status_code == 200
        titles = [a["job"]["title"] for a in response.json()]
        assert titles == ["Second", "First"]

    def test_withdraw(self, client, make_job, worker_headers):
        job = make_job()
        application_id = apply(client, job, worker_headers).json()["id"]

        response = client.post(f"/api/v1/applications/{application_id}/withdraw", headers=worker_headers)

        assert response.status_code == 200
        assert response.json()["status"] == "withdrawn"

        again = client.post(f"/api/v1/applications/{application_id}/withdraw", headers=worker_headers)
        assert again.status_code == 400

    def test_withdraw_someone_elses(self, client, make_job, worker_headers, other_worker, headers_for):
        job = make_job()
        application_id = apply(client, job, worker_headers).json()["id"]

        response = client.post(
            f"/api/v1/applications/{application_id}/withdraw", headers=headers_for(other_worker)
        )

        assert response.status_code == 403


class TestReviewApplication:

    def test_accept(self, client, db_session, make_job, worker, worker_headers, organizer_headers):
        job = make_job()
        application_id = apply(client, job, worker_headers).json()["id"]

        response = client.patch(
            f"/api/v1/applications/{application_id}/review",
            json={"status": "accepted"},
            headers=organizer_headers,
        )

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "accepted"
        assert data["reviewed_at"] is not None
        assert data["reviewed_by"] is not None

        db_session.refresh(job)
        assert job.workers_hired == 1

        notification = db_session.query(Notification).filter(Notification.user_id == worker.id).one()
        assert notification.type == "application_accepted"

    def test_reject(self, client, db_session, make_job, worker, worker_headers, organizer_headers):
        job = make_job()
        application_id = apply(client, job, worker_headers).json()["id"]

        response = client.patch(
            f"/api/v1/applications/{application_id}/review",
            json={"status": "rejected"},
            headers=organizer_headers,
        )

        assert response.json()["status"] == "rejected"
        db_session.refresh(job)
        assert job.workers_hired == 0
        types = [n.type for n in db_session.query(Notification).filter(Notification.user_id == worker.id)]
        assert types == ["application_rejected"]

    def test_accept_when_full(self, client, make_job, worker_headers, other_worker, headers_for, organizer_headers):
        job = make_job(workers_needed=1)
        first = apply(client, job, worker_headers).json()["id"]
        second = apply(client, job, headers_for(other_worker)).json()["id"]
        client.patch(f"/api/v1/applications/{first}/review", json={"status": "accepted"}, headers=organizer_headers)

        response = client.patch(
            f"/api/v1/applications/{second}/review", json={"status": "accepted"}, headers=organizer_headers
        )

        assert response.status_code == 400
        assert "filled" in response.json()["detail"]

    def test_only_pending_can_be_reviewed(self, client, make_job, worker_headers, organizer_headers):
        job = make_job()
        application_id = apply(client, job, worker_headers).json()["id"]
        url = f"/api/v1/applications/{application_id}/review"
        client.patch(url, json={"status": "rejected"}, headers=organizer_headers)

        response = client.patch(url, json={"status": "accepted"}, headers=organizer_headers)

        assert response.status_code == 400

    def test_invalid_decision(self, client, make_job, worker_headers, organizer_headers):
        job = make_job()
        application_id = apply(client, job, worker_headers).json()["id"]

        response = client.patch(
            f"/api/v1/applications/{application_id}/review",
            json={"status": "withdrawn"},
            headers=organizer_headers,
        )

        assert response.status_code == 422

    def test_other_organizer_cannot_review(self, client, make_job, worker_headers, user_factory, headers_for):
        from worknexus.models.user import AppRole

        job = make_job()
        application_id = apply(client, job, worker_headers).json()["id"]
        rival = user_factory("rival@example.com", AppRole.ORGANIZER)

        response = client.patch(
            f"/api/v1/applications/{application_id}/review",
            json={"status": "accepted"},
            headers=headers_for(rival),
        )

        assert response.status_code == 403

    def test_worker_cannot_review(self, client, make_job, worker_headers):
        job = make_job()
        application_id = apply(client, job, worker_headers).json()["id"]

        response = client.patch(
            f"/api/v1/applications/{application_id}/review",
            json={"status": "accepted"},
            headers=worker_headers,
        )

        assert response.status_code == 403

    def test_update_event_published(self, client, make_job, worker_headers, organizer_headers, feed_subscription):
        job = make_job()
        application_id = apply(client, job, worker_headers).json()["id"]
        feed_subscription.queue.get_nowait()

        client.patch(
            f"/api/v1/applications/{application_id}/review",
            json={"status": "accepted"},
            headers=organizer_headers,
        )

        events = []
        while not feed_subscription.queue.empty():
            events.append(feed_subscription.queue.get_nowait())
        assert [(e.table, e.event_type) for e in events] == [
            ("job_applications", "UPDATE"),
            ("notifications", "INSERT"),
        ]


class TestManageView:

    def test_jobs_with_applicants(
        self, client, make_job, worker, worker_headers, other_worker, headers_for, organizer_headers
    ):
        quiet = make_job(title="No applicants")
        busy = make_job(title="Busy", wage_per_hour=150)
        apply(client, busy, worker_headers, expected_wage=200)
        apply(client, busy, headers_for(other_worker), expected_wage=120)

        response = client.get("/api/v1/applications/manage", headers=organizer_headers)

        assert response.status_code == 200
        jobs = response.json()
        assert [j["title"] for j in jobs] == ["Busy", "No applicants"]
        assert jobs[1]["applications"] == []
        assert jobs[1]["has_pending"] is False
        assert str(quiet.id) == jobs[1]["id"]

        busy_view = jobs[0]
        assert busy_view["has_pending"] is True
        applicants = {a["applicant"]["full_name"]: a for a in busy_view["applications"]}
        assert applicants["Asha Worker"]["above_budget"] is True
        assert applicants["Ravi Worker"]["above_budget"] is False

    def test_has_pending_false_after_review(self, client, make_job, worker_headers, organizer_headers):
        job = make_job()
        application_id = apply(client, job, worker_headers).json()["id"]
        client.patch(
            f"/api/v1/applications/{application_id}/review", json={"status": "accepted"}, headers=organizer_headers
        )

        jobs = client.get("/api/v1/applications/manage", headers=organizer_headers).json()

        assert jobs[0]["has_pending"] is False
        assert jobs[0]["applications"][0]["status"] == "accepted"

    def test_requires_organizer(self, client, worker_headers):
        response = client.get("/api/v1/applications/manage", headers=worker_headers)

        assert response.status_code == 403
