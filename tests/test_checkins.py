"""
Tests for QR check-in/out, SOS alerts and emergency contacts.
"""

from datetime import timedelta

import pytest

from worknexus.core.timeutils import utcnow
from worknexus.models.application import ApplicationStatus, JobApplication
from worknexus.models.checkin import CheckinType, SafetyCheckin
from worknexus.models.notification import Notification
from worknexus.models.profile import Profile
from worknexus.services.checkins import minutes_late

LOCATION = {"latitude": 18.5204, "longitude": 73.8567}


def hire(db_session, job, user):
    application = JobApplication(
        job_id=job.id,
        applicant_id=user.id,
        cover_letter="Hire me",
        status=ApplicationStatus.ACCEPTED,
    )
    db_session.add(application)
    db_session.commit()
    return application


def check_in(client, job, headers, qr_code="WNX-QR-1234"):
    return client.post(f"/api/v1/jobs/{job.id}/checkin", json={"qr_code": qr_code, **LOCATION}, headers=headers)


class TestMinutesLate:

    def test_on_time_is_zero(self):
        start = utcnow()
        assert minutes_late(start, start - timedelta(minutes=30)) == 0

    def test_whole_minutes_only(self):
        start = utcnow()
        assert minutes_late(start, start + timedelta(minutes=12, seconds=59)) == 12

    def test_naive_and_aware_mix(self):
        start = utcnow()
        assert minutes_late(start.replace(tzinfo=None), start + timedelta(minutes=5)) == 5


class TestQRCheckin:

    def test_requires_accepted_application(self, client, make_job, worker_headers):
        job = make_job()

        response = check_in(client, job, worker_headers)

        assert response.status_code == 403

    def test_on_time_checkin(self, client, db_session, make_job, worker, worker_headers):
        job = make_job()
        hire(db_session, job, worker)

        response = check_in(client, job, worker_headers)

        assert response.status_code == 201
        data = response.json()
        assert data["is_late"] is False
        assert data["minutes_late"] == 0
        assert data["checked_out_at"] is None

        start = db_session.query(SafetyCheckin).filter(SafetyCheckin.user_id == worker.id).one()
        assert start.checkin_type == CheckinType.START
        assert start.latitude == LOCATION["latitude"]

    def test_late_checkin_counts_against_profile(self, client, db_session, make_job, worker, worker_headers):
        start = utcnow() - timedelta(minutes=45)
        job = make_job(start_date=start.isoformat(), end_date=(start + timedelta(hours=6)).isoformat())
        hire(db_session, job, worker)

        response = check_in(client, job, worker_headers)

        data = response.json()
        assert data["is_late"] is True
        assert 45 <= data["minutes_late"] <= 46

        profile = db_session.query(Profile).filter(Profile.id == worker.id).one()
        db_session.refresh(profile)
        assert profile.total_late_arrivals == 1

    def test_second_checkin_conflicts(self, client, db_session, make_job, worker, worker_headers):
        job = make_job()
        hire(db_session, job, worker)
        check_in(client, job, worker_headers)

        response = check_in(client, job, worker_headers)

        assert response.status_code == 409

    def test_blank_qr_code(self, client, db_session, make_job, worker, worker_headers):
        job = make_job()
        hire(db_session, job, worker)

        response = check_in(client, job, worker_headers, qr_code="  ")

        assert response.status_code == 400

    def test_get_checkin(self, client, db_session, make_job, worker, worker_headers):
        job = make_job()
        hire(db_session, job, worker)

        assert client.get(f"/api/v1/jobs/{job.id}/checkin", headers=worker_headers).json() is None

        check_in(client, job, worker_headers)
        response = client.get(f"/api/v1/jobs/{job.id}/checkin", headers=worker_headers)

        assert response.json()["qr_code"] == "WNX-QR-1234"

    def test_checkout(self, client, db_session, make_job, worker, worker_headers):
        job = make_job()
        hire(db_session, job, worker)
        check_in(client, job, worker_headers)

        response = client.post(f"/api/v1/jobs/{job.id}/checkout", json=LOCATION, headers=worker_headers)

        assert response.status_code == 200
        assert response.json()["checked_out_at"] is not None
        types = {c.checkin_type for c in db_session.query(SafetyCheckin).filter(SafetyCheckin.user_id == worker.id)}
        assert types == {CheckinType.START, CheckinType.END}

        again = client.post(f"/api/v1/jobs/{job.id}/checkout", json=LOCATION, headers=worker_headers)
        assert again.status_code == 409

    def test_checkout_without_checkin(self, client, make_job, worker_headers):
        job = make_job()

        response = client.post(f"/api/v1/jobs/{job.id}/checkout", json=LOCATION, headers=worker_headers)

        assert response.status_code == 400

    def test_invalid_coordinates(self, client, make_job, worker_headers):
        job = make_job()

        response = client.post(
            f"/api/v1/jobs/{job.id}/checkin",
            json={"qr_code": "x", "latitude": 120, "longitude": 0},
            headers=worker_headers,
        )

        assert response.status_code == 422


class TestSOS:

    def test_sos_notifies_organizer(self, client, db_session, make_job, worker, organizer, worker_headers):
        job = make_job()

        response = client.post(f"/api/v1/jobs/{job.id}/sos", json=LOCATION, headers=worker_headers)

        assert response.status_code == 201
        data = response.json()
        assert data["checkin"]["checkin_type"] == "sos"
        assert data["checkin"]["notes"] == "Emergency SOS triggered"
        assert data["primary_contact"] is None

        alert = db_session.query(Notification).filter(Notification.user_id == organizer.id).one()
        assert alert.type == "sos_alert"

    def test_sos_returns_primary_contact(self, client, make_job, worker_headers):
        job = make_job()
        client.post(
            "/api/v1/emergency-contacts",
            json={"name": "Mother", "phone": "9876543210", "relationship": "parent"},
            headers=worker_headers,
        )

        response = client.post(f"/api/v1/jobs/{job.id}/sos", json=LOCATION, headers=worker_headers)

        assert response.json()["primary_contact"]["name"] == "Mother"


class TestEmergencyContacts:

    @pytest.fixture
    def add_contact(self, client, worker_headers):
        def _add(name, phone="9000000000", relationship="friend"):
            return client.post(
                "/api/v1/emergency-contacts",
                json={"name": name, "phone": phone, "relationship": relationship},
                headers=worker_headers,
            )
        return _add

    def test_first_contact_is_primary(self, client, add_contact, worker_headers):
        first = add_contact("Mother")
        second = add_contact("Brother")

        assert first.status_code == 201
        assert first.json()["is_primary"] is True
        assert second.json()["is_primary"] is False

    def test_blank_fields_rejected(self, add_contact):
        assert add_contact("  ").status_code == 400

    def test_set_primary(self, client, add_contact, worker_headers):
        add_contact("Mother")
        brother_id = add_contact("Brother").json()["id"]

        response = client.post(f"/api/v1/emergency-contacts/{brother_id}/primary", headers=worker_headers)

        assert response.json()["is_primary"] is True
        contacts = client.get("/api/v1/emergency-contacts", headers=worker_headers).json()
        assert [c["name"] for c in contacts if c["is_primary"]] == ["Brother"]
        assert contacts[0]["name"] == "Brother"

    def test_delete(self, client, add_contact, worker_headers):
        contact_id = add_contact("Mother").json()["id"]

        response = client.delete(f"/api/v1/emergency-contacts/{contact_id}", headers=worker_headers)

        assert response.status_code == 204
        assert client.get("/api/v1/emergency-contacts", headers=worker_headers).json() == []

    def test_cannot_touch_other_users_contact(self, client, add_contact, other_worker, headers_for):
        contact_id = add_contact("Mother").json()["id"]

        response = client.delete(f"/api/v1/emergency-contacts/{contact_id}", headers=headers_for(other_worker))

        assert response.status_code == 404
