"""
Tests for profiles, verification documents, reliability and the dashboard.
"""

import os
import uuid

import pytest

from worknexus.core.config import settings
from worknexus.core.storage import StorageError
from worknexus.models.application import ApplicationStatus, JobApplication
from worknexus.models.profile import Profile
from worknexus.models.worker import UserActivity
from worknexus.services import profiles as profile_service
from worknexus.services.profiles import reliability_label


class TestOwnProfile:

    def test_get_me(self, client, worker, worker_headers):
        response = client.get("/api/v1/profiles/me", headers=worker_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["id"] == str(worker.id)
        assert data["full_name"] == "Asha Worker"
        assert data["reliability_score"] == 100
        assert data["verification_status"] is None

    def test_partial_update(self, client, db_session, worker, worker_headers):
        response = client.patch(
            "/api/v1/profiles/me",
            json={"city": "Pune", "college_name": "COEP"},
            headers=worker_headers,
        )

        assert response.status_code == 200
        data = response.json()
        assert data["city"] == "Pune"
        assert data["college_name"] == "COEP"
        assert data["full_name"] == "Asha Worker"

        activity = db_session.query(UserActivity).filter(UserActivity.user_id == worker.id).one()
        assert activity.activity_type == "profile_update"

    def test_null_availability_rejected(self, client, db_session, worker, worker_headers):
        response = client.patch("/api/v1/profiles/me", json={"is_available": None}, headers=worker_headers)

        assert response.status_code == 422
        profile = db_session.query(Profile).filter(Profile.id == worker.id).one()
        assert profile.is_available is True

    def test_public_profile(self, client, worker, organizer_headers):
        response = client.get(f"/api/v1/profiles/{worker.id}", headers=organizer_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["full_name"] == "Asha Worker"
        assert "kyc_document_url" not in data
        assert "date_of_birth" not in data

    def test_public_profile_unknown(self, client, worker_headers):
        response = client.get(f"/api/v1/profiles/{uuid.uuid4()}", headers=worker_headers)

        assert response.status_code == 404


class TestVerificationDocuments:

    def test_upload_pdf(self, client, worker, worker_headers):
        response = client.post(
            "/api/v1/profiles/me/documents",
            files={"file": ("aadhaar.pdf", b"%PDF-1.4 sample", "application/pdf")},
            headers=worker_headers,
        )

        assert response.status_code == 201
        data = response.json()
        assert data["verification_status"] == "pending"
        assert data["kyc_document_url"].endswith("aadhaar.pdf")
        assert os.path.exists(data["kyc_document_url"])

    def test_unsupported_type(self, client, worker_headers):
        response = client.post(
            "/api/v1/profiles/me/documents",
            files={"file": ("notes.txt", b"hello", "text/plain")},
            headers=worker_headers,
        )

        assert response.status_code == 400

    def test_too_large(self, client, worker_headers, monkeypatch):
        monkeypatch.setattr(settings, "MAX_DOCUMENT_SIZE_MB", 1)

        response = client.post(
            "/api/v1/profiles/me/documents",
            files={"file": ("scan.png", b"0" * (1024 * 1024 + 1), "image/png")},
            headers=worker_headers,
        )

        assert response.status_code == 400
        assert "1MB" in response.json()["detail"]

    def test_storage_failure(self, client, db_session, worker, worker_headers, monkeypatch):
        def fail(*args, **kwargs):
            raise StorageError("bucket unavailable")

        monkeypatch.setattr(profile_service.storage, "upload_file", fail)

        response = client.post(
            "/api/v1/profiles/me/documents",
            files={"file": ("id.jpg", b"jpeg-bytes", "image/jpeg")},
            headers=worker_headers,
        )

        assert response.status_code == 500
        profile = db_session.query(Profile).filter(Profile.id == worker.id).one()
        assert profile.verification_status is None


class TestReliability:

    @pytest.mark.parametrize("score, label", [
        (100, "Excellent"),
        (95, "Excellent"),
        (90, "Great"),
        (70, "Good"),
        (50, "Fair"),
        (49, "Needs Improvement"),
    ])
    def test_labels(self, score, label):
        assert reliability_label(score) == label

    def test_reliability_endpoint(self, client, db_session, worker, worker_headers):
        profile = db_session.query(Profile).filter(Profile.id == worker.id).one()
        profile.reliability_score = 82
        profile.total_late_arrivals = 2
        db_session.commit()

        response = client.get("/api/v1/profiles/me/reliability", headers=worker_headers)

        assert response.json() == {
            "score": 82,
            "label": "Good",
            "jobs_completed": 0,
            "no_shows": 0,
            "late_arrivals": 2,
            "backup_pool_member": False,
        }


class TestSafetySettings:

    def test_defaults(self, client, worker_headers):
        data = client.get("/api/v1/profiles/me", headers=worker_headers).json()

        assert data["night_shift_opted_out"] is False
        assert data["working_radius_km"] == 25
        assert data["backup_pool_member"] is False

    def test_update_preferences(self, client, worker_headers):
        response = client.patch(
            "/api/v1/profiles/me",
            json={"night_shift_opted_out": True, "working_radius_km": 40, "backup_pool_member": True},
            headers=worker_headers,
        )

        assert response.status_code == 200
        data = response.json()
        assert data["night_shift_opted_out"] is True
        assert data["working_radius_km"] == 40
        assert data["backup_pool_member"] is True

        reliability = client.get("/api/v1/profiles/me/reliability", headers=worker_headers).json()
        assert reliability["backup_pool_member"] is True

    @pytest.mark.parametrize("radius", [4, 101])
    def test_radius_bounds(self, client, worker_headers, radius):
        response = client.patch("/api/v1/profiles/me", json={"working_radius_km": radius}, headers=worker_headers)

        assert response.status_code == 422

    @pytest.mark.parametrize("field", ["night_shift_opted_out", "working_radius_km", "backup_pool_member"])
    def test_null_rejected(self, client, worker_headers, field):
        response = client.patch("/api/v1/profiles/me", json={field: None}, headers=worker_headers)

        assert response.status_code == 422


class TestDashboard:

    def test_worker_dashboard(self, client, db_session, make_job, worker, worker_headers):
        finished = make_job(title="Finished", status="completed")
        running = make_job(title="Running")
        pending = make_job(title="Pending")
        db_session.add_all([
            JobApplication(job_id=finished.id, applicant_id=worker.id, cover_letter="x",
                           status=ApplicationStatus.ACCEPTED),
            JobApplication(job_id=running.id, applicant_id=worker.id, cover_letter="x",
                           status=ApplicationStatus.ACCEPTED),
            JobApplication(job_id=pending.id, applicant_id=worker.id, cover_letter="x"),
        ])
        db_session.commit()

        response = client.get("/api/v1/dashboard", headers=worker_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["role"] == "user"
        assert data["stats"] == {"total": 3, "active": 2, "completed": 1}
        assert data["profile"]["id"] == str(worker.id)
        assert data["unread_notifications"] == 0
        assert data["unread_messages"] == 0

    def test_organizer_dashboard(self, client, make_job, organizer_headers):
        make_job()
        make_job()
        make_job(status="completed")
        make_job(status="draft")

        data = client.get("/api/v1/dashboard", headers=organizer_headers).json()

        assert data["role"] == "organizer"
        assert data["stats"] == {"total": 4, "active": 2, "completed": 1}

    def test_in_progress_job_is_not_active(self, db_session, make_job, organizer):
        make_job(status="in_progress")

        stats = profile_service.organizer_stats(db_session, organizer)

        assert (stats.total, stats.active, stats.completed) == (1, 0, 0)


class TestHealth:

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["timestamp"].endswith("Z")

    def test_detailed_health(self, client):
        response = client.get("/health/detailed")

        data = response.json()
        assert data["status"] == "healthy"
        assert data["checks"]["database"]["status"] == "healthy"
        assert data["checks"]["realtime"]["subscribers"] >= 0
