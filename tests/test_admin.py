"""
Unit tests for admin endpoints.

Tests:
- Platform stats
- Identity verification review
- User listing and role changes
"""

import uuid

from worknexus.models.payment import Payment, PaymentStatus
from worknexus.models.profile import Profile, VerificationStatus


def mark_pending(db_session, user):
    profile = db_session.query(Profile).filter(Profile.id == user.id).one()
    profile.kyc_document_url = "uploads/documents/id.pdf"
    profile.verification_status = VerificationStatus.PENDING
    db_session.commit()
    return profile


class TestAdminStats:
    """Test the admin stats endpoint"""

    def test_get_stats(self, client, db_session, make_job, worker, organizer, admin_headers):
        job = make_job()
        mark_pending(db_session, worker)
        db_session.add_all([
            Payment(job_id=job.id, organizer_id=organizer.id, worker_id=worker.id, amount=1000,
                    platform_fee=100, worker_payout=900, status=PaymentStatus.COMPLETED),
            Payment(job_id=job.id, organizer_id=organizer.id, worker_id=worker.id, amount=500,
                    platform_fee=50, worker_payout=450, status=PaymentStatus.PENDING),
        ])
        db_session.commit()

        response = client.get("/api/v1/admin/stats", headers=admin_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["total_users"] == 3
        assert data["total_jobs"] == 1
        assert data["total_applications"] == 0
        assert data["total_revenue"] == 1500
        assert data["pending_verifications"] == 1
        assert data["pending_role_requests"] == 0

    def test_stats_require_admin(self, client, organizer_headers):
        response = client.get("/api/v1/admin/stats", headers=organizer_headers)

        assert response.status_code == 403
        assert response.json()["detail"] == "Admin access required"

    def test_stats_require_auth(self, client):
        response = client.get("/api/v1/admin/stats")

        assert response.status_code in (401, 403)


class TestVerifications:

    def test_list_pending(self, client, db_session, worker, other_worker, admin_headers):
        mark_pending(db_session, worker)

        response = client.get("/api/v1/admin/verifications", headers=admin_headers)

        assert [p["id"] for p in response.json()] == [str(worker.id)]

    def test_verify(self, client, db_session, worker, admin_headers):
        mark_pending(db_session, worker)

        response = client.post(
            f"/api/v1/admin/users/{worker.id}/verification",
            json={"status": "verified"},
            headers=admin_headers,
        )

        assert response.status_code == 200
        assert response.json()["verification_status"] == "verified"
        assert client.get("/api/v1/admin/verifications", headers=admin_headers).json() == []

    def test_pending_is_not_a_decision(self, client, db_session, worker, admin_headers):
        mark_pending(db_session, worker)

        response = client.post(
            f"/api/v1/admin/users/{worker.id}/verification",
            json={"status": "pending"},
            headers=admin_headers,
        )

        assert response.status_code == 400

    def test_unknown_user(self, client, admin_headers):
        response = client.post(
            f"/api/v1/admin/users/{uuid.uuid4()}/verification",
            json={"status": "rejected"},
            headers=admin_headers,
        )

        assert response.status_code == 404


class TestUserManagement:

    def test_list_users_with_roles(self, client, worker, organizer, admin, admin_headers):
        response = client.get("/api/v1/admin/users", headers=admin_headers)

        assert response.status_code == 200
        roles = {u["id"]: set(u["roles"]) for u in response.json()}
        assert roles[str(worker.id)] == {"user"}
        assert roles[str(organizer.id)] == {"user", "organizer"}
        assert roles[str(admin.id)] == {"user", "admin"}

    def test_change_role(self, client, worker, worker_headers, admin_headers):
        response = client.put(
            f"/api/v1/admin/users/{worker.id}/role",
            json={"role": "organizer"},
            headers=admin_headers,
        )

        assert response.status_code == 200
        assert response.json()["role"] == "organizer"
        assert client.get("/api/v1/auth/me", headers=worker_headers).json()["role"] == "organizer"

    def test_demote_replaces_roles(self, client, organizer, admin_headers):
        response = client.put(
            f"/api/v1/admin/users/{organizer.id}/role",
            json={"role": "user"},
            headers=admin_headers,
        )

        assert response.json()["role"] == "user"

    def test_invalid_role(self, client, worker, admin_headers):
        response = client.put(
            f"/api/v1/admin/users/{worker.id}/role",
            json={"role": "superuser"},
            headers=admin_headers,
        )

        assert response.status_code == 422

    def test_change_role_unknown_user(self, client, admin_headers):
        response = client.put(
            f"/api/v1/admin/users/{uuid.uuid4()}/role",
            json={"role": "organizer"},
            headers=admin_headers,
        )

        assert response.status_code == 404
