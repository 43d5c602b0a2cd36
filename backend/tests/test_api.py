"""
End-to-end HTTP tests through the FastAPI app and a SQLite database
"""
import re
from uuid import uuid4

import pytest

from application.services.auth.impl import AuthService
from infrastructure.persistence.repositories.user import SQLAlchemyUserRepository
from infrastructure.security.jwt_service import JwtService
from infrastructure.security.password_hasher import BcryptPasswordHasher


API = "/api/v1"

JOB_BODY = {
    "title": "Senior Backend Engineer",
    "description": "Build and run our API platform.",
    "job_type": "Full-time",
    "experience_level": "Senior",
    "category": "IT",
    "location": {"city": "Tel Aviv", "is_remote": True},
    "salary": {"min_salary": 30000, "max_salary": 40000, "currency": "ILS"},
    "required_skills": ["Python", "PostgreSQL"],
}


async def register(client, email, user_type="job_seeker"):
    response = await client.post(
        f"{API}/auth/register",
        json={
            "email": email,
            "password": "s3cret!",
            "first_name": "Dana",
            "last_name": "Levi",
            "user_type": user_type,
        },
    )
    assert response.status_code == 201, response.text
    return {"Authorization": f"Bearer {response.json()['data']['token']}"}


async def post_job(client, headers, **overrides):
    response = await client.post(f"{API}/jobs", json={**JOB_BODY, **overrides}, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["data"]


async def create_company(client, headers, name="Acme Labs"):
    response = await client.post(
        f"{API}/companies",
        json={"name": name, "description": "We make things", "email": "jobs@acme.example"},
        headers=headers,
    )
    assert response.status_code == 201, response.text
    return response.json()["data"]


async def login_admin(client, session_factory):
    """Administrators are only created on the server side"""
    async with session_factory() as session:
        auth_service = AuthService(SQLAlchemyUserRepository(session), BcryptPasswordHasher(rounds=4), JwtService())
        await auth_service.ensure_admin("admin@example.com", "adm1n-pass")
        await session.commit()
    response = await client.post(f"{API}/auth/login", json={"email": "admin@example.com", "password": "adm1n-pass"})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['data']['token']}"}


def emailed_token(email_service, path):
    _, _, body = email_service.send.await_args.args
    return re.search(rf"/{path}/([^\"]+)", body).group(1)


class TestAuthApi:
    @pytest.mark.asyncio
    async def test_register_login_and_me(self, client):
        await register(client, "dana@example.com")

        login = await client.post(f"{API}/auth/login", json={"email": "dana@example.com", "password": "s3cret!"})
        assert login.status_code == 200
        body = login.json()
        assert body["success"] is True
        assert body["data"]["token_type"] == "bearer"

        me = await client.get(
            f"{API}/auth/me", headers={"Authorization": f"Bearer {body['data']['token']}"}
        )
        assert me.json()["data"]["email"] == "dana@example.com"
        assert me.json()["data"]["full_name"] == "Dana Levi"

    @pytest.mark.asyncio
    async def test_wrong_password(self, client):
        await register(client, "dana@example.com")

        response = await client.post(f"{API}/auth/login", json={"email": "dana@example.com", "password": "nope!!"})

        assert response.status_code == 401
        assert response.json() == {"success": False, "message": "Invalid email or password"}

    @pytest.mark.asyncio
    async def test_duplicate_registration(self, client):
        await register(client, "dana@example.com")

        response = await client.post(
            f"{API}/auth/register",
            json={"email": "dana@example.com", "password": "s3cret!", "first_name": "D", "last_name": "L"},
        )

        assert response.status_code == 409
        assert response.json()["success"] is False

    @pytest.mark.asyncio
    async def test_validation_errors_are_400(self, client):
        response = await client.post(
            f"{API}/auth/register",
            json={"email": "not-an-email", "password": "123", "first_name": "D", "last_name": "L",
                  "user_type": "admin"},
        )

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["message"] == "Validation failed"
        assert {error["field"] for error in body["errors"]} == {"email", "password", "user_type"}

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "headers, message",
        [
            ({}, "Missing authorization header"),
            ({"Authorization": "Token abc"}, "Invalid authorization header format"),
            ({"Authorization": "Bearer not-a-jwt"}, "Invalid or expired token"),
        ],
    )
    async def test_unauthenticated(self, client, headers, message):
        response = await client.get(f"{API}/auth/me", headers=headers)

        assert response.status_code == 401
        assert response.json() == {"success": False, "message": message}


class TestJobsApi:
    @pytest.mark.asyncio
    async def test_only_employers_post_jobs(self, client):
        seeker = await register(client, "seeker@example.com")

        response = await client.post(f"{API}/jobs", json=JOB_BODY, headers=seeker)

        assert response.status_code == 403
        assert response.json()["success"] is False

    @pytest.mark.asyncio
    async def test_create_list_and_view(self, client):
        employer = await register(client, "boss@example.com", "employer")
        job = await post_job(client, employer)
        assert job["status"] == "published"
        assert job["location"]["city"] == "Tel Aviv"

        listing = await client.get(f"{API}/jobs", params={"search": "backend", "limit": 5})
        assert listing.status_code == 200
        assert [j["id"] for j in listing.json()["data"]] == [job["id"]]
        assert listing.json()["pagination"]["total"] == 1

        viewed = await client.get(f"{API}/jobs/{job['id']}")
        assert viewed.json()["data"]["views"] == 1

        own_view = await client.get(f"{API}/jobs/{job['id']}", headers=employer)
        assert own_view.json()["data"]["views"] == 1

    @pytest.mark.asyncio
    async def test_hidden_salary_only_for_poster(self, client):
        employer = await register(client, "boss@example.com", "employer")
        job = await post_job(client, employer, salary={"min_salary": 100, "max_salary": 200, "is_visible": False})

        public = await client.get(f"{API}/jobs/{job['id']}")
        private = await client.get(f"{API}/jobs/{job['id']}", headers=employer)

        assert public.json()["data"]["salary"] is None
        assert private.json()["data"]["salary"]["max_salary"] == 200

    @pytest.mark.asyncio
    async def test_invalid_job_body(self, client):
        employer = await register(client, "boss@example.com", "employer")
        body = {**JOB_BODY, "salary": {"min_salary": 500, "max_salary": 100}}
        del body["title"]

        response = await client.post(f"{API}/jobs", json=body, headers=employer)

        assert response.status_code == 400
        fields = {error["field"] for error in response.json()["errors"]}
        assert "title" in fields
        assert "salary" in fields

    @pytest.mark.asyncio
    async def test_draft_publish_close(self, client):
        employer = await register(client, "boss@example.com", "employer")
        job = await post_job(client, employer, status="draft")

        hidden = await client.get(f"{API}/jobs")
        assert hidden.json()["data"] == []

        published = await client.post(f"{API}/jobs/{job['id']}/publish", headers=employer)
        assert published.json()["data"]["status"] == "published"

        again = await client.post(f"{API}/jobs/{job['id']}/publish", headers=employer)
        assert again.status_code == 400

        closed = await client.post(f"{API}/jobs/{job['id']}/close", headers=employer)
        assert closed.json()["data"]["status"] == "closed"

    @pytest.mark.asyncio
    async def test_unknown_job(self, client):
        response = await client.get(f"{API}/jobs/{uuid4()}")

        assert response.status_code == 404
        assert response.json()["success"] is False


class TestApplicationFlowApi:
    @pytest.mark.asyncio
    async def test_apply_then_accept_closes_job(self, client, email_service):
        employer = await register(client, "boss@example.com", "employer")
        company = await client.post(
            f"{API}/companies",
            json={"name": "Acme Labs", "description": "We make things", "email": "jobs@acme.example"},
            headers=employer,
        )
        assert company.status_code == 201, company.text
        job = await post_job(client, employer)
        assert job["company_id"] == company.json()["data"]["id"]

        seeker = await register(client, "seeker@example.com")
        applied = await client.post(
            f"{API}/applications",
            json={"job_id": job["id"], "cover_letter": "Hire me", "expected_salary": "35k"},
            headers=seeker,
        )
        assert applied.status_code == 201, applied.text
        application = applied.json()["data"]
        assert application["status"] == "pending"
        assert "internal_notes" not in application
        email_service.send.assert_awaited()

        duplicate = await client.post(f"{API}/applications", json={"job_id": job["id"]}, headers=seeker)
        assert duplicate.status_code == 409

        notifications = await client.get(f"{API}/notifications/count", headers=employer)
        assert notifications.json()["data"]["unread_count"] == 1

        accepted = await client.post(f"{API}/applications/{application['id']}/accept", headers=employer)
        assert accepted.status_code == 200, accepted.text
        assert accepted.json()["data"]["status"] == "accepted"

        closed_job = await client.get(f"{API}/jobs/{job['id']}", headers=employer)
        assert closed_job.json()["data"]["status"] == "closed"
        assert closed_job.json()["data"]["application_count"] == 1

        my_company = await client.get(f"{API}/companies/employer/my-company", headers=employer)
        assert my_company.json()["data"]["active_jobs_count"] == 0

        withdraw = await client.delete(f"{API}/applications/{application['id']}", headers=seeker)
        assert withdraw.status_code == 400

    @pytest.mark.asyncio
    async def test_accept_survives_email_outage(self, client, email_service):
        employer = await register(client, "boss@example.com", "employer")
        job = await post_job(client, employer)
        seeker = await register(client, "seeker@example.com")
        applied = await client.post(f"{API}/applications", json={"job_id": job["id"]}, headers=seeker)
        email_service.send.side_effect = OSError("smtp down")

        accepted = await client.post(f"{API}/applications/{applied.json()['data']['id']}/accept", headers=employer)

        assert accepted.status_code == 200
        closed_job = await client.get(f"{API}/jobs/{job['id']}", headers=employer)
        assert closed_job.json()["data"]["status"] == "closed"

    @pytest.mark.asyncio
    async def test_employers_cannot_apply(self, client):
        employer = await register(client, "boss@example.com", "employer")
        job = await post_job(client, employer)

        response = await client.post(f"{API}/applications", json={"job_id": job["id"]}, headers=employer)

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_internal_notes_hidden_from_applicant(self, client):
        employer = await register(client, "boss@example.com", "employer")
        job = await post_job(client, employer)
        seeker = await register(client, "seeker@example.com")
        applied = await client.post(f"{API}/applications", json={"job_id": job["id"]}, headers=seeker)
        application_id = applied.json()["data"]["id"]

        reviewed = await client.put(
            f"{API}/applications/{application_id}/status",
            json={"status": "reviewed", "internal_notes": "Strong SQL"},
            headers=employer,
        )
        rejected = await client.post(
            f"{API}/applications/{application_id}/reject", json={"reason": "Not a fit"}, headers=employer
        )
        seen_by_employer = await client.get(f"{API}/applications/{application_id}", headers=employer)
        seen_by_seeker = await client.get(f"{API}/applications/{application_id}", headers=seeker)

        assert reviewed.status_code == 200, reviewed.text
        assert rejected.json()["data"]["rejection_reason"] == "Not a fit"
        assert seen_by_employer.json()["data"]["internal_notes"] == "Strong SQL"
        assert seen_by_employer.json()["data"]["is_viewed"] is True
        assert seen_by_seeker.json()["data"]["status"] == "rejected"
        assert seen_by_seeker.json()["data"].get("internal_notes") is None


class TestSavedJobsAndReviewsApi:
    @pytest.mark.asyncio
    async def test_save_and_check(self, client):
        employer = await register(client, "boss@example.com", "employer")
        job = await post_job(client, employer)
        seeker = await register(client, "seeker@example.com")

        saved = await client.post(f"{API}/saved-jobs", json={"job_id": job["id"]}, headers=seeker)
        check = await client.get(f"{API}/saved-jobs/check/{job['id']}", headers=seeker)
        listing = await client.get(f"{API}/saved-jobs", headers=seeker)

        assert saved.status_code == 201, saved.text
        assert check.json()["data"]["is_saved"] is True
        assert len(listing.json()["data"]) == 1

    @pytest.mark.asyncio
    async def test_review_updates_company_rating(self, client):
        employer = await register(client, "boss@example.com", "employer")
        company = await client.post(
            f"{API}/companies",
            json={"name": "Acme Labs", "description": "We make things", "email": "jobs@acme.example"},
            headers=employer,
        )
        company_id = company.json()["data"]["id"]
        seeker = await register(client, "seeker@example.com")

        created = await client.post(
            f"{API}/reviews",
            json={"company_id": company_id, "rating": 4, "title": "Good place"},
            headers=seeker,
        )
        bad = await client.post(
            f"{API}/reviews",
            json={"company_id": company_id, "rating": 9, "title": "Again"},
            headers=await register(client, "other@example.com"),
        )
        stats = await client.get(f"{API}/reviews/company/{company_id}/stats")

        assert created.status_code == 201, created.text
        assert bad.status_code == 400
        assert stats.json()["data"]["average_rating"] == 4.0
        assert stats.json()["data"]["total_reviews"] == 1


class TestAccountApi:
    @pytest.mark.asyncio
    async def test_forgot_and_reset_password(self, client, email_service):
        await register(client, "dana@example.com")

        forgot = await client.post(f"{API}/auth/forgot-password", json={"email": "dana@example.com"})
        token = emailed_token(email_service, "reset-password")
        unknown = await client.post(f"{API}/auth/forgot-password", json={"email": "nobody@example.com"})
        reset = await client.post(f"{API}/auth/reset-password", json={"token": token, "new_password": "n3w-secret"})
        reused = await client.post(f"{API}/auth/reset-password", json={"token": token, "new_password": "other-pass"})
        login = await client.post(f"{API}/auth/login", json={"email": "dana@example.com", "password": "n3w-secret"})

        assert forgot.status_code == 200
        assert unknown.json()["message"] == forgot.json()["message"]
        assert reset.status_code == 200, reset.text
        assert reused.status_code == 400
        assert reused.json()["message"] == "token: Invalid or expired reset token"
        assert login.status_code == 200

    @pytest.mark.asyncio
    async def test_verify_email(self, client, email_service):
        headers = await register(client, "dana@example.com")
        token = emailed_token(email_service, "verify-email")

        before = await client.get(f"{API}/auth/me", headers=headers)
        verified = await client.post(f"{API}/auth/verify-email", json={"token": token})
        resend = await client.post(f"{API}/auth/resend-verification", json={"email": "dana@example.com"})

        assert before.json()["data"]["is_email_verified"] is False
        assert verified.status_code == 200, verified.text
        assert verified.json()["data"]["user"]["is_email_verified"] is True
        assert verified.json()["data"]["token"]
        assert resend.status_code == 400

    @pytest.mark.asyncio
    async def test_delete_account(self, client):
        headers = await register(client, "dana@example.com")

        deleted = await client.delete(f"{API}/auth/delete-account", headers=headers)
        me = await client.get(f"{API}/auth/me", headers=headers)
        login = await client.post(f"{API}/auth/login", json={"email": "dana@example.com", "password": "s3cret!"})

        assert deleted.status_code == 200
        assert deleted.json()["message"] == "Account deleted successfully"
        assert me.status_code == 401
        assert login.status_code == 401


class TestRateLimits:
    @pytest.mark.asyncio
    async def test_auth_attempts_share_one_budget(self, client):
        await register(client, "dana@example.com")

        statuses = []
        for _ in range(10):
            response = await client.post(f"{API}/auth/login", json={"email": "dana@example.com", "password": "wrong!"})
            statuses.append(response.status_code)

        assert statuses[:9] == [401] * 9
        assert statuses[9] == 429
        assert response.json() == {
            "success": False,
            "message": "Too many authentication attempts, please try again later.",
        }

    @pytest.mark.asyncio
    async def test_review_limit_per_day(self, client):
        employer = await register(client, "boss@example.com", "employer")
        company = await create_company(client, employer)
        seeker = await register(client, "seeker@example.com")
        body = {"company_id": company["id"], "rating": 4, "title": "Good place"}

        statuses = [(await client.post(f"{API}/reviews", json=body, headers=seeker)).status_code for _ in range(4)]

        assert statuses == [201, 409, 409, 429]


class TestApplicationStatusApi:
    async def applied(self, client):
        employer = await register(client, "boss@example.com", "employer")
        job = await post_job(client, employer)
        seeker = await register(client, "seeker@example.com")
        response = await client.post(f"{API}/applications", json={"job_id": job["id"]}, headers=seeker)
        assert response.status_code == 201, response.text
        return employer, seeker, job, response.json()["data"]

    @pytest.mark.asyncio
    async def test_check_applied(self, client):
        employer, seeker, job, _ = await self.applied(client)

        mine = await client.get(f"{API}/applications/check/{job['id']}", headers=seeker)
        theirs = await client.get(f"{API}/applications/check/{job['id']}", headers=employer)

        assert mine.json()["data"] == {"has_applied": True}
        assert theirs.json()["data"] == {"has_applied": False}

    @pytest.mark.asyncio
    async def test_accepting_by_status_closes_job(self, client):
        employer, _, job, application = await self.applied(client)

        accepted = await client.put(
            f"{API}/applications/{application['id']}/status", json={"status": "accepted"}, headers=employer
        )
        closed_job = await client.get(f"{API}/jobs/{job['id']}", headers=employer)

        assert accepted.status_code == 200, accepted.text
        assert accepted.json()["data"]["status"] == "accepted"
        assert closed_job.json()["data"]["status"] == "closed"

    @pytest.mark.asyncio
    async def test_employer_cannot_withdraw(self, client):
        employer, seeker, _, application = await self.applied(client)

        response = await client.put(
            f"{API}/applications/{application['id']}/status", json={"status": "withdrawn"}, headers=employer
        )
        seen = await client.get(f"{API}/applications/{application['id']}", headers=seeker)

        assert response.status_code == 400
        assert seen.json()["data"]["status"] == "pending"


class TestDashboardsApi:
    @pytest.mark.asyncio
    async def test_job_analytics(self, client):
        employer = await register(client, "boss@example.com", "employer")
        job = await post_job(client, employer)
        seeker = await register(client, "seeker@example.com")
        await client.post(f"{API}/applications", json={"job_id": job["id"]}, headers=seeker)

        analytics = await client.get(f"{API}/jobs/{job['id']}/analytics", headers=employer)
        refused = await client.get(f"{API}/jobs/{job['id']}/analytics", headers=seeker)

        assert analytics.status_code == 200, analytics.text
        data = analytics.json()["data"]
        assert data["total_applications"] == 1
        assert data["by_status"]["pending"] == 1
        assert sum(day["count"] for day in data["applications_over_time"]) == 1
        assert refused.status_code == 403

    @pytest.mark.asyncio
    async def test_user_dashboards(self, client):
        employer = await register(client, "boss@example.com", "employer")
        job = await post_job(client, employer)
        seeker = await register(client, "seeker@example.com")
        await client.post(f"{API}/applications", json={"job_id": job["id"]}, headers=seeker)

        seeker_view = await client.get(f"{API}/users/dashboard", headers=seeker)
        employer_view = await client.get(f"{API}/users/dashboard", headers=employer)

        assert seeker_view.json()["data"]["stats"] == {"applications_count": 1, "saved_jobs_count": 0}
        assert employer_view.json()["data"]["stats"]["applications_count"] == 1
        assert [j["id"] for j in employer_view.json()["data"]["jobs"]] == [job["id"]]

    @pytest.mark.asyncio
    async def test_company_dashboard_and_verification(self, client, session_factory):
        employer = await register(client, "boss@example.com", "employer")
        company = await create_company(client, employer)
        await post_job(client, employer)
        admin = await login_admin(client, session_factory)

        dashboard = await client.get(f"{API}/companies/{company['slug']}/dashboard", headers=employer)
        requested = await client.post(f"{API}/companies/{company['id']}/verify", headers=employer)
        self_approved = await client.post(f"{API}/companies/{company['id']}/approve-verification", headers=employer)
        approved = await client.post(f"{API}/companies/{company['id']}/approve-verification", headers=admin)
        again = await client.post(f"{API}/companies/{company['id']}/verify", headers=employer)

        assert dashboard.status_code == 200, dashboard.text
        assert dashboard.json()["data"]["stats"]["total_jobs"] == 1
        assert requested.json()["data"]["verification_requested_at"] is not None
        assert self_approved.status_code == 403
        assert approved.json()["data"]["is_verified"] is True
        assert again.status_code == 400

    @pytest.mark.asyncio
    async def test_job_seeker_directory(self, client):
        employer = await register(client, "boss@example.com", "employer")
        await register(client, "seeker@example.com")

        anonymous = await client.get(f"{API}/users/job-seekers")
        for_employer = await client.get(f"{API}/users/job-seekers", headers=employer)

        assert [entry.get("email") for entry in anonymous.json()["data"]] == [None]
        assert [entry["email"] for entry in for_employer.json()["data"]] == ["seeker@example.com"]


class TestAdministrationApi:
    @pytest.mark.asyncio
    async def test_admin_notifications(self, client, session_factory):
        seeker = await register(client, "seeker@example.com")
        me = await client.get(f"{API}/auth/me", headers=seeker)
        user_id = me.json()["data"]["id"]
        admin = await login_admin(client, session_factory)

        single = await client.post(
            f"{API}/notifications", json={"user_id": user_id, "message": "Maintenance tonight"}, headers=admin
        )
        bulk = await client.post(
            f"{API}/notifications/bulk",
            json={"notifications": [
                {"user_id": user_id, "message": "First"},
                {"user_id": user_id, "type": "job_match", "message": "Second"},
            ]},
            headers=admin,
        )
        empty = await client.post(f"{API}/notifications/bulk", json={"notifications": []}, headers=admin)
        refused = await client.post(
            f"{API}/notifications", json={"user_id": user_id, "message": "Hi"}, headers=seeker
        )
        count = await client.get(f"{API}/notifications/count", headers=seeker)

        assert single.status_code == 201, single.text
        assert single.json()["data"]["type"] == "system"
        assert bulk.status_code == 201, bulk.text
        assert bulk.json()["message"] == "2 notifications created successfully"
        assert empty.status_code == 400
        assert refused.status_code == 403
        assert count.json()["data"] == {"unread_count": 3, "total_count": 3}

    @pytest.mark.asyncio
    async def test_review_feedback_and_moderation(self, client, session_factory):
        employer = await register(client, "boss@example.com", "employer")
        company = await create_company(client, employer)
        author = await register(client, "author@example.com")
        created = await client.post(
            f"{API}/reviews", json={"company_id": company["id"], "rating": 1, "title": "Awful"}, headers=author
        )
        review_id = created.json()["data"]["id"]
        readers = [await register(client, f"reader{n}@example.com") for n in range(3)]

        liked = await client.post(f"{API}/reviews/{review_id}/like", headers=readers[0])
        own_report = await client.post(f"{API}/reviews/{review_id}/report", json={"reason": "spam"}, headers=author)
        for reader in readers:
            reported = await client.post(
                f"{API}/reviews/{review_id}/report", json={"reason": "spam"}, headers=reader
            )
            assert reported.status_code == 200, reported.text
        hidden_stats = await client.get(f"{API}/reviews/company/{company['id']}/stats")

        admin = await login_admin(client, session_factory)
        refused = await client.get(f"{API}/reviews/flagged", headers=employer)
        flagged = await client.get(f"{API}/reviews/flagged", headers=admin)
        restored = await client.put(f"{API}/reviews/{review_id}/moderate", json={"approve": True}, headers=admin)
        stats = await client.get(f"{API}/reviews/company/{company['id']}/stats")

        assert liked.json()["message"] == "Review liked successfully"
        assert liked.json()["data"] == {"liked": True, "likes_count": 1}
        assert own_report.status_code == 400
        assert hidden_stats.json()["data"]["total_reviews"] == 0
        assert refused.status_code == 403
        assert [r["id"] for r in flagged.json()["data"]] == [review_id]
        assert restored.json()["data"]["is_approved"] is True
        assert restored.json()["data"]["is_flagged"] is False
        assert stats.json()["data"]["total_reviews"] == 1
