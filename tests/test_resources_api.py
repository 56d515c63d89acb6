"""HTTP tests for candidates, interviewers, organisations and feedback."""

import pytest
from sqlalchemy import event

from organiser.models import Feedback, Organisation, VerificationStatus
from organiser.models.base import utcnow

API = "/api/v1"


# ============================================================================
# CANDIDATES
# ============================================================================

class TestCandidates:

    @pytest.fixture
    def new_candidate(self):
        return {
            "firstName": "Ada",
            "lastName": "Lovelace",
            "email": "Ada@Example.test",
            "position": "Data Engineer",
            "skills": ["python", "spark"],
            "experience": 4.5,
        }

    def test_create_get_update(self, client, admin_headers, new_candidate):
        created = client.post(f"{API}/candidates", json=new_candidate, headers=admin_headers)
        assert created.status_code == 201
        body = created.json()
        assert body["email"] == "ada@example.test"
        assert body["status"] == "APPLIED"

        updated = client.put(
            f"{API}/candidates/{body['id']}",
            json={"status": "SCREENING", "skills": None},
            headers=admin_headers,
        )
        assert updated.json()["status"] == "SCREENING"
        assert updated.json()["skills"] == ["python", "spark"]

    def test_duplicate_email(self, client, admin_headers, new_candidate):
        client.post(f"{API}/candidates", json=new_candidate, headers=admin_headers)
        response = client.post(f"{API}/candidates", json=new_candidate, headers=admin_headers)
        assert response.status_code == 409

    def test_notifies_recruiter(self, client, admin_headers, new_candidate, organisation, notifier):
        new_candidate["recruiterId"] = organisation.id
        client.post(f"{API}/candidates", json=new_candidate, headers=admin_headers)
        assert notifier.events() == ["new_candidate"]

    def test_unknown_organisation(self, client, admin_headers, new_candidate):
        new_candidate["recruiterId"] = 9999
        response = client.post(f"{API}/candidates", json=new_candidate, headers=admin_headers)
        assert response.status_code == 404

    def test_link_to_login_account(self, client, admin_headers, new_candidate, user_factory):
        account = user_factory(["CANDIDATE"])

        new_candidate["userId"] = 9999
        assert client.post(
            f"{API}/candidates", json=new_candidate, headers=admin_headers
        ).status_code == 404

        new_candidate["userId"] = account.id
        created = client.post(f"{API}/candidates", json=new_candidate, headers=admin_headers)
        assert created.status_code == 201
        assert created.json()["userId"] == account.id

    def test_search_and_status_filter(self, client, admin_headers, candidate_factory):
        candidate_factory(first_name="Grace", last_name="Hopper")
        candidate_factory(first_name="Alan", last_name="Turing")

        response = client.get(f"{API}/candidates", params={"search": "hop"}, headers=admin_headers)

        names = [c["lastName"] for c in response.json()["data"]]
        assert names == ["Hopper"]

        applied = client.get(f"{API}/candidates", params={"status": "APPLIED"}, headers=admin_headers)
        assert applied.json()["meta"]["total"] == 2

    def test_delete_with_interviews_conflicts(self, client, admin_headers, schedule, candidate):
        schedule()
        response = client.delete(f"{API}/candidates/{candidate.id}", headers=admin_headers)
        assert response.status_code == 409

    def test_delete(self, client, admin_headers, candidate_factory):
        candidate = candidate_factory()
        assert client.delete(f"{API}/candidates/{candidate.id}", headers=admin_headers).status_code == 204
        assert client.get(f"{API}/candidates/{candidate.id}", headers=admin_headers).status_code == 404

    def test_interviewer_role_cannot_read_candidates(self, client, interviewer_headers):
        assert client.get(f"{API}/candidates", headers=interviewer_headers).status_code == 403


# ============================================================================
# INTERVIEWERS
# ============================================================================

class TestInterviewers:

    def test_create_and_filter_by_expertise(self, client, admin_headers):
        client.post(
            f"{API}/interviewers",
            json={"name": "Linus", "email": "linus@example.test", "expertise": ["C", "Kernels"]},
            headers=admin_headers,
        )
        client.post(
            f"{API}/interviewers",
            json={"name": "Guido", "email": "guido@example.test", "expertise": ["Python"], "availability": False},
            headers=admin_headers,
        )

        python = client.get(f"{API}/interviewers", params={"expertise": "python"}, headers=admin_headers).json()
        assert [i["name"] for i in python["data"]] == ["Guido"]
        assert python["data"][0]["totalInterviews"] == 0

        available = client.get(f"{API}/interviewers", params={"available": True}, headers=admin_headers).json()
        assert [i["name"] for i in available["data"]] == ["Linus"]

    def test_delete_assigned_interviewer_conflicts(self, client, admin_headers, schedule, interviewer):
        schedule()
        response = client.delete(f"{API}/interviewers/{interviewer.id}", headers=admin_headers)
        assert response.status_code == 409


# ============================================================================
# ORGANISATIONS
# ============================================================================

class TestOrganisations:

    @pytest.fixture
    def pending(self, client, recruiter_headers):
        response = client.post(
            f"{API}/organisations",
            json={"name": "Globex", "contactEmail": "HR@globex.test", "city": "Springfield"},
            headers=recruiter_headers,
        )
        assert response.status_code == 201
        return response.json()

    def test_new_organisation_is_pending_and_inactive(self, pending, notifier):
        assert pending["verificationStatus"] == "PENDING"
        assert pending["isActive"] is False
        assert pending["contactEmail"] == "hr@globex.test"
        assert notifier.events() == ["new_recruiter"]

    def test_verify(self, client, admin_headers, pending, notifier):
        response = client.put(f"{API}/organisations/{pending['id']}/verify", headers=admin_headers)

        assert response.json()["verificationStatus"] == "VERIFIED"
        assert response.json()["isActive"] is True
        assert notifier.events("recruiter_verification")[0]["status"] == "VERIFIED"

    def test_reject_stores_reason(self, client, admin_headers, pending, db_session):
        response = client.put(
            f"{API}/organisations/{pending['id']}/reject",
            params={"reason": "Unverifiable registration"},
            headers=admin_headers,
        )

        assert response.json()["verificationStatus"] == "REJECTED"
        assert response.json()["rejectionReason"] == "Unverifiable registration"
        stored = db_session.get(Organisation, pending["id"])
        assert stored.verification_status == VerificationStatus.REJECTED
        assert stored.is_active is False

    def test_only_admin_verifies(self, client, recruiter_headers, pending):
        response = client.put(f"{API}/organisations/{pending['id']}/verify", headers=recruiter_headers)
        assert response.status_code == 403

    def test_duplicate_name(self, client, recruiter_headers, pending):
        response = client.post(
            f"{API}/organisations",
            json={"name": "Globex", "contactEmail": "other@globex.test"},
            headers=recruiter_headers,
        )
        assert response.status_code == 409

    def test_filter_by_verification_status(self, client, admin_headers, pending, organisation):
        response = client.get(
            f"{API}/organisations", params={"verification_status": "PENDING"}, headers=admin_headers
        )
        assert [o["name"] for o in response.json()["data"]] == ["Globex"]


# ============================================================================
# FEEDBACK
# ============================================================================

class TestFeedback:

    def test_submit_list_update(self, client, own_interviewer_headers, schedule, candidate):
        interview = schedule()

        created = client.post(
            f"{API}/feedback",
            json={"interviewId": interview.id, "rating": 4, "recommendation": "HIRE"},
            headers=own_interviewer_headers,
        )
        assert created.status_code == 201
        assert created.json()["submittedAt"] is not None

        listed = client.get(
            f"{API}/feedback", params={"candidate_id": candidate.id}, headers=own_interviewer_headers
        ).json()
        assert listed["meta"]["total"] == 1

        updated = client.put(
            f"{API}/feedback/{created.json()['id']}",
            json={"rating": 5, "comments": "Excellent"},
            headers=own_interviewer_headers,
        )
        assert updated.json()["rating"] == 5

    def test_unassigned_interviewer_cannot_write_feedback(
        self, client, interviewer_headers, admin_headers, schedule
    ):
        interview = schedule()

        submitted = client.post(
            f"{API}/feedback",
            json={"interviewId": interview.id, "rating": 1},
            headers=interviewer_headers,
        )
        assert submitted.status_code == 403

        created = client.post(
            f"{API}/feedback", json={"interviewId": interview.id, "rating": 4}, headers=admin_headers
        ).json()
        overwritten = client.put(
            f"{API}/feedback/{created['id']}",
            json={"rating": 1},
            headers=interviewer_headers,
        )
        assert overwritten.status_code == 403
        assert client.get(
            f"{API}/feedback/{created['id']}", headers=admin_headers
        ).json()["rating"] == 4

    def test_concurrent_duplicate_is_already_exists(
        self, client, admin_headers, schedule, session_factory
    ):
        interview = schedule()
        raced = {"done": False}

        def submit_first(session, flush_context, instances):
            if raced["done"] or not any(isinstance(o, Feedback) for o in session.new):
                return
            raced["done"] = True
            other = session_factory()
            other.add(Feedback(interview_id=interview.id, rating=2, submitted_at=utcnow()))
            other.commit()
            other.close()

        event.listen(session_factory, "before_flush", submit_first)
        try:
            response = client.post(
                f"{API}/feedback", json={"interviewId": interview.id, "rating": 3}, headers=admin_headers
            )
        finally:
            event.remove(session_factory, "before_flush", submit_first)

        assert raced["done"]
        assert response.status_code == 409
        assert response.json()["error"]["code"] == "ALREADY_EXISTS"

    def test_one_feedback_per_interview(self, client, admin_headers, schedule):
        interview = schedule()
        body = {"interviewId": interview.id, "rating": 3}

        client.post(f"{API}/feedback", json=body, headers=admin_headers)
        response = client.post(f"{API}/feedback", json=body, headers=admin_headers)

        assert response.status_code == 409

    def test_unknown_interview(self, client, admin_headers):
        response = client.post(f"{API}/feedback", json={"interviewId": 9999, "rating": 3}, headers=admin_headers)
        assert response.status_code == 404

    def test_rating_out_of_range(self, client, admin_headers, schedule):
        interview = schedule()
        response = client.post(
            f"{API}/feedback", json={"interviewId": interview.id, "rating": 6}, headers=admin_headers
        )
        assert response.status_code == 422
