"""HTTP tests for /api/v1/interviews."""

from datetime import timedelta

import pytest

from organiser.models import Interviewer

BASE = "/api/v1/interviews"


@pytest.fixture
def payload(candidate, interviewer, slot):
    return {
        "candidateId": candidate.id,
        "interviewerIds": [interviewer.id],
        "scheduledAt": slot.isoformat() + "Z",
        "interviewType": "VIDEO",
        "meetingLink": "https://meet.test/room",
    }


@pytest.fixture
def created(client, admin_headers, payload):
    response = client.post(BASE, json=payload, headers=admin_headers)
    assert response.status_code == 201
    return response.json()


class TestScheduleEndpoint:

    def test_schedule_returns_camel_case_interview(self, created, candidate, interviewer, slot):
        assert created["status"] == "SCHEDULED"
        assert created["round"] == 1
        assert created["duration"] == 60
        assert created["candidate"]["id"] == candidate.id
        assert created["interviewers"][0]["id"] == interviewer.id
        assert created["candidateConfirmed"] is False
        assert created["nextRoundInterviewId"] is None
        assert created["version"] == 1
        assert created["scheduledAt"].startswith(slot.isoformat()[:16])

    def test_bumps_interviewer_counter(self, created, db_session, interviewer):
        db_session.expire_all()
        assert db_session.get(Interviewer, interviewer.id).total_interviews == 1

    def test_unknown_interviewer_is_404(self, client, admin_headers, payload):
        payload["interviewerIds"] = [9999]

        response = client.post(BASE, json=payload, headers=admin_headers)

        assert response.status_code == 404
        error = response.json()["error"]
        assert error["code"] == "NOT_FOUND"
        assert error["details"] == {"resource": "Interviewer", "id": 9999}

    def test_empty_interviewer_list_is_validation_error(self, client, admin_headers, payload):
        payload["interviewerIds"] = []

        response = client.post(BASE, json=payload, headers=admin_headers)

        assert response.status_code == 422
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    def test_unknown_interview_type_is_validation_error(self, client, admin_headers, payload):
        payload["interviewType"] = "TELEPATHY"
        response = client.post(BASE, json=payload, headers=admin_headers)
        assert response.status_code == 422

    def test_requires_token(self, client, payload):
        response = client.post(BASE, json=payload)

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "UNAUTHORIZED"

    def test_rejects_invalid_token(self, client, payload):
        response = client.post(BASE, json=payload, headers={"Authorization": "Bearer nope"})
        assert response.status_code == 401

    def test_candidate_role_cannot_schedule(self, client, candidate_headers, payload):
        response = client.post(BASE, json=payload, headers=candidate_headers)

        assert response.status_code == 403
        assert response.json()["error"]["code"] == "FORBIDDEN"

    def test_recruiter_can_schedule(self, client, recruiter_headers, payload):
        response = client.post(BASE, json=payload, headers=recruiter_headers)
        assert response.status_code == 201


class TestLifecycleEndpoints:

    def test_get_and_missing(self, client, admin_headers, created):
        assert client.get(f"{BASE}/{created['id']}", headers=admin_headers).json()["id"] == created["id"]

        missing = client.get(f"{BASE}/9999", headers=admin_headers)
        assert missing.status_code == 404
        assert missing.json()["error"]["message"] == "Interview not found: 9999"

    def test_update_details(self, client, admin_headers, created):
        response = client.put(
            f"{BASE}/{created['id']}",
            json={"duration": 90, "notes": "Panel extended"},
            headers=admin_headers,
        )

        body = response.json()
        assert response.status_code == 200
        assert body["duration"] == 90
        assert body["status"] == "SCHEDULED"
        assert body["notes"].endswith("Panel extended")

    def test_status_change_and_illegal_transition(self, client, admin_headers, created):
        url = f"{BASE}/{created['id']}/status"
        cancelled = client.patch(url, json={"status": "CANCELLED", "reason": "Role filled"}, headers=admin_headers)
        assert cancelled.status_code == 200
        assert "Role filled" in cancelled.json()["notes"]

        revived = client.patch(url, json={"status": "SCHEDULED"}, headers=admin_headers)
        assert revived.status_code == 409
        assert revived.json()["error"]["code"] == "CONFLICT"

    def test_stale_version_is_conflict(self, client, admin_headers, created):
        response = client.patch(
            f"{BASE}/{created['id']}/status",
            json={"status": "IN_PROGRESS", "expectedVersion": created["version"] + 5},
            headers=admin_headers,
        )
        assert response.status_code == 409

    def test_candidate_can_confirm(self, client, own_candidate_headers, created, notifier):
        response = client.post(
            f"{BASE}/{created['id']}/confirm",
            json={"confirmed": True},
            headers=own_candidate_headers,
        )

        assert response.status_code == 200
        assert response.json()["candidateConfirmed"] is True
        assert response.json()["candidateConfirmedAt"] is not None
        assert notifier.events() == ["interview_confirmed"]

    def test_candidate_cannot_confirm_someone_elses_interview(
        self, client, candidate_headers, admin_headers, created, notifier
    ):
        response = client.post(
            f"{BASE}/{created['id']}/confirm",
            json={"confirmed": False},
            headers=candidate_headers,
        )

        assert response.status_code == 403
        assert response.json()["error"]["code"] == "FORBIDDEN"
        unchanged = client.get(f"{BASE}/{created['id']}", headers=admin_headers).json()
        assert unchanged["candidateConfirmedAt"] is None
        assert unchanged["version"] == created["version"]
        assert notifier.sent == []

    def test_bogus_result_is_invalid_argument(self, client, admin_headers, created):
        response = client.post(
            f"{BASE}/{created['id']}/result",
            json={"result": "BOGUS"},
            headers=admin_headers,
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_ARGUMENT"
        assert client.get(f"{BASE}/{created['id']}", headers=admin_headers).json()["status"] == "SCHEDULED"

    def test_result_then_next_round(self, client, admin_headers, created, interviewer, slot):
        result = client.post(
            f"{BASE}/{created['id']}/result",
            json={"result": "NEXT_ROUND", "comments": "Good fundamentals"},
            headers=admin_headers,
        )
        assert result.json()["status"] == "COMPLETED"
        assert result.json()["result"] == "NEXT_ROUND"

        next_round = client.post(
            f"{BASE}/{created['id']}/next-round",
            json={
                "scheduledAt": (slot + timedelta(days=2)).isoformat(),
                "interviewType": "SYSTEM_DESIGN",
                "interviewerIds": [interviewer.id],
            },
            headers=admin_headers,
        )
        assert next_round.status_code == 201
        assert next_round.json()["round"] == 2

        previous = client.get(f"{BASE}/{created['id']}", headers=admin_headers).json()
        assert previous["nextRoundInterviewId"] == next_round.json()["id"]

    def test_request_feedback(self, client, admin_headers, created, notifier):
        response = client.post(f"{BASE}/{created['id']}/request-feedback", headers=admin_headers)

        assert response.json()["feedbackRequested"] is True
        assert notifier.events() == ["feedback_requested", "candidate_feedback_requested"]

    def test_cancel_twice(self, client, admin_headers, created, notifier):
        for _ in range(2):
            response = client.delete(f"{BASE}/{created['id']}", headers=admin_headers)
            assert response.status_code == 200
            assert response.json()["status"] == "CANCELLED"

        assert len(notifier.events("interview_cancelled")) == 2


class TestListEndpoint:

    def test_list_with_filters_and_meta(self, client, admin_headers, payload, candidate_factory):
        client.post(BASE, json=payload, headers=admin_headers)
        other = dict(payload, candidateId=candidate_factory().id)
        client.post(BASE, json=other, headers=admin_headers)

        everything = client.get(BASE, headers=admin_headers).json()
        assert everything["meta"] == {"page": 1, "perPage": 20, "total": 2, "totalPages": 1}

        filtered = client.get(
            BASE, params={"candidate_id": payload["candidateId"]}, headers=admin_headers
        ).json()
        assert filtered["meta"]["total"] == 1
        assert filtered["data"][0]["candidateId"] == payload["candidateId"]
        assert filtered["data"][0]["interviewerIds"] == payload["interviewerIds"]

    def test_interviewer_can_list(self, client, interviewer_headers):
        assert client.get(BASE, headers=interviewer_headers).status_code == 200

    def test_per_page_is_capped(self, client, admin_headers):
        response = client.get(BASE, params={"per_page": 500}, headers=admin_headers)
        assert response.status_code == 422
