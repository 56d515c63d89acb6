"""Dashboard aggregation and health endpoint tests."""

from organiser.schemas.interviews import MarkInterviewResultRequest

API = "/api/v1"


class TestDashboard:

    def test_admin_counts(self, client, admin_headers, schedule, service):
        first = schedule()
        schedule()
        service.cancel_interview(first.id)

        body = client.get(f"{API}/dashboard/admin", headers=admin_headers).json()

        assert body["totalInterviews"] == 2
        assert body["totalCandidates"] == 1
        assert body["totalInterviewers"] == 1
        assert body["totalOrganisations"] == 1
        assert body["interviewsByStatus"] == {"CANCELLED": 1, "SCHEDULED": 1}

    def test_admin_only(self, client, recruiter_headers):
        assert client.get(f"{API}/dashboard/admin", headers=recruiter_headers).status_code == 403

    def test_interviewer_workload(self, client, own_interviewer_headers, schedule, service, interviewer):
        done = schedule()
        schedule()
        service.mark_result(done.id, MarkInterviewResultRequest(result="SELECTED"))
        service.request_feedback(done.id)

        body = client.get(
            f"{API}/dashboard/interviewer/{interviewer.id}", headers=own_interviewer_headers
        ).json()

        assert body["totalInterviews"] == 2
        assert body["assignedInterviews"] == 2
        assert body["completedInterviews"] == 1
        assert body["pendingFeedback"] == 1
        assert len(body["upcomingInterviews"]) == 1

    def test_recruiter_dashboard(self, client, recruiter_headers, schedule, organisation):
        schedule()

        body = client.get(
            f"{API}/dashboard/recruiter/{organisation.id}", headers=recruiter_headers
        ).json()

        assert body["totalCandidates"] == 1
        assert body["candidatesByStatus"] == {"APPLIED": 1}
        assert body["totalInterviews"] == 1

    def test_candidate_dashboard(self, client, own_candidate_headers, schedule, candidate):
        schedule(round=1)
        schedule(round=2)

        body = client.get(
            f"{API}/dashboard/candidate/{candidate.id}", headers=own_candidate_headers
        ).json()

        assert body["currentRound"] == 2
        assert body["status"] == "APPLIED"
        assert body["totalInterviews"] == 2

    def test_other_peoples_dashboards_are_forbidden(
        self, client, candidate_headers, interviewer_headers, candidate, interviewer
    ):
        assert client.get(
            f"{API}/dashboard/candidate/{candidate.id}", headers=candidate_headers
        ).status_code == 403
        assert client.get(
            f"{API}/dashboard/interviewer/{interviewer.id}", headers=interviewer_headers
        ).status_code == 403

    def test_unknown_candidate(self, client, admin_headers):
        assert client.get(f"{API}/dashboard/candidate/9999", headers=admin_headers).status_code == 404


class TestHealth:

    def test_health_is_public(self, client):
        response = client.get(f"{API}/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert response.json()["database"] == "connected"

    def test_probes(self, client):
        assert client.get(f"{API}/health/ready").json() == {"ready": True}
        assert client.get(f"{API}/health/live").json() == {"alive": True}

    def test_root_endpoints(self, client):
        assert client.get("/health").json()["status"] == "ok"
        assert client.get("/").json()["name"] == "Interview Organiser"

    def test_detailed_reports_lifecycle_settings(self, client):
        components = client.get(f"{API}/health/detailed").json()["components"]
        assert components["lifecycle"]["enforce_status_transitions"] is True


class TestRequestLogging:

    def test_request_id_is_generated(self, client):
        response = client.get("/health")
        assert len(response.headers["X-Request-ID"]) == 8

    def test_upstream_request_id_is_kept(self, client):
        response = client.get("/health", headers={"X-Request-ID": "lb-1234.abc"})
        assert response.headers["X-Request-ID"] == "lb-1234.abc"

    def test_malformed_request_id_is_replaced(self, client):
        response = client.get("/health", headers={"X-Request-ID": "bad id; drop table"})
        assert response.headers["X-Request-ID"] != "bad id; drop table"
        assert len(response.headers["X-Request-ID"]) == 8
