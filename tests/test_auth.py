"""Registration, login, refresh and access control tests."""

import pytest

from organiser.models import RefreshToken, User
from organiser.services.auth_service import hash_password, verify_password
from organiser.services.token import decode_token

AUTH = "/api/v1/auth"


@pytest.fixture
def registration():
    return {
        "email": "Ian.Interviewer@Example.test",
        "password": "correct-horse",
        "firstName": "Ian",
        "lastName": "Interviewer",
        "roles": ["INTERVIEWER", "CANDIDATE"],
    }


@pytest.fixture
def registered(client, registration):
    response = client.post(f"{AUTH}/register", json=registration)
    assert response.status_code == 201
    return response.json()


@pytest.fixture
def tokens(client, registered, registration):
    response = client.post(
        f"{AUTH}/login",
        json={"email": registration["email"], "password": registration["password"]},
    )
    assert response.status_code == 200
    return response.json()


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


class TestPasswordHashing:

    def test_hash_round_trip(self):
        hashed = hash_password("s3cret-pass")
        assert hashed != "s3cret-pass"
        assert verify_password("s3cret-pass", hashed)
        assert not verify_password("wrong", hashed)


class TestRegister:

    def test_register_normalises_email_and_hides_hash(self, registered):
        assert registered["email"] == "ian.interviewer@example.test"
        assert registered["roles"] == ["INTERVIEWER", "CANDIDATE"]
        assert "passwordHash" not in registered

    def test_duplicate_email(self, client, registered, registration):
        response = client.post(f"{AUTH}/register", json=registration)

        assert response.status_code == 409
        assert response.json()["error"]["code"] == "ALREADY_EXISTS"

    @pytest.mark.parametrize("roles", [
        ["ADMIN"],
        ["ORG_ADMIN"],
        ["RECRUITER"],
        ["CANDIDATE", "RECRUITER"],
    ])
    def test_staff_roles_cannot_be_self_assigned(self, client, db_session, registration, roles):
        registration["roles"] = roles

        response = client.post(f"{AUTH}/register", json=registration)

        assert response.status_code == 403
        assert response.json()["error"]["code"] == "FORBIDDEN"
        assert db_session.query(User).count() == 0

    def test_self_registered_user_cannot_manage_interviews(
        self, client, tokens, schedule, candidate, interviewer, slot
    ):
        interview = schedule()
        headers = bearer(tokens["accessToken"])
        body = {
            "candidateId": candidate.id,
            "interviewerIds": [interviewer.id],
            "scheduledAt": slot.isoformat(),
            "interviewType": "VIDEO",
        }

        assert client.post("/api/v1/interviews", json=body, headers=headers).status_code == 403
        assert client.delete(f"/api/v1/interviews/{interview.id}", headers=headers).status_code == 403
        assert client.post(
            f"/api/v1/interviews/{interview.id}/result",
            json={"result": "SELECTED"},
            headers=headers,
        ).status_code == 403

    def test_short_password(self, client, registration):
        registration["password"] = "short"
        assert client.post(f"{AUTH}/register", json=registration).status_code == 422


class TestLogin:

    def test_login_issues_token_pair(self, tokens, registered):
        claims = decode_token(tokens["accessToken"])

        assert claims["sub"] == str(registered["id"])
        assert claims["roles"] == ["INTERVIEWER", "CANDIDATE"]
        assert tokens["tokenType"] == "Bearer"
        assert tokens["expiresIn"] > 0

    def test_wrong_password(self, client, registered, registration):
        response = client.post(
            f"{AUTH}/login",
            json={"email": registration["email"], "password": "not-the-password"},
        )
        assert response.status_code == 401

    def test_unknown_email(self, client):
        response = client.post(f"{AUTH}/login", json={"email": "ghost@example.test", "password": "whatever1"})
        assert response.status_code == 401

    def test_me(self, client, tokens, registered):
        response = client.get(f"{AUTH}/me", headers=bearer(tokens["accessToken"]))

        assert response.status_code == 200
        assert response.json()["id"] == registered["id"]

    def test_me_requires_token(self, client):
        assert client.get(f"{AUTH}/me").status_code == 401


class TestRefreshAndLogout:

    def test_refresh_rotates_token(self, client, tokens):
        response = client.post(f"{AUTH}/refresh", json={"refreshToken": tokens["refreshToken"]})

        assert response.status_code == 200
        assert response.json()["refreshToken"] != tokens["refreshToken"]

        reused = client.post(f"{AUTH}/refresh", json={"refreshToken": tokens["refreshToken"]})
        assert reused.status_code == 401

    def test_logout_revokes_refresh_tokens(self, client, tokens, db_session, registered):
        response = client.post(f"{AUTH}/logout", headers=bearer(tokens["accessToken"]))

        assert response.status_code == 200
        assert db_session.query(RefreshToken).filter_by(user_id=registered["id"]).count() == 0
        assert client.post(
            f"{AUTH}/refresh", json={"refreshToken": tokens["refreshToken"]}
        ).status_code == 401


class TestUsersEndpoint:

    def test_admin_lists_users_by_role(self, client, registered, admin_headers):
        response = client.get("/api/v1/users", params={"role": "INTERVIEWER"}, headers=admin_headers)

        assert response.status_code == 200
        assert [u["id"] for u in response.json()["data"]] == [registered["id"]]

    def test_role_filter_matches_whole_role_names(self, client, user_factory, admin_headers):
        org_admin = user_factory(["ORG_ADMIN"])
        admins = [user_factory(["ADMIN"]), user_factory(["RECRUITER", "ADMIN"])]

        response = client.get(
            "/api/v1/users", params={"role": "ADMIN", "per_page": 1}, headers=admin_headers
        )

        body = response.json()
        assert body["meta"]["total"] == 2
        assert [u["id"] for u in body["data"]] == [admins[0].id]
        assert org_admin.id not in [u["id"] for u in body["data"]]

        second_page = client.get(
            "/api/v1/users",
            params={"role": "ADMIN", "per_page": 1, "page": 2},
            headers=admin_headers,
        ).json()
        assert [u["id"] for u in second_page["data"]] == [admins[1].id]

    def test_non_admin_cannot_list_users(self, client, recruiter_headers):
        assert client.get("/api/v1/users", headers=recruiter_headers).status_code == 403

    def test_user_cannot_grant_self_roles(self, client, tokens, registered):
        response = client.put(
            f"/api/v1/users/{registered['id']}",
            json={"roles": ["ADMIN"]},
            headers=bearer(tokens["accessToken"]),
        )
        assert response.status_code == 403

    def test_user_updates_own_profile(self, client, tokens, registered):
        response = client.put(
            f"/api/v1/users/{registered['id']}",
            json={"phone": "+44 20 7946 0000"},
            headers=bearer(tokens["accessToken"]),
        )
        assert response.status_code == 200
        assert response.json()["phone"] == "+44 20 7946 0000"
