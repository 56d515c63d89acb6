"""Shared fixtures: in-memory database, recording notifier, auth headers."""

import os

# Settings are read at import time
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DEBUG", "false")

from datetime import timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from organiser.config.database import Base, get_db
from organiser.main import app
from organiser.models.base import utcnow
from organiser.models import (
    Candidate,
    Interviewer,
    InterviewType,
    Organisation,
    User,
    VerificationStatus,
)
from organiser.schemas.interviews import ScheduleInterviewRequest
from organiser.services.interview_service import InterviewService
from organiser.services.notifications import NotificationService, get_notification_service
from organiser.services.token import create_token


class RecordingNotifier(NotificationService):
    """Notifier that keeps every notification instead of logging it."""

    channel = "test"

    def __init__(self):
        self.sent = []

    def _send(self, event: str, message: str, **fields) -> None:
        self.sent.append((event, fields))

    def events(self, name: str = None) -> list:
        if name is None:
            return [event for event, _ in self.sent]
        return [fields for event, fields in self.sent if event == name]


class FailingNotifier(NotificationService):
    """Notifier whose delivery always fails."""

    def _send(self, event: str, message: str, **fields) -> None:
        raise ConnectionError("mail relay unreachable")


# ============================================================================
# DATABASE
# ============================================================================

@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    yield session
    session.close()


# ============================================================================
# SERVICES
# ============================================================================

@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def service(db_session, notifier):
    return InterviewService(
        db_session,
        notifier=notifier,
        enforce_transitions=True,
        notify_on_schedule=False,
    )


# ============================================================================
# DATA FACTORIES
# ============================================================================

@pytest.fixture
def organisation(db_session):
    organisation = Organisation(
        name="Acme Hiring",
        contact_email="talent@acme.test",
        verification_status=VerificationStatus.VERIFIED,
        is_active=True,
    )
    db_session.add(organisation)
    db_session.commit()
    return organisation


@pytest.fixture
def candidate_factory(db_session):
    counter = {"n": 0}

    def make(**overrides) -> Candidate:
        counter["n"] += 1
        fields = {
            "first_name": "Casey",
            "last_name": f"Candidate{counter['n']}",
            "email": f"candidate{counter['n']}@example.test",
            "position": "Backend Engineer",
            "skills": ["python", "sql"],
        }
        fields.update(overrides)
        candidate = Candidate(**fields)
        db_session.add(candidate)
        db_session.commit()
        return candidate

    return make


@pytest.fixture
def interviewer_factory(db_session):
    counter = {"n": 0}

    def make(**overrides) -> Interviewer:
        counter["n"] += 1
        fields = {
            "name": f"Interviewer {counter['n']}",
            "email": f"interviewer{counter['n']}@example.test",
            "department": "Engineering",
            "expertise": ["python"],
        }
        fields.update(overrides)
        interviewer = Interviewer(**fields)
        db_session.add(interviewer)
        db_session.commit()
        return interviewer

    return make


@pytest.fixture
def candidate(candidate_factory, organisation):
    return candidate_factory(recruiter_id=organisation.id)


@pytest.fixture
def interviewer(interviewer_factory):
    return interviewer_factory()


@pytest.fixture
def slot():
    """A future interview slot (naive UTC)."""
    return (utcnow() + timedelta(days=7)).replace(microsecond=0)


@pytest.fixture
def schedule(service, candidate, interviewer, slot):
    """Schedule an interview for the default candidate and interviewer."""

    def make(**overrides):
        fields = {
            "candidate_id": candidate.id,
            "interviewer_ids": [interviewer.id],
            "scheduled_at": slot,
            "interview_type": InterviewType.VIDEO,
            "round": 1,
        }
        fields.update(overrides)
        return service.schedule_interview(ScheduleInterviewRequest(**fields))

    return make


# ============================================================================
# HTTP
# ============================================================================

@pytest.fixture
def client(session_factory, notifier):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_notification_service] = lambda: notifier
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def auth_headers(sub: str = "1", roles: list[str] = None) -> dict[str, str]:
    token = create_token({"sub": sub, "roles": roles or ["ADMIN"]})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers():
    return auth_headers("1", ["ADMIN"])


@pytest.fixture
def recruiter_headers():
    return auth_headers("2", ["RECRUITER"])


@pytest.fixture
def interviewer_headers():
    return auth_headers("3", ["INTERVIEWER"])


@pytest.fixture
def candidate_headers():
    return auth_headers("4", ["CANDIDATE"])


@pytest.fixture
def user_factory(db_session):
    counter = {"n": 0}

    def make(roles: list[str], **overrides) -> User:
        counter["n"] += 1
        fields = {
            "email": f"user{counter['n']}@example.test",
            "password_hash": "unused",
            "first_name": "Test",
            "last_name": f"User{counter['n']}",
            "roles": roles,
        }
        fields.update(overrides)
        user = User(**fields)
        db_session.add(user)
        db_session.commit()
        return user

    return make


@pytest.fixture
def own_candidate_headers(user_factory, candidate, db_session):
    """Headers for the CANDIDATE account linked to the default candidate."""
    user = user_factory(["CANDIDATE"], email=candidate.email)
    candidate.user_id = user.id
    db_session.commit()
    return auth_headers(str(user.id), ["CANDIDATE"])


@pytest.fixture
def own_interviewer_headers(user_factory, interviewer, db_session):
    """Headers for the INTERVIEWER account linked to the default interviewer."""
    user = user_factory(["INTERVIEWER"], email=interviewer.email)
    interviewer.user_id = user.id
    db_session.commit()
    return auth_headers(str(user.id), ["INTERVIEWER"])
