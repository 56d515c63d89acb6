"""Password authentication and refresh token rotation."""

from datetime import timedelta
from typing import Optional

import bcrypt
import structlog
from sqlalchemy.orm import Session

from organiser.config.settings import settings
from organiser.middleware.error_handler import (
    AlreadyExistsError,
    ForbiddenError,
    NotFoundError,
    UnauthorizedError,
)
from organiser.models import Organisation, RefreshToken, User, UserRole
from organiser.models.base import utcnow
from organiser.schemas.auth import RegisterRequest, TokenResponse

from .token import build_claims, create_token, generate_refresh_token

logger = structlog.get_logger()

# Roles anyone may pick when registering
SELF_SERVICE_ROLES = frozenset({UserRole.CANDIDATE.value, UserRole.INTERVIEWER.value})


def hash_password(password: str) -> str:
    """Hash a password using bcrypt."""
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))


def normalise_email(email: str) -> str:
    return email.strip().lower()


class AuthService:
    """Registration, login, refresh and logout."""

    def __init__(self, db: Session):
        self.db = db

    def register(self, request: RegisterRequest, allow_privileged: bool = False) -> User:
        """Create a user account.

        Open registration may only ask for SELF_SERVICE_ROLES. Staff roles
        are granted by an admin through the users endpoint, or here with
        allow_privileged (bootstrap script).
        """
        email = normalise_email(request.email)
        roles = list(dict.fromkeys(r.value for r in request.roles))

        privileged = sorted(set(roles) - SELF_SERVICE_ROLES)
        if privileged and not allow_privileged:
            logger.warning("Privileged self-registration refused", email=email, roles=privileged)
            raise ForbiddenError(
                f"Roles cannot be self-assigned: {', '.join(privileged)}"
            )

        if self.db.query(User).filter(User.email == email).first():
            raise AlreadyExistsError("User", "email", email)

        if request.recruiter_id is not None:
            organisation = (
                self.db.query(Organisation)
                .filter(Organisation.id == request.recruiter_id)
                .first()
            )
            if not organisation:
                raise NotFoundError("Organisation", request.recruiter_id)

        user = User(
            email=email,
            password_hash=hash_password(request.password),
            first_name=request.first_name,
            last_name=request.last_name,
            phone=request.phone,
            roles=roles,
            recruiter_id=request.recruiter_id,
            is_active=True,
        )
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)

        logger.info("User registered", user_id=user.id, roles=roles)
        return user

    def login(self, email: str, password: str) -> TokenResponse:
        user = self.db.query(User).filter(User.email == normalise_email(email)).first()
        if not user or not verify_password(password, user.password_hash):
            logger.warning("Login failed", email=normalise_email(email))
            raise UnauthorizedError("Invalid email or password")
        if not user.is_active:
            logger.warning("Login for inactive user", user_id=user.id)
            raise UnauthorizedError("Account is disabled")

        logger.info("User logged in", user_id=user.id)
        return self._issue_tokens(user)

    def refresh(self, refresh_token: str) -> TokenResponse:
        """Exchange a refresh token for a new pair. The old token is revoked."""
        stored = (
            self.db.query(RefreshToken)
            .filter(RefreshToken.token == refresh_token)
            .first()
        )
        if not stored:
            raise UnauthorizedError("Invalid refresh token")

        if stored.expires_at < utcnow():
            self.db.delete(stored)
            self.db.commit()
            raise UnauthorizedError("Refresh token has expired")

        user = stored.user
        if not user or not user.is_active:
            raise UnauthorizedError("Account is disabled")

        logger.info("Token refreshed", user_id=user.id)
        return self._issue_tokens(user)

    def logout(self, user_id: int) -> None:
        """Revoke every refresh token of the user."""
        deleted = (
            self.db.query(RefreshToken)
            .filter(RefreshToken.user_id == user_id)
            .delete(synchronize_session=False)
        )
        self.db.commit()
        logger.info("User logged out", user_id=user_id, revoked=deleted)

    def get_user(self, user_id: int) -> Optional[User]:
        return self.db.query(User).filter(User.id == user_id).first()

    def _issue_tokens(self, user: User) -> TokenResponse:
        # One active refresh token per user
        self.db.query(RefreshToken).filter(RefreshToken.user_id == user.id).delete(
            synchronize_session=False
        )
        refresh_token = RefreshToken(
            token=generate_refresh_token(),
            user_id=user.id,
            expires_at=utcnow() + timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS),
        )
        self.db.add(refresh_token)
        self.db.commit()

        access_token = create_token(build_claims(user))
        return TokenResponse(
            access_token=access_token,
            refresh_token=refresh_token.token,
            token_type=settings.TOKEN_TYPE,
            expires_in=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        )
