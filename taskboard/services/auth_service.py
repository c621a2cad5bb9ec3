from loguru import logger
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from taskboard.core.config import Settings, get_settings
from taskboard.core.exceptions.domain import (
    AuthenticationError,
    DuplicateResourceError,
    ResourceNotFoundError,
    SessionExpiredError,
)
from taskboard.core.security import (
    hash_password,
    issue_session_token,
    read_session_token,
    verify_password,
)
from taskboard.repos.user import UserRepo
from taskboard.schemas.user import UserCreate, UserRegister, UserResponse

INVALID_CREDENTIALS = "Invalid email or password"

# Compared against when the email is unknown so both failure paths cost the same
_dummy_hash: str | None = None


def _get_dummy_hash() -> str:
    global _dummy_hash
    if _dummy_hash is None:
        _dummy_hash = hash_password("unused-Dummy-1!")
    return _dummy_hash


class AuthService:
    """Handles registration, login and session token issuance/verification."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        settings: Settings | None = None,
    ):
        self._session_factory = session_factory
        self._settings = settings or get_settings()

    async def register(self, data: UserRegister) -> UserResponse:
        """Register a new user.

        Raises:
            DuplicateResourceError: If the email is already registered.
        """
        session = self._session_factory()

        try:
            user_repo = UserRepo(session)

            # Check for duplicate email
            existing = await user_repo.get_by_email(data.email)
            if existing:
                raise DuplicateResourceError("User", data.email)

            create_data = UserCreate(
                name=data.name,
                email=data.email.lower(),
                password_hash=hash_password(data.password.get_secret_value()),
            )
            try:
                user = await user_repo.create_one(create_data)
            except IntegrityError as e:
                # Lost a race against a concurrent signup with the same email
                await session.rollback()
                raise DuplicateResourceError("User", data.email) from e

            logger.info(f"User registered: {user.email}")
            return UserResponse.model_validate(user)

        finally:
            await session.close()

    async def login(self, email: str, password: str) -> tuple[UserResponse, str]:
        """Login a user. Returns (user_response, session_token).

        Raises:
            AuthenticationError: If credentials are invalid. Unknown email and
                wrong password are reported identically.
        """
        session = self._session_factory()

        try:
            user_repo = UserRepo(session)
            user = await user_repo.get_by_email(email)

            if not user:
                verify_password(password, _get_dummy_hash())
                raise AuthenticationError(INVALID_CREDENTIALS)

            if not verify_password(password, user.password_hash):
                raise AuthenticationError(INVALID_CREDENTIALS)

            token = self.issue_token(user.id)
            logger.info(f"User logged in: {user.email}")
            return UserResponse.model_validate(user), token

        finally:
            await session.close()

    def issue_token(self, user_id: str, *, now: float | None = None) -> str:
        """Issue a signed session token valid for the configured lifetime."""
        return issue_session_token(user_id, secret_key=self._settings.secret_key, now=now)

    def read_token(self, token: str, *, now: float | None = None) -> str:
        """Return the user id carried by a token without touching the database.

        Raises:
            SessionExpiredError: If the token is past its lifetime.
            AuthenticationError: If the token is missing, malformed or forged.
        """
        if not token:
            raise AuthenticationError("Please log in")
        try:
            return read_session_token(
                token,
                max_age_seconds=self._settings.session_expiry_seconds,
                secret_key=self._settings.secret_key,
                now=now,
            )
        except TimeoutError as e:
            raise SessionExpiredError() from e
        except ValueError as e:
            raise AuthenticationError("Invalid session") from e

    async def verify_session(self, token: str, *, now: float | None = None) -> UserResponse:
        """Resolve a session token to its user. Fails closed.

        Raises:
            SessionExpiredError: If the token is past its lifetime.
            AuthenticationError: If the token is invalid or its user no longer exists.
        """
        user_id = self.read_token(token, now=now)
        session = self._session_factory()

        try:
            user = await UserRepo(session).get_by_id(user_id)
            if not user:
                raise AuthenticationError("Invalid session")
            return UserResponse.model_validate(user)
        finally:
            await session.close()

    async def get_profile(self, user_id: str) -> UserResponse:
        session = self._session_factory()

        try:
            user = await UserRepo(session).get_by_id(user_id)
            if not user:
                raise ResourceNotFoundError("User", user_id)
            return UserResponse.model_validate(user)
        finally:
            await session.close()
