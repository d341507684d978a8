"""Account registration, sign-in and profile updates."""

from sqlalchemy.ext.asyncio import AsyncSession

from solosuccess.api.schemas.auth import ProfileUpdate, RegisterRequest
from solosuccess.auth.security import hash_password, verify_password
from solosuccess.domain.exceptions import AlreadyExists, InvalidCredentials
from solosuccess.infrastructure.database.base_model import utcnow
from solosuccess.infrastructure.database.models.user import User
from solosuccess.infrastructure.database.repositories import UserRepository
from solosuccess.infrastructure.observability.logging import get_logger
from solosuccess.infrastructure.observability.metrics import AUTH_LOGIN_TOTAL

logger = get_logger(__name__)


class UserService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.users = UserRepository(session)

    async def register(self, data: RegisterRequest) -> User:
        """
        Create an account.

        Raises:
            AlreadyExists: If the email is already registered
        """
        if await self.users.get_by_email(data.email) is not None:
            raise AlreadyExists(
                "An account with this email already exists",
                suggested_action="Sign in instead, or use a different email address",
            )

        user = await self.users.create(
            User(
                email=data.email,
                hashed_password=hash_password(data.password),
                full_name=data.full_name,
            )
        )
        logger.info("User registered", user_id=str(user.id))
        return user

    async def authenticate(self, email: str, password: str) -> User:
        """
        Check credentials and stamp last_login_at.

        Raises:
            InvalidCredentials: Unknown email, wrong password or inactive account
        """
        user = await self.users.get_by_email(email)
        if user is None or not user.is_active or not verify_password(password, user.hashed_password):
            AUTH_LOGIN_TOTAL.labels(success="false").inc()
            logger.warning("Login failed")
            raise InvalidCredentials()

        user = await self.users.apply_update(user, last_login_at=utcnow())
        AUTH_LOGIN_TOTAL.labels(success="true").inc()
        logger.info("User logged in", user_id=str(user.id))
        return user

    async def update_profile(self, user: User, data: ProfileUpdate) -> User:
        changes = data.model_dump(exclude_unset=True)
        if changes.get("timezone") is None:
            changes.pop("timezone", None)
        if "notification_preferences" in changes:
            if changes["notification_preferences"] is None:
                changes.pop("notification_preferences")
            else:
                changes["notification_preferences"] = {
                    **(user.notification_preferences or {}),
                    **changes["notification_preferences"],
                }

        if not changes:
            return user
        return await self.users.apply_update(user, **changes)
