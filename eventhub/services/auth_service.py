"""Auth service for authentication."""

from sqlalchemy.ext.asyncio import AsyncSession

from eventhub.core.security import create_access_token
from eventhub.schemas.auth import Token
from eventhub.services.user_service import UserService


class AuthService:
    """Authentication service."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.user_service = UserService(db)

    async def login(self, email: str, password: str) -> Token | None:
        """Authenticate user and return JWT token."""
        user = await self.user_service.authenticate(email, password)
        if not user:
            return None

        token = create_access_token(
            user.id,
            extra_claims={"email": user.email, "superuser": user.is_superuser},
        )
        return Token(token=token)
