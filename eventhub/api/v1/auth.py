"""Authentication API endpoints."""

from fastapi import APIRouter, HTTPException, status

from eventhub.core.deps import DBSession
from eventhub.schemas.auth import Token, UserLogin
from eventhub.services.auth_service import AuthService

router = APIRouter()


@router.post("", response_model=Token)
async def login(
    credentials: UserLogin,
    db: DBSession,
) -> Token:
    """
    Login and get JWT access token.

    - **email**: Login email
    - **password**: User password
    """
    auth_service = AuthService(db)
    token = await auth_service.login(credentials.email, credentials.password)

    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
        )

    return token
