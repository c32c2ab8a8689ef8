"""
Recruiter identity.

Sign-in itself is handled by the hosted identity provider; this module only
resolves the current recruiter for each request.

The httpOnly ``auth_token`` cookie holds an HS256 JWT signed with
``settings.auth_secret_key`` whose ``sub`` claim is the user id. A bare user
id, a token signed with another key and an expired token are all rejected.
"""
import logging
from datetime import datetime, timedelta, timezone
from uuid import UUID

import jwt
from fastapi import APIRouter, Cookie, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from app.config import settings
from app.database import get_db
from app.models.user import User
from app.schemas.auth import UserResponse

logger = logging.getLogger(__name__)
router = APIRouter()

DEV_USER_EMAIL = "dev@example.com"


def create_access_token(user_id: UUID) -> str:
    """Sign an auth cookie value for user_id."""
    expires_at = datetime.now(timezone.utc) + timedelta(minutes=settings.auth_token_expire_minutes)
    return jwt.encode(
        {"sub": str(user_id), "exp": expires_at},
        settings.auth_secret_key,
        algorithm=settings.auth_algorithm,
    )


def decode_access_token(token: str) -> UUID:
    """
    Verify an auth cookie value and return its user id.

    Raises:
        HTTPException 401: bad signature, expired, or no valid subject
    """
    try:
        payload = jwt.decode(
            token,
            settings.auth_secret_key,
            algorithms=[settings.auth_algorithm],
            options={"require": ["sub", "exp"]},
        )
    except jwt.ExpiredSignatureError:
        raise HTTPException(status_code=401, detail="Token has expired.")
    except jwt.InvalidTokenError as e:
        logger.warning(f"Rejected auth token: {e}")
        raise HTTPException(status_code=401, detail="Invalid token.")

    try:
        return UUID(payload["sub"])
    except (TypeError, ValueError):
        raise HTTPException(status_code=401, detail="Invalid token.")


# Authentication Dependencies
async def get_current_user(
    auth_token: str = Cookie(None),
    db: AsyncSession = Depends(get_db)
) -> User:
    """
    Dependency to get the current recruiter from the auth cookie.

    DEV MODE: If no cookie, returns a default dev user

    Raises:
        HTTPException 401: If the token is invalid or the user is not found
    """
    # DEV MODE: If no auth token, create/return a default dev user
    if not auth_token:
        result = await db.execute(
            select(User).where(User.email == DEV_USER_EMAIL)
        )
        dev_user = result.scalar_one_or_none()

        if not dev_user:
            dev_user = User(email=DEV_USER_EMAIL, full_name="Dev User")
            db.add(dev_user)
            await db.commit()
            await db.refresh(dev_user)
            logger.info("Created dev user for bypass mode")

        return dev_user

    user_id = decode_access_token(auth_token)

    result = await db.execute(
        select(User).where(User.id == user_id)
    )
    user = result.scalar_one_or_none()

    if not user:
        raise HTTPException(
            status_code=401,
            detail="Invalid token. User not found."
        )

    return user


# Endpoints
@router.get("/me", response_model=UserResponse)
async def get_me(current_user: User = Depends(get_current_user)):
    """Return the signed-in recruiter."""
    return current_user
