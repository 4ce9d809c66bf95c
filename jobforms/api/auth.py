"""
Request identity dependencies.

Sessions are issued by the external auth service; this API only reads the
httpOnly `auth_token` cookie, which carries the user id.
"""
import logging
import uuid
from typing import Optional

from fastapi import Cookie, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from jobforms.database import get_db
from jobforms.models.user import User, UserRole

logger = logging.getLogger(__name__)


async def get_optional_user(
    auth_token: Optional[str] = Cookie(None),
    db: AsyncSession = Depends(get_db)
) -> Optional[User]:
    """
    Resolve the cookie to a User, or None when there is no cookie.

    Raises:
        HTTPException 401: If the cookie is malformed or the user is unknown
    """
    if not auth_token:
        return None

    try:
        user_id = uuid.UUID(auth_token)
    except ValueError:
        raise HTTPException(status_code=401, detail="Invalid token.")

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


async def get_current_user(
    user: Optional[User] = Depends(get_optional_user)
) -> User:
    """
    Dependency to get the authenticated user.

    Raises:
        HTTPException 401: If no session cookie was sent
    """
    if user is None:
        raise HTTPException(status_code=401, detail="Authentication required")
    return user


async def require_employer(
    current_user: User = Depends(get_current_user)
) -> User:
    """
    Dependency for job posting and form authoring endpoints.

    Raises:
        HTTPException 403: If the user is a job seeker
    """
    if current_user.role == UserRole.JOB_SEEKER:
        logger.warning(f"User {current_user.email} attempted to access an employer endpoint")
        raise HTTPException(
            status_code=403,
            detail="Employer access required."
        )
    return current_user
