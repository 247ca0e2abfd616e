"""FastAPI dependencies: get_current_user, get_current_actor.

Usage in any protected router:
    from src.fx_gateway.auth.dependencies import get_current_actor

    @router.get("/protected")
    async def protected(actor: Actor = Depends(get_current_actor)):
        ...
"""

import uuid

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.fx_common.database import get_db_session
from src.fx_common.enums import UserRole
from src.fx_common.errors import AccountDisabledError, InvalidCredentialsError
from src.fx_gateway.auth.jwt_handler import decode_access_token
from src.fx_gateway.user.db_models import UserModel
from src.fx_order.domain.models import Actor

# Tokens come from the external identity service; tokenUrl only feeds Swagger UI
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/token")

_CREDENTIALS_EXCEPTION = HTTPException(
    status_code=status.HTTP_401_UNAUTHORIZED,
    detail="Invalid or expired token",
    headers={"WWW-Authenticate": "Bearer"},
)


async def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_db_session),
) -> UserModel:
    """Validate the JWT Bearer token and return the UserModel.

    Raises HTTP 401 if the token is missing, invalid, expired, or names an
    unknown user. Raises AccountDisabledError (403) for disabled accounts.
    """
    try:
        payload = decode_access_token(token)
    except InvalidCredentialsError:
        raise _CREDENTIALS_EXCEPTION from None

    sub = payload.get("sub")
    if not sub:
        raise _CREDENTIALS_EXCEPTION
    try:
        user_id = uuid.UUID(sub)
    except ValueError:
        raise _CREDENTIALS_EXCEPTION from None

    result = await db.execute(select(UserModel).where(UserModel.id == user_id))
    user = result.scalar_one_or_none()
    if user is None:
        raise _CREDENTIALS_EXCEPTION

    if not user.is_active:
        raise AccountDisabledError()

    return user


async def get_current_actor(
    current_user: UserModel = Depends(get_current_user),
) -> Actor:
    """Reduce the authenticated user to the capability the order core needs."""
    return Actor(
        user_id=str(current_user.id),
        is_admin=current_user.role == UserRole.ADMIN.value,
    )
