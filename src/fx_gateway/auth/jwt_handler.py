"""JWT access token verification.

Tokens are issued by the external identity service and signed with the shared
JWT_SECRET (HS256). This service only verifies them; ``create_access_token``
exists for seeding local environments and tests.
"""

from datetime import timedelta

from jose import JWTError, jwt

from config.settings import settings
from src.fx_common.datetime_utils import utc_now
from src.fx_common.errors import InvalidCredentialsError

_ALGORITHM = settings.JWT_ALGORITHM  # "HS256"


def create_access_token(user_id: str, expires_in: timedelta = timedelta(minutes=30)) -> str:
    now = utc_now()
    payload = {
        "sub": user_id,
        "type": "access",
        "iat": now,
        "exp": now + expires_in,
    }
    return str(jwt.encode(payload, settings.JWT_SECRET, algorithm=_ALGORITHM))


def decode_access_token(token: str) -> dict[str, str]:
    """Decode and validate an access token.

    Raises:
        InvalidCredentialsError: signature invalid, token expired, or the token
            is not an access token.
    """
    try:
        payload: dict[str, str] = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[_ALGORITHM],  # Explicit list prevents algorithm confusion
        )
    except JWTError:
        raise InvalidCredentialsError() from None

    if payload.get("type") != "access":
        raise InvalidCredentialsError()
    return payload
