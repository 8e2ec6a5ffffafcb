from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt

from hrms.core.config import Settings, get_settings


def create_access_token(
    user_id,
    settings: Optional[Settings] = None,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """Create a signed JWT carrying the user id in the ``userId`` claim."""
    settings = settings or get_settings()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(hours=8))

    to_encode = {
        "userId": str(user_id),
        "exp": expire,
    }
    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)


def decode_token(token: str, settings: Optional[Settings] = None) -> Optional[str]:
    """Decode and validate a JWT. Returns the user id if valid."""
    settings = settings or get_settings()
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except JWTError:
        return None

    user_id = payload.get("userId") or payload.get("sub")
    if user_id is None:
        return None
    return str(user_id)
