from datetime import UTC, datetime, timedelta
from typing import Iterable, Optional
from uuid import UUID

from jose import JWTError, jwt

from config import ApplicationConfig


def generate_jwt(
    user_id: UUID,
    email: str,
    name: Optional[str] = None,
    roles: Iterable[str] = (),
    expires_delta: timedelta = timedelta(minutes=15),
) -> str:
    """
    Generate JWT access token

    Session issuance belongs to the identity service; this exists for local
    runs and tests.

    Args:
        user_id: User UUID
        email: Account email, matched against invitation emails
        name: Display name
        roles: Site roles (ADMIN, MODERATOR, USER)
        expires_delta: Token expiration duration

    Returns:
        JWT token string
    """
    now = datetime.now(UTC)
    payload = {
        "user_id": str(user_id),
        "email": email,
        "name": name,
        "roles": list(roles),
        "exp": now + expires_delta,
        "iat": now,
    }
    return jwt.encode(
        payload, ApplicationConfig.JWT_SECRET, algorithm=ApplicationConfig.JWT_ALGORITHM
    )


def verify_jwt(token: str) -> Optional[dict]:
    """
    Verify and decode JWT token

    Args:
        token: JWT token string

    Returns:
        Decoded payload dict or None if invalid
    """
    try:
        payload = jwt.decode(
            token,
            ApplicationConfig.JWT_SECRET,
            algorithms=[ApplicationConfig.JWT_ALGORITHM],
        )
        return payload
    except JWTError:
        return None
