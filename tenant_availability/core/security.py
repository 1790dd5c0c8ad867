from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt

from tenant_availability.core.config import settings

ADMIN_ROLES = frozenset({"super_admin", "tenant_admin"})


def create_access_token(subject: str | int, expires_minutes: int = 15) -> str:
    """Mint an access token. Login lives in the identity service; this is used by
    internal tooling and tests that need a token the API will accept."""
    expire = datetime.now(UTC) + timedelta(minutes=expires_minutes)
    to_encode = {"sub": str(subject), "exp": expire, "type": "access"}
    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)


def decode_access_token(token: str) -> str | None:
    try:
        payload = jwt.decode(
            token, settings.secret_key, algorithms=[settings.algorithm]
        )
        if payload.get("type") != "access":
            return None
        sub = payload.get("sub")
        return str(sub) if sub else None
    except JWTError:
        return None


def is_admin_role(role: str | None) -> bool:
    return role in ADMIN_ROLES
