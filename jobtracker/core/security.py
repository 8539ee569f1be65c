from datetime import datetime, timedelta, timezone
from typing import Any

from fastapi import Depends, Header, HTTPException, status
from jose import JWTError, jwt
from werkzeug.security import check_password_hash, generate_password_hash

from jobtracker.core.auth import Principal, Role, authorize
from jobtracker.core.config import Settings, get_settings
from jobtracker.services.errors import InvalidTokenError


def hash_password(password: str) -> str:
    return generate_password_hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    return check_password_hash(password_hash, password)


def issue_token(user: dict[str, Any], *, settings: Settings) -> str:
    issued_at = datetime.now(timezone.utc)
    claims = {
        "id": int(user["id"]),
        "email": user["email"],
        "role": Role(user["role"]).value,
        "iat": issued_at,
        "exp": issued_at + timedelta(hours=settings.token_expire_hours),
    }
    return jwt.encode(claims, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def verify_token(token: str, *, settings: Settings) -> Principal:
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except JWTError as exc:
        raise InvalidTokenError("invalid or expired token") from exc

    user_id = payload.get("id")
    email = payload.get("email")
    if not isinstance(user_id, int) or not isinstance(email, str):
        raise InvalidTokenError("invalid or expired token")
    try:
        role = Role(payload.get("role"))
    except ValueError as exc:
        raise InvalidTokenError("invalid or expired token") from exc

    return Principal(user_id=user_id, email=email, role=role)


async def get_principal(
    settings: Settings = Depends(get_settings),
    authorization: str | None = Header(default=None, alias="Authorization"),
) -> Principal:
    if not authorization or not authorization.lower().startswith("bearer "):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="access token required")

    token = authorization.split(" ", maxsplit=1)[1].strip()
    if not token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="access token required")

    try:
        return verify_token(token, settings=settings)
    except InvalidTokenError as exc:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(exc)) from exc


def require_roles(*roles: Role):
    """Build a dependency that admits only principals holding one of ``roles``.

    Resolved as a dependency so the role check runs before the request body
    is validated and before any entity lookup.
    """
    allowed = frozenset(roles)

    async def _require(principal: Principal = Depends(get_principal)) -> Principal:
        try:
            return authorize(principal, allowed)
        except PermissionError as exc:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(exc)) from exc

    return _require
