from typing import Optional, Dict, Any

from fastapi import Header, HTTPException
from jose import jwt, JWTError
from loguru import logger

from agrosphere.core.config import ADMIN_TOKEN, AUTH_JWT_SECRET, AUTH_VERIFY_MODE


# ------------------------------------------------------------
# Helpers
# ------------------------------------------------------------
def _get_bearer_token(authorization: Optional[str]) -> str:
    if not authorization:
        raise HTTPException(status_code=401, detail="Missing Authorization header")

    parts = authorization.split(" ", 1)
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise HTTPException(status_code=401, detail="Invalid Authorization header format")

    token = parts[1].strip()
    if not token:
        raise HTTPException(status_code=401, detail="Missing bearer token")

    return token


def _parse_user_id(raw: Any, source: str) -> int:
    try:
        user_id = int(raw)
    except (TypeError, ValueError):
        raise HTTPException(status_code=401, detail=f"Invalid {source} (not an integer id)")

    if user_id <= 0:
        raise HTTPException(status_code=401, detail=f"Invalid {source} (not a positive id)")

    return user_id


# ------------------------------------------------------------
# Verification Modes
# ------------------------------------------------------------
def _verify_jwt_hs256(token: str) -> Dict[str, Any]:
    """
    HS256 verification using the identity provider's shared secret
    """
    try:
        return jwt.decode(
            token,
            AUTH_JWT_SECRET,
            algorithms=["HS256"],
            options={"verify_aud": False},
        )
    except JWTError:
        raise HTTPException(status_code=401, detail="Invalid or expired token")


def create_access_token(user_id: int, extra: Optional[Dict[str, Any]] = None) -> str:
    """Mint a token the way the identity provider does; used by seeds and tests."""
    claims = {"sub": str(user_id)}
    if extra:
        claims.update(extra)
    return jwt.encode(claims, AUTH_JWT_SECRET, algorithm="HS256")


# ------------------------------------------------------------
# Main Dependencies
# ------------------------------------------------------------
def get_current_user_id(
    authorization: Optional[str] = Header(default=None),
    x_user_id: Optional[str] = Header(default=None),
) -> int:

    if AUTH_VERIFY_MODE == "header":
        # local development only: trust the caller
        if not x_user_id:
            raise HTTPException(status_code=401, detail="Missing X-User-Id header")
        return _parse_user_id(x_user_id, "X-User-Id header")

    if AUTH_VERIFY_MODE != "hs256":
        raise HTTPException(
            status_code=500,
            detail=f"Invalid AUTH_VERIFY_MODE: {AUTH_VERIFY_MODE}",
        )

    token = _get_bearer_token(authorization)
    payload = _verify_jwt_hs256(token)

    sub = payload.get("sub")
    if not sub:
        raise HTTPException(status_code=401, detail="Token missing sub claim")

    user_id = _parse_user_id(sub, "sub claim")
    logger.debug(f"[auth] user_id={user_id}")
    return user_id


def require_admin(x_admin_token: Optional[str] = Header(default=None)) -> None:
    if not ADMIN_TOKEN or x_admin_token != ADMIN_TOKEN:
        raise HTTPException(status_code=401, detail="Unauthorized")
