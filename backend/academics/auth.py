"""Authentication helpers and FastAPI security dependency.

Write routes are protected by a bearer JWT signed with the configured
secret. Tokens are issued outside this service; `require_token` only
verifies them and returns their claims.

Token verification raises HTTPExceptions on failure so it can be used
directly inside route dependencies.
"""

from datetime import datetime, timedelta, timezone

from fastapi import HTTPException, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
import jwt

from .config import settings

bearer_scheme = HTTPBearer()


def issue_token(subject: str, expire_hours: int = 24) -> str:
    """Sign a token for `subject`; used by scripts and tests."""
    expire = datetime.now(timezone.utc) + timedelta(hours=expire_hours)
    payload = {"sub": subject, "exp": int(expire.timestamp())}
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_token(token: str):
    """Decode and verify a JWT token.

    Returns the decoded payload on success or raises an HTTPException
    with status 401 on failure.
    """
    try:
        return jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise HTTPException(status_code=401, detail='token expired')
    except jwt.InvalidTokenError:
        raise HTTPException(status_code=401, detail='invalid token')


def require_token(credentials: HTTPAuthorizationCredentials = Security(bearer_scheme)):
    """FastAPI dependency returning the claims of a valid bearer token."""
    payload = decode_token(credentials.credentials)
    if not payload.get('sub'):
        raise HTTPException(status_code=401, detail='invalid token payload')
    return payload
