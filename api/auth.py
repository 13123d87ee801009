"""Resolution of the requesting user from a JWT bearer token."""

from __future__ import annotations

import os
from datetime import UTC, datetime, timedelta

import structlog
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from opentelemetry import trace

# Initialize logger
logger = structlog.get_logger(__name__)


# JWT Configuration
SECRET_KEY = os.getenv("JWT_SECRET_KEY", "your-secret-key-here-change-in-production")
ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
EXPIRATION_DAYS = int(os.getenv("JWT_EXPIRATION_DAYS", "30"))

# Missing credentials fall back to the configured default user
security = HTTPBearer(auto_error=False)


def create_access_token(user_id: str) -> str:
    """
    Create a JWT access token for a user.

    Tokens are normally issued by the identity provider sharing
    JWT_SECRET_KEY; this helper mints compatible ones.

    Args:
        user_id: The user's ID

    Returns:
        Encoded JWT token
    """
    expire = datetime.now(UTC) + timedelta(days=EXPIRATION_DAYS)
    return jwt.encode({"sub": user_id, "exp": expire}, SECRET_KEY, algorithm=ALGORITHM)


def decode_access_token(token: str) -> dict | None:
    """
    Decode and verify a JWT token.

    Args:
        token: The JWT token to decode

    Returns:
        Decoded token payload or None if invalid
    """
    tracer = trace.get_tracer(__name__)

    with tracer.start_as_current_span("decode_access_token") as span:
        try:
            payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
            logger.debug("jwt_token_decoded", user_id=payload.get("sub"))
            return payload
        except JWTError as e:
            logger.warning("jwt_token_decode_failed", error=str(e), error_type=type(e).__name__)
            span.set_attribute("error", True)
            span.set_attribute("error.type", type(e).__name__)
            return None


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user_id(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> str:
    """
    Dependency returning the id of the requesting user.

    A bearer token wins when present and must be valid. Without one the
    configured default user is used; if none is configured the request is
    rejected with 401.
    """
    if credentials is None:
        default_user_id = request.app.state.settings.default_user_id
        if not default_user_id:
            logger.warning("auth_failed_missing_credentials")
            raise _unauthorized("Not authenticated")
        return default_user_id

    payload = decode_access_token(credentials.credentials)
    if payload is None:
        logger.warning("auth_failed_invalid_token")
        raise _unauthorized("Invalid authentication credentials")

    user_id = payload.get("sub")
    if not user_id:
        logger.warning("auth_failed_missing_user_id")
        raise _unauthorized("Invalid authentication credentials")

    trace.get_current_span().set_attribute("user.id", user_id)
    return user_id
