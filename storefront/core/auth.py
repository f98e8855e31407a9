"""Firebase ID token authentication for FastAPI.

Tokens are RS256 JWTs signed with Google's rotating keys. A token is
accepted when its signature matches a published key, ``aud`` is the
Firebase project id, ``iss`` is that project's securetoken issuer and
``sub`` (the Firebase uid) is present.
"""

import asyncio
import time
from typing import Annotated, Any

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jwt import PyJWKClient, PyJWKClientError

from storefront.core.config import settings

bearer_scheme = HTTPBearer(auto_error=False)

# Seconds of clock skew tolerated on exp/iat/auth_time
CLOCK_SKEW = 10

# Firebase uids are at most 128 characters
MAX_UID_LENGTH = 128

_jwks_client: PyJWKClient | None = None
_jwks_lock = asyncio.Lock()


def get_jwks_client() -> PyJWKClient:
    """Get or create the client for Google's securetoken keys."""
    global _jwks_client
    if _jwks_client is None:
        _jwks_client = PyJWKClient(settings.auth_jwks_url, cache_keys=True)
    return _jwks_client


async def _reset_jwks_client() -> None:
    global _jwks_client
    async with _jwks_lock:
        _jwks_client = None


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def _decode(token: str, key: Any) -> dict[str, Any]:
    payload: dict[str, Any] = jwt.decode(
        token,
        key,
        algorithms=["RS256"],
        audience=settings.auth_project_id,
        issuer=settings.auth_issuer,
        leeway=CLOCK_SKEW,
        options={"require": ["exp", "iat", "sub"]},
    )

    uid = payload["sub"]
    if not isinstance(uid, str) or not uid or len(uid) > MAX_UID_LENGTH:
        raise jwt.InvalidTokenError("sub must be a non-empty uid")

    auth_time = payload.get("auth_time")
    if auth_time is not None and auth_time > time.time() + CLOCK_SKEW:
        raise jwt.ImmatureSignatureError("auth_time is in the future")

    return payload


async def verify_token(token: str) -> dict[str, Any]:
    """Verify a Firebase ID token and return its claims.

    Raises:
        HTTPException: 401 if the token is malformed, expired or issued for
            another project; 503 if the signing keys cannot be fetched.
    """
    try:
        # Key lookup may hit the network
        signing_key = await asyncio.to_thread(get_jwks_client().get_signing_key_from_jwt, token)
        return _decode(token, signing_key.key)
    except jwt.ExpiredSignatureError:
        raise _unauthorized("Token has expired")
    except jwt.InvalidTokenError as e:
        raise _unauthorized(f"Invalid token: {e}")
    except PyJWKClientError as e:
        # Next request builds a fresh client and refetches the keys
        await _reset_jwks_client()
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"Authentication service unavailable. Unable to verify token: {e}",
        )


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> dict[str, Any]:
    """Claims of the signed-in caller; 401 without a valid bearer token."""
    if credentials is None:
        raise _unauthorized("Not authenticated")
    return await verify_token(credentials.credentials)


CurrentUser = Annotated[dict[str, Any], Depends(get_current_user)]
