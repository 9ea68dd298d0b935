"""
API Dependencies

Wires the chances endpoint to its two collaborators: the authenticated
Supabase user and the process-wide ChancesService.

Tokens are only ever trusted after signature verification. Supabase signs
with rotating ES256 keys published at its JWKS endpoint; projects that still
use the shared HS256 secret are accepted when SUPABASE_JWT_SECRET is set.
"""

import logging
from functools import lru_cache
from typing import Annotated, Callable, List, Optional, Tuple

import jwt
from jwt import PyJWKClient
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from chances.config.settings import Settings, get_settings
from chances.infrastructure.services.chances_service import (
    ChancesService,
    get_chances_service,
)


logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)

TOKEN_AUDIENCE = "authenticated"
REQUIRED_CLAIMS = ["exp", "sub", "iss"]


@lru_cache
def _jwks_client(jwks_url: str) -> PyJWKClient:
    # One client per endpoint; PyJWKClient keeps the fetched keys between requests
    return PyJWKClient(jwks_url, cache_keys=True)


def _issuer(settings: Settings) -> str:
    return f"{settings.supabase_url}/auth/v1"


def _decode_with_jwks(token: str, issuer: str) -> dict:
    """Verify an ES256 token against the project's published signing keys."""
    signing_key = _jwks_client(f"{issuer}/.well-known/jwks.json").get_signing_key_from_jwt(token)
    return jwt.decode(
        token,
        signing_key.key,
        algorithms=["ES256"],
        issuer=issuer,
        audience=TOKEN_AUDIENCE,
        options={"require": REQUIRED_CLAIMS},
    )


def _decode_with_secret(token: str, secret: str, issuer: str) -> dict:
    return jwt.decode(
        token,
        secret,
        algorithms=["HS256"],
        issuer=issuer,
        audience=TOKEN_AUDIENCE,
        options={"require": REQUIRED_CLAIMS},
    )


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def verify_token(token: str, settings: Settings) -> dict:
    """
    Return the verified claims of a Supabase access token.

    Each configured verifier is tried in turn. A token whose signature checks
    out but whose ``exp`` has passed is reported as expired straight away,
    whichever verifier recognised it.

    Raises:
        HTTPException 401: no verifier accepted the token.
    """
    issuer = _issuer(settings)
    verifiers: List[Tuple[str, Callable[[], dict]]] = [
        ("ES256", lambda: _decode_with_jwks(token, issuer)),
    ]
    if settings.supabase_jwt_secret:
        verifiers.append(
            ("HS256", lambda: _decode_with_secret(token, settings.supabase_jwt_secret, issuer))
        )

    for name, verify in verifiers:
        try:
            return verify()
        except jwt.ExpiredSignatureError:
            raise _unauthorized("Token has expired")
        except (jwt.exceptions.PyJWKClientError, jwt.InvalidTokenError) as e:
            logger.debug(f"[AUTH] {name} verification failed: {e}")

    logger.warning("[AUTH] Rejected a token no verifier accepted")
    raise _unauthorized("Invalid or unverifiable token")


async def get_current_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> str:
    """
    Resolve the requesting Supabase user from the Bearer token.

    Raises:
        HTTPException 401: token missing, expired, invalid or without ``sub``.
        HTTPException 503: SUPABASE_URL not configured.
    """
    if credentials is None or not credentials.credentials:
        raise _unauthorized("Missing authorization token")

    settings = get_settings()
    if not settings.supabase_url:
        logger.error("[AUTH] SUPABASE_URL is not set; cannot verify tokens")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Authentication is not configured",
        )

    claims = verify_token(credentials.credentials, settings)
    user_id = claims.get("sub")
    if not user_id:
        raise _unauthorized("Invalid token: missing user ID")
    return user_id


CurrentUserDep = Annotated[str, Depends(get_current_user_id)]
ChancesServiceDep = Annotated[ChancesService, Depends(get_chances_service)]
