from __future__ import annotations

import logging
import time
from typing import Any, Dict, Optional

import httpx
from fastapi import HTTPException, status
from jose import jwt
from jose.exceptions import JWTError

from sitedesk.config import settings

logger = logging.getLogger("auth.clerk")

_JWKS_TTL_SECONDS = 300


class _JWKSCache:
    def __init__(self) -> None:
        self.jwks: Optional[Dict[str, Any]] = None
        self.cached_at: float = 0.0

    def get(self) -> Optional[Dict[str, Any]]:
        if self.jwks and (time.time() - self.cached_at) < _JWKS_TTL_SECONDS:
            return self.jwks
        return None

    def set(self, jwks: Optional[Dict[str, Any]]) -> None:
        self.jwks = jwks
        self.cached_at = time.time()


_cache = _JWKSCache()


def _fetch_jwks(*, force: bool = False) -> Dict[str, Any]:
    cached = None if force else _cache.get()
    if cached:
        return cached
    try:
        resp = httpx.get(settings.CLERK_JWKS_URL, timeout=10)
        resp.raise_for_status()
    except httpx.HTTPError as exc:
        logger.exception("JWKS fetch failed", extra={"jwks_url": settings.CLERK_JWKS_URL})
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Unable to fetch Clerk JWKS",
        ) from exc
    data = resp.json()
    _cache.set(data)
    return data


def _find_signing_key(kid: str) -> Optional[Dict[str, Any]]:
    for force in (False, True):
        for key in _fetch_jwks(force=force).get("keys", []):
            if key.get("kid") == kid:
                return key
    return None


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)


def verify_clerk_token(token: str) -> Dict[str, Any]:
    """Verify a Clerk session token and return its claims."""
    try:
        header = jwt.get_unverified_header(token)
    except JWTError as exc:
        logger.warning("Invalid token header", exc_info=exc)
        raise _unauthorized("Invalid token") from exc

    kid = header.get("kid")
    if not kid:
        raise _unauthorized("Missing kid in token")
    signing_key = _find_signing_key(kid)
    if signing_key is None:
        logger.warning("Signing key not found", extra={"kid": kid})
        raise _unauthorized("Signing key not found")

    try:
        claims = jwt.decode(
            token,
            signing_key,
            algorithms=[signing_key.get("alg", "RS256")],
            issuer=settings.CLERK_JWT_ISSUER,
            options={"verify_aud": False},
        )
    except JWTError as exc:
        logger.warning("Token verification failed", exc_info=exc)
        raise _unauthorized("Invalid token") from exc

    audience = claims.get("aud") or claims.get("azp")
    audiences = audience if isinstance(audience, list) else [audience]
    if audience and not set(audiences) & set(settings.CLERK_AUDIENCE):
        logger.warning("Token audience rejected", extra={"aud": audience})
        raise _unauthorized("Invalid token audience")

    logger.debug("Verified Clerk token", extra={"kid": kid, "sub": claims.get("sub")})
    return claims
