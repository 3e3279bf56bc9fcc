"""
Caller identity extraction for protected routes.

Users sign in with an external identity provider. Requests carry the
provider's JWT as a bearer token; this module verifies it and exposes the
subject as the owner id. No user is looked up or created here.
"""
from dataclasses import dataclass
from typing import Optional
from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError, jwt
from app.config import Settings, get_settings
from app.utils.logger import get_logger

logger = get_logger(__name__)

# HTTP Bearer token scheme
security = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class Identity:
    """Verified caller as described by the identity provider."""
    owner_id: str
    email: str = ""
    name: Optional[str] = None


def _display_name(claims: dict) -> Optional[str]:
    name = claims.get("name")
    if not name:
        name = f"{claims.get('given_name') or claims.get('first_name') or ''} {claims.get('family_name') or claims.get('last_name') or ''}"
    name = name.strip()
    return name or None


def verify_identity_token(token: str, settings: Settings) -> Optional[Identity]:
    """
    Decode and verify an identity-provider token.

    Returns:
        Identity if the token is valid and has a subject, None otherwise
    """
    if not settings.IDENTITY_JWT_SECRET:
        logger.warning("IDENTITY_JWT_SECRET is not configured; rejecting token")
        return None

    options = {"verify_aud": bool(settings.IDENTITY_JWT_AUDIENCE)}
    try:
        claims = jwt.decode(
            token,
            settings.IDENTITY_JWT_SECRET,
            algorithms=[settings.IDENTITY_JWT_ALGORITHM],
            audience=settings.IDENTITY_JWT_AUDIENCE or None,
            issuer=settings.IDENTITY_JWT_ISSUER or None,
            options=options
        )
    except JWTError as e:
        logger.warning(f"Authentication error: {e}")
        return None

    subject = claims.get("sub")
    if not subject:
        logger.warning("Authentication error: token has no subject")
        return None

    return Identity(
        owner_id=str(subject),
        email=claims.get("email") or "",
        name=_display_name(claims)
    )


def identity_from_request(request: Request) -> Optional[Identity]:
    """Verify the bearer token of a request outside dependency injection."""
    scheme, _, token = request.headers.get("authorization", "").partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return verify_identity_token(token.strip(), get_settings())


def get_current_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> Optional[Identity]:
    """
    FastAPI dependency returning the caller's identity, or None.

    Routes decide how to report a missing identity: action endpoints answer
    with the ``Unauthorized`` envelope and REST endpoints with HTTP 401.
    """
    if not credentials:
        return None
    return verify_identity_token(credentials.credentials, get_settings())
