"""ID token creation and verification.

The identity provider signs an ID token after interactive sign-in; the
API only trusts principals taken from a token that verifies.

Token claims:
  - sub:      principal id
  - email:    principal email
  - name:     display name (optional)
  - picture:  photo URL (optional)
  - exp:      expiry timestamp
  - aud/iss:  checked when configured
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt

from ..config import Settings
from ..models import Principal

logger = logging.getLogger(__name__)


def create_id_token(
    settings: Settings,
    principal_id: str,
    email: str,
    name: Optional[str] = None,
    picture: Optional[str] = None,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """Issue a token the way the identity provider does. Used in dev and tests."""
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.id_token_expire_minutes)
    )
    payload = {"sub": principal_id, "email": email, "exp": expire}
    if name:
        payload["name"] = name
    if picture:
        payload["picture"] = picture
    if settings.id_token_audience:
        payload["aud"] = settings.id_token_audience
    if settings.id_token_issuer:
        payload["iss"] = settings.id_token_issuer
    return jwt.encode(
        payload, settings.id_token_secret, algorithm=settings.id_token_algorithm
    )


def verify_id_token(settings: Settings, token: str) -> Optional[Principal]:
    """Decode and validate an ID token. Returns None on failure."""
    try:
        claims = jwt.decode(
            token,
            settings.id_token_secret,
            algorithms=[settings.id_token_algorithm],
            audience=settings.id_token_audience,
            issuer=settings.id_token_issuer,
            options={"verify_aud": settings.id_token_audience is not None},
        )
    except JWTError as exc:
        logger.warning("Rejected ID token: %s", exc)
        return None

    if not claims.get("sub") or not claims.get("email"):
        logger.warning("Rejected ID token without sub/email claims")
        return None

    return Principal(
        id=claims["sub"],
        email=claims["email"],
        display_name=claims.get("name"),
        photo_url=claims.get("picture"),
    )
