"""Bearer token decoding (and issuing, for development).

Tokens come from the identity provider. Claims read here:
  - sub:          user ID (required)
  - email:        e-mail address
  - first_name:   given name
  - last_name:    family name
  - profile_image_url
  - exp:          expiry timestamp

The role is NOT read from the token; it lives in the DB.
"""

from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt

from shiptrack.config import settings

ALGORITHM = settings.jwt_algorithm


def create_access_token(
    user_id: str,
    email: str | None = None,
    first_name: str | None = None,
    last_name: str | None = None,
    expires_delta: timedelta | None = None,
) -> str:
    """Mint a token the way the identity provider would (dev/CLI/tests)."""
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    )
    payload = {
        "sub": user_id,
        "type": "access",
        "exp": expire,
    }
    if email:
        payload["email"] = email
    if first_name:
        payload["first_name"] = first_name
    if last_name:
        payload["last_name"] = last_name
    if settings.jwt_audience:
        payload["aud"] = settings.jwt_audience
    return jwt.encode(payload, settings.secret_key, algorithm=ALGORITHM)


def decode_token(token: str) -> dict:
    """Decode and validate a JWT. Returns empty dict on failure."""
    try:
        return jwt.decode(
            token,
            settings.secret_key,
            algorithms=[ALGORITHM],
            audience=settings.jwt_audience,
            options={"verify_aud": settings.jwt_audience is not None},
        )
    except JWTError:
        return {}
