# eduopps/core/security.py
import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional, Union

from jose import JWTError, jwt

from eduopps.core.config import get_jwt_settings, get_token_expires_delta
from eduopps.core.errors import TokenError

logger = logging.getLogger(__name__)

ACCESS_TOKEN_TYPE = "access"


def create_access_token(
    user_id: Union[int, str],
    expires_delta: Optional[timedelta] = None,
    extra_claims: Optional[Dict[str, Any]] = None
) -> str:
    """Create a signed access token for the given user"""
    jwt_settings = get_jwt_settings()
    now = datetime.now(timezone.utc)

    to_encode = dict(extra_claims or {})
    to_encode.update({
        "sub": str(user_id),
        "type": ACCESS_TOKEN_TYPE,
        "iss": jwt_settings["token_issuer"],
        "iat": now,
        "exp": now + (expires_delta or get_token_expires_delta()),
        "jti": secrets.token_urlsafe(16)
    })

    return jwt.encode(
        to_encode,
        jwt_settings["secret_key"],
        algorithm=jwt_settings["algorithm"]
    )


def decode_access_token(token: str) -> Dict[str, Any]:
    """
    Verify an access token and return its payload.

    Raises:
        TokenError: signature, expiry, issuer or token type is wrong
    """
    jwt_settings = get_jwt_settings()
    try:
        payload = jwt.decode(
            token,
            jwt_settings["secret_key"],
            algorithms=[jwt_settings["algorithm"]],
            issuer=jwt_settings["token_issuer"]
        )
    except JWTError as e:
        logger.info(f"Token verification failed: {str(e)}")
        raise TokenError("Could not validate credentials") from e

    if payload.get("type") != ACCESS_TOKEN_TYPE:
        raise TokenError(f"Invalid token type. Expected {ACCESS_TOKEN_TYPE}")

    subject = payload.get("sub")
    if subject is None or not str(subject).isdigit():
        raise TokenError("Token subject is missing or malformed")

    return payload
