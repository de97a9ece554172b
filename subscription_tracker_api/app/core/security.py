"""
Security helpers for password hashing and session tokens.

Session tokens are compact JWTs (``header.payload.signature``, base64url
encoded, HMAC‑SHA256 signed) carrying the user id (``sub``), the email,
the issue time (``iat``) and the expiration (``exp``).  They are sent to
the browser in an HTTP‑only cookie and never stored server side, so a
token is valid exactly as long as its signature checks out and ``exp``
lies in the future.

Passwords are hashed with scrypt and a per‑user random salt, stored as
``"<salt hex>:<hash hex>"``.
"""

import base64
import hashlib
import hmac
import json
import logging
import os
import secrets
import time
from typing import Any, Dict, Optional

from fastapi import Response

from .config import Settings, settings as default_settings

logger = logging.getLogger(__name__)

SCRYPT_N = 2 ** 14
SCRYPT_R = 8
SCRYPT_P = 1
SCRYPT_DKLEN = 64
SALT_BYTES = 16

# Used when SECRET_KEY is not configured.  Generated once per process, so
# tokens signed with it die with the process.
_PROCESS_SECRET = secrets.token_bytes(32)
_warned_about_secret = False


def _b64_url_encode(data: bytes) -> str:
    """Base64‑url encode bytes without padding."""
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("utf-8")


def _b64_url_decode(data: str) -> bytes:
    """Decode base64‑url encoded string, adding padding if necessary."""
    padding = "=" * (-len(data) % 4)
    return base64.urlsafe_b64decode(data + padding)


def _signing_key(config: Settings) -> bytes:
    global _warned_about_secret
    if config.secret_key:
        return config.secret_key.encode("utf-8")
    if not _warned_about_secret:
        logger.warning("SECRET_KEY is not set; using a per-process secret, sessions will not survive a restart")
        _warned_about_secret = True
    return _PROCESS_SECRET


def _sign(message: bytes, key: bytes) -> bytes:
    return hmac.new(key, message, hashlib.sha256).digest()


def create_session_token(
    user_id: str,
    email: str,
    expires_in: Optional[int] = None,
    config: Optional[Settings] = None,
) -> str:
    """Create a signed session token for a user.

    Parameters
    ----------
    user_id : str
        Subject of the token (``sub`` claim).
    email : str
        User email, embedded for convenience.
    expires_in : Optional[int]
        Lifetime in seconds.  Defaults to the configured session max
        age (7 days).
    config : Optional[Settings]
        Settings providing the secret and default lifetime.

    Returns
    -------
    str
        The token, ``header.payload.signature``.
    """
    config = config or default_settings
    now = int(time.time())
    lifetime = config.session_max_age_seconds if expires_in is None else expires_in
    claims = {"sub": user_id, "email": email, "iat": now, "exp": now + lifetime}
    header = {"alg": "HS256", "typ": "JWT"}
    header_b64 = _b64_url_encode(json.dumps(header, separators=(",", ":")).encode("utf-8"))
    payload_b64 = _b64_url_encode(json.dumps(claims, separators=(",", ":")).encode("utf-8"))
    signing_input = f"{header_b64}.{payload_b64}".encode("utf-8")
    signature_b64 = _b64_url_encode(_sign(signing_input, _signing_key(config)))
    return f"{header_b64}.{payload_b64}.{signature_b64}"


def decode_session_token(token: str, config: Optional[Settings] = None) -> Optional[Dict[str, Any]]:
    """Verify a session token and return its claims.

    Returns ``None`` when the token is malformed, the signature does
    not match, the payload is not a JSON object with ``sub`` and
    ``email``, or the token has expired.
    """
    config = config or default_settings
    try:
        parts = token.split(".")
        if len(parts) != 3:
            return None
        header_b64, payload_b64, signature_b64 = parts
        signing_input = f"{header_b64}.{payload_b64}".encode("utf-8")
        expected_sig = _sign(signing_input, _signing_key(config))
        actual_sig = _b64_url_decode(signature_b64)
        if not hmac.compare_digest(expected_sig, actual_sig):
            return None
        claims = json.loads(_b64_url_decode(payload_b64).decode("utf-8"))
    except (ValueError, UnicodeDecodeError):
        # binascii.Error and json.JSONDecodeError are both ValueErrors
        return None
    if not isinstance(claims, dict):
        return None
    if not claims.get("sub") or not claims.get("email"):
        return None
    exp = claims.get("exp")
    if not isinstance(exp, int) or exp <= int(time.time()):
        return None
    return claims


def set_session_cookie(response: Response, token: str, config: Optional[Settings] = None) -> None:
    """Attach the session cookie to a response."""
    config = config or default_settings
    response.set_cookie(
        key=config.session_cookie_name,
        value=token,
        max_age=config.session_max_age_seconds,
        path="/",
        httponly=True,
        samesite="lax",
        secure=config.secure_cookies,
    )


def clear_session_cookie(response: Response, config: Optional[Settings] = None) -> None:
    """Revoke the session by overwriting the cookie with an expired one."""
    config = config or default_settings
    response.set_cookie(
        key=config.session_cookie_name,
        value="",
        max_age=0,
        path="/",
        httponly=True,
        samesite="lax",
        secure=config.secure_cookies,
    )


def _scrypt(password: str, salt: bytes) -> bytes:
    return hashlib.scrypt(
        password.encode("utf-8"),
        salt=salt,
        n=SCRYPT_N,
        r=SCRYPT_R,
        p=SCRYPT_P,
        dklen=SCRYPT_DKLEN,
    )


def hash_password(password: str) -> str:
    """Hash a password with scrypt and a fresh 16‑byte salt.

    Returns
    -------
    str
        ``"<salt hex>:<hash hex>"``.
    """
    salt = os.urandom(SALT_BYTES)
    return f"{salt.hex()}:{_scrypt(password, salt).hex()}"


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Check a password against a stored ``salt:hash`` string.

    The digest comparison is constant time.  A malformed stored value
    (missing separator, invalid hex, empty salt or hash) never raises;
    it simply does not verify.
    """
    if not isinstance(hashed_password, str):
        return False
    salt_hex, sep, hash_hex = hashed_password.partition(":")
    if not sep:
        return False
    try:
        salt = bytes.fromhex(salt_hex)
        stored_hash = bytes.fromhex(hash_hex)
    except ValueError:
        return False
    if not salt or not stored_hash:
        return False
    return hmac.compare_digest(_scrypt(plain_password, salt), stored_hash)
