import base64
import hashlib
import json
import time

from cryptography.fernet import Fernet, InvalidToken
from pwdlib import PasswordHash

from taskboard.core.config import get_settings

password_hash = PasswordHash.recommended()


def hash_password(password: str) -> str:
    """Hash a password using Argon2id."""
    return password_hash.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its Argon2id hash."""
    return password_hash.verify(plain_password, hashed_password)


def _session_fernet(secret_key: str | None = None) -> Fernet:
    """Derive the Fernet key used for session tokens from the app secret."""
    secret = secret_key or get_settings().secret_key
    digest = hashlib.sha256(secret.encode()).digest()
    return Fernet(base64.urlsafe_b64encode(digest))


def issue_session_token(
    user_id: str,
    *,
    secret_key: str | None = None,
    now: float | None = None,
) -> str:
    """Create a signed session token carrying the user id and its issue time.

    Fernet tokens are HMAC-signed and embed their creation timestamp, which
    is what expiry is checked against on verification.
    """
    payload = json.dumps({"sub": user_id}).encode()
    f = _session_fernet(secret_key)
    issued_at = int(time.time() if now is None else now)
    return f.encrypt_at_time(payload, issued_at).decode()


def read_session_token(
    token: str,
    *,
    max_age_seconds: int,
    secret_key: str | None = None,
    now: float | None = None,
) -> str:
    """Return the user id from a session token.

    Raises:
        ValueError: If the signature does not match or the token is malformed.
        TimeoutError: If the token is older than ``max_age_seconds``.
    """
    f = _session_fernet(secret_key)
    current = int(time.time() if now is None else now)
    try:
        issued_at = f.extract_timestamp(token.encode())
    except (InvalidToken, ValueError) as e:
        raise ValueError("Invalid session token") from e

    # Fernet only rejects tokens strictly older than the ttl; a token issued
    # at T must already be expired at T + lifetime.
    if current >= issued_at + max_age_seconds:
        raise TimeoutError("Session token expired")

    try:
        payload = f.decrypt_at_time(token.encode(), max_age_seconds, current)
        user_id = json.loads(payload)["sub"]
    except (InvalidToken, ValueError, KeyError) as e:
        raise ValueError("Invalid session token") from e
    if not isinstance(user_id, str) or not user_id:
        raise ValueError("Invalid session token")
    return user_id
