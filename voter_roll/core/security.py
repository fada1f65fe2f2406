from typing import Optional
from cryptography.fernet import Fernet, InvalidToken
from voter_roll.config import get_settings
import secrets
import hashlib
import hmac
import base64
import time

settings = get_settings()


def generate_api_key(prefix: str = "vr_live") -> tuple[str, str, str]:
    """
    Generate a new API key
    Returns: (full_key, key_hash, key_prefix)
    """
    random_part = secrets.token_urlsafe(32)[:32]
    full_key = f"{prefix}_{random_part}"

    key_hash = hash_api_key(full_key)

    # Get prefix for display (first 12 chars)
    key_prefix = full_key[:12]

    return full_key, key_hash, key_prefix


def hash_api_key(api_key: str) -> str:
    """Hash an API key for storage"""
    return hashlib.sha256(api_key.encode()).hexdigest()


def _fernet() -> Fernet:
    key_material = hashlib.sha256(settings.SECRET_KEY.encode()).digest()
    return Fernet(base64.urlsafe_b64encode(key_material))


def encrypt_api_key(api_key: str) -> str:
    """Encrypt API key for storage"""
    return _fernet().encrypt(api_key.encode()).decode()


def decrypt_api_key(encrypted_key: str) -> Optional[str]:
    """Decrypt API key from storage"""
    try:
        return _fernet().decrypt(encrypted_key.encode()).decode()
    except InvalidToken:
        return None


def build_signing_payload(timestamp: str, method: str, path: str) -> str:
    """Canonical string covered by a request signature; `path` includes the query string"""
    return f"{timestamp}.{method.upper()}.{path}"


def sign_request(api_key: str, method: str, path: str, timestamp: Optional[str] = None) -> tuple[str, str]:
    """
    Sign a request with the API key
    Returns: (timestamp, hex signature)
    """
    if timestamp is None:
        timestamp = str(int(time.time()))
    payload = build_signing_payload(timestamp, method, path)
    signature = hmac.new(api_key.encode(), payload.encode(), hashlib.sha256).hexdigest()
    return timestamp, signature


def verify_signature(
    api_key: str,
    method: str,
    path: str,
    timestamp: str,
    signature: str,
    max_age_seconds: int,
    now: Optional[float] = None,
) -> bool:
    """Check a request signature and that its timestamp is within max_age_seconds of now"""
    try:
        signed_at = int(timestamp)
    except (TypeError, ValueError):
        return False

    if now is None:
        now = time.time()
    if abs(now - signed_at) > max_age_seconds:
        return False

    _, expected = sign_request(api_key, method, path, timestamp=timestamp)
    return hmac.compare_digest(expected, signature)
