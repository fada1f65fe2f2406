from fastapi import Depends, HTTPException, status, Header, Request
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update
from typing import Optional
from voter_roll.config import get_settings
from voter_roll.database import get_db
from voter_roll.models.api_key import ApiKey, ApiKeyStatus
from voter_roll.core.security import hash_api_key, decrypt_api_key, verify_signature
from datetime import datetime, timezone
from urllib.parse import urlparse
import logging

logger = logging.getLogger(__name__)


def check_whitelist_url(api_key: ApiKey, request: Request) -> bool:
    """
    Check if request origin is in whitelist URLs
    Returns True if whitelist is empty/null (no restriction) or origin matches
    """
    if not api_key.whitelist_urls:
        return True  # No restriction

    origin = request.headers.get("Origin") or request.headers.get("Referer")
    if not origin:
        return False  # No origin header, reject if whitelist exists

    origin_parsed = urlparse(origin)
    origin_domain = f"{origin_parsed.scheme}://{origin_parsed.netloc}"

    for whitelist_url in api_key.whitelist_urls:
        whitelist_parsed = urlparse(whitelist_url)
        whitelist_domain = f"{whitelist_parsed.scheme}://{whitelist_parsed.netloc}"

        # Exact match or subdomain match
        if origin_domain == whitelist_domain or origin_domain.endswith(f".{whitelist_parsed.netloc}"):
            return True

    return False


def signed_path(request: Request) -> str:
    """Path plus raw query string, as the client signed it"""
    query = request.url.query
    return f"{request.url.path}?{query}" if query else request.url.path


async def verify_api_key(
    request: Request,
    x_api_key: str = Header(...),
    x_timestamp: Optional[str] = Header(None),
    x_signature: Optional[str] = Header(None),
    db: AsyncSession = Depends(get_db)
) -> ApiKey:
    """
    Verify API key and request signature, and return the matching key
    Also checks whitelist URLs if configured
    """
    settings = get_settings()
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid API key",
        headers={"WWW-Authenticate": "ApiKey"},
    )

    key_hash = hash_api_key(x_api_key)

    result = await db.execute(
        select(ApiKey).where(
            ApiKey.key_hash == key_hash,
            ApiKey.status == ApiKeyStatus.ACTIVE
        )
    )
    api_key = result.scalar_one_or_none()

    if api_key is None:
        raise credentials_exception

    if not check_whitelist_url(api_key, request):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Request origin not whitelisted for this API key"
        )

    if settings.REQUEST_SIGNING_REQUIRED:
        plain_key = decrypt_api_key(api_key.encrypted_key) if api_key.encrypted_key else None
        if plain_key is None:
            logger.warning(f"API key {api_key.id} has no recoverable key for signature checks")
            raise credentials_exception

        if not x_timestamp or not x_signature or not verify_signature(
            plain_key,
            request.method,
            signed_path(request),
            x_timestamp,
            x_signature,
            settings.SIGNATURE_MAX_AGE_SECONDS,
        ):
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid or expired request signature",
                headers={"WWW-Authenticate": "ApiKey"},
            )

    await db.execute(
        update(ApiKey)
        .where(ApiKey.id == api_key.id)
        .values(last_used_at=datetime.now(timezone.utc))
    )
    await db.commit()

    return api_key
