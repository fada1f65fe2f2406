"""
Script to check an API key's status and signing readiness
Run with: python check_api_key.py <api_key>
"""
import asyncio
import sys
from sqlalchemy import select
from voter_roll.database import AsyncSessionLocal
from voter_roll.models.api_key import ApiKey
from voter_roll.core.security import hash_api_key, decrypt_api_key


async def check_api_key(api_key_str: str):
    """Check API key details"""
    async with AsyncSessionLocal() as db:
        result = await db.execute(
            select(ApiKey).where(ApiKey.key_hash == hash_api_key(api_key_str))
        )
        api_key = result.scalar_one_or_none()

        if not api_key:
            print(f"❌ API Key not found: {api_key_str[:12]}...")
            return

        print(f"✅ API Key Found!")
        print(f"   Key ID: {api_key.id}")
        print(f"   Key Name: {api_key.name}")
        print(f"   Key Prefix: {api_key.key_prefix}")
        print(f"   Status: {api_key.status.value}")
        print(f"   Last Used: {api_key.last_used_at or 'never'}")

        recovered = decrypt_api_key(api_key.encrypted_key) if api_key.encrypted_key else None
        if recovered == api_key_str:
            print(f"\n✅ Signed requests: supported")
        else:
            print(f"\n❌ Signed requests: stored key missing or encrypted with a different SECRET_KEY")

        if api_key.whitelist_urls:
            print(f"\n🔒 Whitelist URLs: {api_key.whitelist_urls}")
        else:
            print(f"\n🔓 No whitelist URLs (all origins allowed)")


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print("Usage: python check_api_key.py <api_key>")
        sys.exit(1)

    asyncio.run(check_api_key(sys.argv[1]))
