from sqlalchemy import Column, String, DateTime, Enum, JSON
from sqlalchemy.sql import func
import enum
from voter_roll.database import Base
import uuid


class ApiKeyStatus(str, enum.Enum):
    ACTIVE = "active"
    REVOKED = "revoked"


class ApiKey(Base):
    __tablename__ = "api_keys"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String, nullable=False)
    key_hash = Column(String, nullable=False, unique=True, index=True)
    key_prefix = Column(String(16), nullable=False)  # First 12 chars for display
    status = Column(Enum(ApiKeyStatus), nullable=False, default=ApiKeyStatus.ACTIVE)

    # Security: Whitelist URLs - API will only respond to requests from these URLs
    # If null/empty, no restriction (allow all)
    whitelist_urls = Column(JSON, nullable=True)  # ["https://example.com", "https://app.example.com"]

    # Encrypted full key, needed to verify request signatures
    encrypted_key = Column(String, nullable=True)

    last_used_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now(), server_default=func.now())
