"""
RefreshToken model: one row per outstanding refresh-token grant.
Fields:
- id (String(36)) - embedded in the signed refresh token as `tokenId`
- token (Text) - the signed token itself, compared verbatim on redemption
- user_id (String(36)) - FK to users.id
- expires_at, created_at (naive UTC)

Rows are single-use: redeemed, stale and logged-out rows are deleted, never flagged.
"""
from sqlalchemy import Column, String, Text, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from reelvault.models.base_model import BaseModel, Base


class RefreshToken(BaseModel, Base):
    __tablename__ = "refresh_tokens"

    token = Column(Text, nullable=False, default="")
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    expires_at = Column(DateTime, nullable=False, index=True)

    user = relationship("User", back_populates="refresh_tokens")

    def __repr__(self):
        return f"<RefreshToken id={self.id} user_id={self.user_id}>"
