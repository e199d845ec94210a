"""
RefreshToken model: one row per issued refresh token.

The row id is the token's `jti`. A refresh token is valid only while its row
exists; expires_at is advisory (the signed token carries its own `exp`).
Fields:
- id (primary key, the revocation handle)
- user_id - FK to users.id, cascades on user delete
- expires_at, created_at, updated_at
"""
from sqlalchemy import Column, DateTime, ForeignKey, Integer
from sqlalchemy.orm import relationship

from auth_service.models.base_model import Base, BaseModel


class RefreshToken(BaseModel, Base):
    __tablename__ = "refresh_tokens"

    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    expires_at = Column(DateTime(timezone=True), nullable=False)

    user = relationship("User", back_populates="refresh_tokens")

    def __repr__(self):
        return f"<RefreshToken id={self.id} user_id={self.user_id}>"
