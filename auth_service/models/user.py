from __future__ import annotations

import enum

from sqlalchemy import Column, ForeignKey, Integer, String
from sqlalchemy.orm import deferred, relationship

from auth_service.models.base_model import Base, BaseModel


class Role(str, enum.Enum):
    ADMIN = "admin"
    MANAGER = "manager"
    CUSTOMER = "customer"

    @classmethod
    def values(cls) -> list[str]:
        return [r.value for r in cls]


class User(BaseModel, Base):
    __tablename__ = "users"
    first_name = Column(String(255), nullable=False)
    last_name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    # not loaded unless a query asks for it explicitly
    password_hash = deferred(Column(String(255), nullable=False))
    role = Column(String(20), nullable=False, default=Role.CUSTOMER.value)
    tenant_id = Column(Integer, ForeignKey("tenants.id", ondelete="SET NULL"), nullable=True)

    tenant = relationship("Tenant", back_populates="users")
    refresh_tokens = relationship(
        "RefreshToken",
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )