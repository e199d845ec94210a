from sqlalchemy import Column, String
from sqlalchemy.orm import relationship

from auth_service.models.base_model import Base, BaseModel


class Tenant(BaseModel, Base):
    __tablename__ = "tenants"
    name = Column(String(100), nullable=False)
    address = Column(String(255), nullable=False)

    users = relationship("User", back_populates="tenant", passive_deletes=True)
