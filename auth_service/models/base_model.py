"""
Shared SQLAlchemy base and mixin for the auth service models.

- integer autoincrement primary key (users and tenants are addressed by numeric id)
- created_at / updated_at timestamps set by the database

Models do not persist themselves; services own the DBStorage they were given.
Responses are built with the marshmallow schemas in models/schemas.
"""

from __future__ import annotations

from sqlalchemy import Column, DateTime, Integer
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

# Declarative base for all models
Base = declarative_base()


class BaseModel:
    """
    Base mixin for all persistent models: id, created_at, updated_at.
    """

    id = Column(Integer, primary_key=True, autoincrement=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def __init__(self, *args, **kwargs):
        for key, value in kwargs.items():
            if key != "__class__":
                setattr(self, key, value)
