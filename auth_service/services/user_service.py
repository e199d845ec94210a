from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import joinedload, undefer

from auth_service.models.db_storage import DBStorage
from auth_service.models.user import Role, User
from auth_service.services.errors import ConflictError, ServerError
from auth_service.utils.security import hash_password

logger = logging.getLogger(__name__)


class UserService:
    def __init__(self, storage: DBStorage):
        self.storage = storage

    def _query(self):
        return self.storage.get_session().query(User)

    def create(
        self,
        *,
        first_name: str,
        last_name: str,
        email: str,
        password: str,
        role: str = Role.CUSTOMER.value,
        tenant_id: Optional[int] = None,
    ) -> User:
        if self._query().filter(User.email == email).first() is not None:
            raise ConflictError("Email already exists!")

        user = User(
            first_name=first_name,
            last_name=last_name,
            email=email,
            password_hash=hash_password(password),
            role=role,
            tenant_id=tenant_id,
        )
        try:
            self.storage.new(user)
            self.storage.save()
        except IntegrityError as exc:
            # lost a race against a concurrent registration with the same email
            if "unique" in str(exc.orig).lower():
                raise ConflictError("Email already exists!") from exc
            raise ServerError("Failed to store the user in the database") from exc
        except SQLAlchemyError as exc:
            raise ServerError("Failed to store the user in the database") from exc
        return user

    def find_by_email_with_password(self, email: str) -> Optional[User]:
        """The only lookup that loads the password digest."""
        return (
            self._query()
            .options(undefer(User.password_hash))
            .filter(User.email == email)
            .first()
        )

    def find_by_id(self, user_id: int) -> Optional[User]:
        return self._query().options(joinedload(User.tenant)).filter(User.id == user_id).first()

    def get_all(
        self,
        *,
        current_page: int,
        per_page: int,
        q: Optional[str] = None,
        role: Optional[str] = None,
    ) -> Tuple[List[User], int]:
        query = self._query()
        if q:
            term = f"%{q}%"
            full_name = User.first_name + " " + User.last_name
            query = query.filter(full_name.ilike(term) | User.email.ilike(term))
        if role:
            query = query.filter(User.role == role)

        total = query.count()
        rows = (
            query.options(joinedload(User.tenant))
            .order_by(User.id.desc())
            .offset((current_page - 1) * per_page)
            .limit(per_page)
            .all()
        )
        return rows, total

    def update_by_id(
        self,
        user_id: int,
        *,
        first_name: str,
        last_name: str,
        role: str,
        **changes,
    ) -> None:
        """
        Email and password are not updatable here. `tenant_id` is written only
        when passed; leaving it out keeps the current tenant.
        """
        values = {"first_name": first_name, "last_name": last_name, "role": role}
        if "tenant_id" in changes:
            values["tenant_id"] = changes["tenant_id"]
        try:
            self._query().filter(User.id == user_id).update(values, synchronize_session="fetch")
            self.storage.save()
        except SQLAlchemyError as exc:
            raise ServerError("Failed to update the user in the database") from exc

    def delete_by_id(self, user_id: int) -> None:
        try:
            self._query().filter(User.id == user_id).delete(synchronize_session="fetch")
            self.storage.save()
        except SQLAlchemyError as exc:
            raise ServerError("Failed to delete the user") from exc
