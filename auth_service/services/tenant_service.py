from __future__ import annotations

from typing import List, Optional, Tuple

from auth_service.models.db_storage import DBStorage
from auth_service.models.tenant import Tenant


class TenantService:
    def __init__(self, storage: DBStorage):
        self.storage = storage

    def _query(self):
        return self.storage.get_session().query(Tenant)

    def create(self, *, name: str, address: str) -> Tenant:
        tenant = Tenant(name=name, address=address)
        self.storage.new(tenant)
        self.storage.save()
        return tenant

    def get_all(self, *, current_page: int, per_page: int, q: Optional[str] = None) -> Tuple[List[Tenant], int]:
        query = self._query()
        if q:
            term = f"%{q}%"
            query = query.filter(Tenant.name.ilike(term) | Tenant.address.ilike(term))
        total = query.count()
        rows = query.order_by(Tenant.id.desc()).offset((current_page - 1) * per_page).limit(per_page).all()
        return rows, total

    def get_by_id(self, tenant_id: int) -> Optional[Tenant]:
        return self._query().filter(Tenant.id == tenant_id).first()

    def update_by_id(self, tenant_id: int, *, name: str, address: str) -> None:
        self._query().filter(Tenant.id == tenant_id).update(
            {"name": name, "address": address}, synchronize_session="fetch"
        )
        self.storage.save()

    def delete_by_id(self, tenant_id: int) -> None:
        self._query().filter(Tenant.id == tenant_id).delete(synchronize_session="fetch")
        self.storage.save()
