from auth_service.models.base_model import Base, BaseModel
from auth_service.models.db_storage import DBStorage
from auth_service.models.principal import Principal
from auth_service.models.refresh_token import RefreshToken
from auth_service.models.tenant import Tenant
from auth_service.models.user import Role, User

__all__ = [
    "Base",
    "BaseModel",
    "DBStorage",
    "Principal",
    "RefreshToken",
    "Role",
    "Tenant",
    "User",
]
