"""
Wiring of the service components.

create_app() builds one Services instance per application and keeps it in
app.extensions; every component receives its collaborators through its
constructor.
"""
from __future__ import annotations

from dataclasses import dataclass

from flask import current_app

from auth_service.models.db_storage import DBStorage
from auth_service.services.auth_flow import AuthFlow
from auth_service.services.refresh_token_store import RefreshTokenStore
from auth_service.services.tenant_service import TenantService
from auth_service.services.token_service import DEFAULT_ISSUER, TokenService
from auth_service.services.user_service import UserService
from auth_service.utils.keys import KeyProvider

EXTENSION_KEY = "auth_service"


@dataclass
class Services:
    storage: DBStorage
    keys: KeyProvider
    tokens: TokenService
    token_store: RefreshTokenStore
    users: UserService
    tenants: TenantService
    auth_flow: AuthFlow

    @classmethod
    def build(cls, storage: DBStorage, keys: KeyProvider, issuer: str = DEFAULT_ISSUER) -> "Services":
        tokens = TokenService(keys, issuer=issuer)
        token_store = RefreshTokenStore(storage)
        users = UserService(storage)
        return cls(
            storage=storage,
            keys=keys,
            tokens=tokens,
            token_store=token_store,
            users=users,
            tenants=TenantService(storage),
            auth_flow=AuthFlow(users, tokens, token_store),
        )


def get_services() -> Services:
    return current_app.extensions[EXTENSION_KEY]
