from __future__ import annotations

import unittest
from http.cookies import SimpleCookie
from typing import Optional

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from auth_service.api import create_app
from auth_service.models.principal import Principal
from auth_service.models.refresh_token import RefreshToken
from auth_service.models.user import Role, User
from auth_service.services.container import EXTENSION_KEY

REFRESH_SECRET = "test-refresh-secret-0123456789abcdef"


def _generate_private_pem() -> str:
    key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    return key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode("utf-8")


# one key pair per test run; generating RSA keys is slow
PRIVATE_KEY_PEM = _generate_private_pem()


def is_jwt(token: Optional[str]) -> bool:
    if not token:
        return False
    parts = token.split(".")
    return len(parts) == 3 and all(parts)


def response_cookies(response) -> dict:
    """name -> morsel for every Set-Cookie header on the response."""
    jar = SimpleCookie()
    for header in response.headers.getlist("Set-Cookie"):
        jar.load(header)
    return dict(jar)


def cookie_header(access_token: Optional[str] = None, refresh_token: Optional[str] = None) -> dict:
    parts = []
    if access_token is not None:
        parts.append(f"accessToken={access_token}")
    if refresh_token is not None:
        parts.append(f"refreshToken={refresh_token}")
    return {"Cookie": "; ".join(parts)}


class AppTestCase(unittest.TestCase):
    """Fresh app and in-memory database per test."""

    def setUp(self):
        self.app = create_app(
            "testing",
            config={
                "PRIVATE_KEY": PRIVATE_KEY_PEM,
                "PRIVATE_KEY_PATH": None,
                "REFRESH_TOKEN_SECRET": REFRESH_SECRET,
                "DATABASE_URL": "sqlite://",
            },
        )
        self.services = self.app.extensions[EXTENSION_KEY]
        self.storage = self.services.storage
        # cookies are passed explicitly on each request
        self.client = self.app.test_client(use_cookies=False)

    def tearDown(self):
        self.storage.close()
        self.storage.drop_all()
        self.storage.engine.dispose()

    def session(self):
        return self.storage.get_session()

    def create_user(
        self,
        role: Role = Role.CUSTOMER,
        email: str = "pankaj@testemail.com",
        password: str = "secret123",
        first_name: str = "Pankaj",
        last_name: str = "Kumar",
        tenant_id: Optional[int] = None,
    ) -> User:
        return self.services.users.create(
            first_name=first_name,
            last_name=last_name,
            email=email,
            password=password,
            role=role.value,
            tenant_id=tenant_id,
        )

    def access_token_for(self, user: User) -> str:
        return self.services.tokens.issue_access_token(Principal.from_user(user))

    def refresh_token_for(self, user: User) -> tuple[str, RefreshToken]:
        record = self.services.token_store.persist(user)
        token = self.services.tokens.issue_refresh_token(Principal.from_user(user), record.id)
        return token, record

    def admin_headers(self) -> dict:
        admin = self.create_user(role=Role.ADMIN, email="admin@testemail.com")
        return cookie_header(access_token=self.access_token_for(admin))

    def manager_headers(self) -> dict:
        manager = self.create_user(role=Role.MANAGER, email="manager@testemail.com")
        return cookie_header(access_token=self.access_token_for(manager))

    def refresh_token_count(self, user_id: Optional[int] = None) -> int:
        query = self.session().query(RefreshToken)
        if user_id is not None:
            query = query.filter(RefreshToken.user_id == user_id)
        return query.count()
