"""
Principal: the identity decoded from a verified access or refresh token.

Profile fields are copied into the token at issuance so authenticated
requests need no user lookup. They go stale if the profile changes, until
the token is rotated or expires.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

from auth_service.models.user import Role, User


@dataclass(frozen=True)
class Principal:
    subject: str
    role: Role
    tenant: Optional[str] = None
    token_id: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None

    @classmethod
    def from_user(cls, user: User) -> "Principal":
        return cls(
            subject=str(user.id),
            role=Role(user.role),
            tenant=str(user.tenant_id) if user.tenant_id is not None else None,
            first_name=user.first_name,
            last_name=user.last_name,
            email=user.email,
        )

    @classmethod
    def from_claims(cls, claims: Dict[str, Any]) -> "Principal":
        """Build a principal from decoded JWT claims. Raises ValueError on a bad role."""
        tenant = claims.get("tenant")
        token_id = claims.get("jti")
        return cls(
            subject=str(claims["sub"]),
            role=Role(claims.get("role")),
            tenant=str(tenant) if tenant is not None else None,
            token_id=str(token_id) if token_id is not None else None,
            first_name=claims.get("firstName"),
            last_name=claims.get("lastName"),
            email=claims.get("email"),
        )

    def to_claims(self) -> Dict[str, Any]:
        claims: Dict[str, Any] = {"sub": self.subject, "role": self.role.value}
        if self.tenant is not None:
            claims["tenant"] = self.tenant
        for key, value in (
            ("firstName", self.first_name),
            ("lastName", self.last_name),
            ("email", self.email),
        ):
            if value is not None:
                claims[key] = value
        return claims
