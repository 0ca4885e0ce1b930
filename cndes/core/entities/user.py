"""
Entity: User

A registry operator. Users are pre-provisioned; only the password changes.
"""

from dataclasses import dataclass

ADMIN_ROLE = "Admin"


@dataclass
class User:
    username: str
    name: str = ""
    role: str = "Usuario"
    password_hash: str = ""
    token_version: int = 0

    @property
    def is_admin(self) -> bool:
        return self.role == ADMIN_ROLE

    def public_view(self) -> dict:
        """Reduced projection, never carries the password."""
        return {"username": self.username, "role": self.role, "name": self.name}


@dataclass
class AuthSession:
    """Result of a successful login."""
    user: User
    token: str
    token_type: str = "bearer"
