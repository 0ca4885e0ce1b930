"""
Contracts: Password Hasher and Token Service
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass

from cndes.core.entities.user import User


@dataclass
class TokenClaims:
    username: str
    role: str
    version: int


class IPasswordHasher(ABC):

    @abstractmethod
    def hash(self, password: str) -> str:
        ...

    @abstractmethod
    def verify(self, password: str, password_hash: str) -> bool:
        ...

    @abstractmethod
    def is_hash(self, value: str) -> bool:
        """True when value looks like a hash produced by this hasher."""
        ...


class ITokenService(ABC):

    @abstractmethod
    def issue(self, user: User) -> str:
        ...

    @abstractmethod
    def decode(self, token: str) -> TokenClaims:
        """
        Raises:
            AuthenticationError: invalid signature, malformed or expired token.
        """
        ...
