"""
Contract: User Repository
"""

from abc import ABC, abstractmethod

from cndes.core.entities.user import User


class IUserRepository(ABC):

    @abstractmethod
    def list_users(self) -> list[User]:
        ...

    @abstractmethod
    def get(self, username: str) -> User | None:
        ...

    @abstractmethod
    def add(self, user: User) -> User:
        """
        Raises:
            DuplicateEntryError: the username already exists.
        """
        ...

    @abstractmethod
    def set_password_hash(self, username: str, password_hash: str, revoke_sessions: bool = True) -> int:
        """
        Stores a new password hash.

        Args:
            revoke_sessions: bump the token version so tokens issued
                before the change stop being accepted.

        Returns:
            Number of rows changed (0 for unknown users).
        """
        ...
