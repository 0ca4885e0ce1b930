"""
Use Cases: Authenticate User / Change Password

Login checks a salted hash and issues a bearer token; every request
then resolves the token back to a live user on the server.
"""

import hmac
import logging

from cndes.core.entities.user import AuthSession, User
from cndes.core.exceptions import AuthenticationError, InvalidInputError, PermissionDeniedError
from cndes.core.interfaces.security import IPasswordHasher, ITokenService
from cndes.core.interfaces.user_repository import IUserRepository

logger = logging.getLogger(__name__)


class AuthenticateUserUseCase:

    def __init__(self, users: IUserRepository, hasher: IPasswordHasher, tokens: ITokenService):
        self._users = users
        self._hasher = hasher
        self._tokens = tokens

    def execute(self, username: str, password: str) -> AuthSession:
        """
        Raises:
            AuthenticationError: unknown user or wrong password
                (the two are indistinguishable to the caller).
        """
        user = self._users.get(username) if username else None
        if user is None or not password or not self._check_password(user, password):
            logger.warning(f"Failed login for {username!r}")
            raise AuthenticationError("Invalid credentials")

        logger.info(f"User {user.username} logged in")
        return AuthSession(user=user, token=self._tokens.issue(user))

    def resolve(self, token: str) -> User:
        """Maps a bearer token to the current user, rejecting revoked sessions."""
        claims = self._tokens.decode(token)
        user = self._users.get(claims.username)
        if user is None or user.token_version != claims.version:
            raise AuthenticationError("Session expired, log in again")
        return user

    def _check_password(self, user: User, password: str) -> bool:
        if self._hasher.is_hash(user.password_hash):
            return self._hasher.verify(password, user.password_hash)

        # Rows migrated from the old registry still hold the plain password
        if not hmac.compare_digest(password.encode("utf-8"), user.password_hash.encode("utf-8")):
            return False
        user.password_hash = self._hasher.hash(password)
        self._users.set_password_hash(user.username, user.password_hash, revoke_sessions=False)
        logger.info(f"Upgraded legacy password storage for {user.username}")
        return True


class ChangePasswordUseCase:

    def __init__(self, users: IUserRepository, hasher: IPasswordHasher, min_length: int = 6):
        self._users = users
        self._hasher = hasher
        self._min_length = min_length

    def execute(self, actor: User, username: str, new_password: str) -> int:
        """
        Admins may change anyone's password, other users only their own.

        Returns:
            Rows changed (0 when the user does not exist).
        """
        if not actor.is_admin and actor.username != username:
            raise PermissionDeniedError("Only administrators can change other users' passwords")
        if not new_password or len(new_password) < self._min_length:
            raise InvalidInputError(f"Password must be at least {self._min_length} characters long")

        changes = self._users.set_password_hash(username, self._hasher.hash(new_password))
        logger.info(f"Password change for {username} by {actor.username} ({changes} row(s))")
        return changes
