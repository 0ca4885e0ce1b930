"""
Adapter: bcrypt password hasher.
"""

import bcrypt

from cndes.core.interfaces.security import IPasswordHasher

# bcrypt only looks at the first 72 bytes
BCRYPT_MAX_BYTES = 72


class BcryptPasswordHasher(IPasswordHasher):

    def __init__(self, rounds: int = 12):
        self._rounds = rounds

    def hash(self, password: str) -> str:
        password_bytes = password.encode("utf-8")[:BCRYPT_MAX_BYTES]
        return bcrypt.hashpw(password_bytes, bcrypt.gensalt(rounds=self._rounds)).decode("utf-8")

    def verify(self, password: str, password_hash: str) -> bool:
        password_bytes = password.encode("utf-8")[:BCRYPT_MAX_BYTES]
        try:
            return bcrypt.checkpw(password_bytes, password_hash.encode("utf-8"))
        except ValueError:
            # malformed hash in the users table
            return False

    def is_hash(self, value: str) -> bool:
        return bool(value) and value.startswith(("$2a$", "$2b$", "$2y$")) and len(value) == 60
