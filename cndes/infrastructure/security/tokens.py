"""
Adapter: JWT session tokens (python-jose).

Claims: sub (username), role, ver (token version), exp, type.
"""

from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt

from cndes.core.entities.user import User
from cndes.core.exceptions import AuthenticationError
from cndes.core.interfaces.security import ITokenService, TokenClaims

TOKEN_TYPE = "access"


class JWTTokenService(ITokenService):

    def __init__(self, secret: str, algorithm: str = "HS256", expire_minutes: int = 480):
        self._secret = secret
        self._algorithm = algorithm
        self._expire = timedelta(minutes=expire_minutes)

    def issue(self, user: User) -> str:
        claims = {
            "sub": user.username,
            "role": user.role,
            "ver": user.token_version,
            "type": TOKEN_TYPE,
            "exp": datetime.now(timezone.utc) + self._expire,
        }
        return jwt.encode(claims, self._secret, algorithm=self._algorithm)

    def decode(self, token: str) -> TokenClaims:
        try:
            payload = jwt.decode(token, self._secret, algorithms=[self._algorithm])
        except JWTError as e:
            raise AuthenticationError("Invalid or expired token") from e

        if payload.get("type") != TOKEN_TYPE or not payload.get("sub"):
            raise AuthenticationError("Invalid token")
        return TokenClaims(
            username=payload["sub"],
            role=payload.get("role", ""),
            version=int(payload.get("ver", 0)),
        )
