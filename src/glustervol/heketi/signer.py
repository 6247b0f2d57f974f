"""JWT request signing for the Heketi REST API.

Every request carries a short-lived HS256 token whose ``qsh`` claim
binds it to one method and endpoint. Tokens are built immediately
before each request is sent and never reused.
"""

import hashlib
import time
from collections.abc import Callable

import jwt

from glustervol.core.errors import AuthError

ALGORITHM = "HS256"


def compute_qsh(method: str, endpoint: str) -> str:
    """Query string hash: hex SHA-256 of ``METHOD&endpoint``."""
    return hashlib.sha256(f"{method}&{endpoint}".encode()).hexdigest()


class RequestSigner:
    """Builds bearer tokens for Heketi requests."""

    def __init__(
        self,
        secret: str,
        issuer: str = "admin",
        ttl: int = 30,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._secret = secret
        self._issuer = issuer
        self._ttl = ttl
        self._clock = clock

    def claims(self, method: str, endpoint: str) -> dict:
        now = int(self._clock())
        return {
            "iss": self._issuer,
            "iat": now,
            "exp": now + self._ttl,
            "qsh": compute_qsh(method, endpoint),
        }

    def token(self, method: str, endpoint: str) -> str:
        """Sign a token for one request.

        Raises:
            AuthError: If the secret is missing or encoding fails.
        """
        if not self._secret:
            raise AuthError("Heketi secret is not configured")
        try:
            return jwt.encode(
                self.claims(method, endpoint), self._secret, algorithm=ALGORITHM
            )
        except (jwt.PyJWTError, TypeError, ValueError) as e:
            raise AuthError(f"Failed to sign {method} {endpoint}: {e}") from e

    def headers(self, method: str, endpoint: str) -> dict[str, str]:
        """Get the Authorization header for one request."""
        return {"Authorization": f"Bearer {self.token(method, endpoint)}"}
