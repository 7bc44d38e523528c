"""Shared-password gate."""

import hmac
import logging

from pydantic import SecretStr

logger = logging.getLogger(__name__)


class AuthService:
    """
    Unlocks the board for this session when the shared password matches.

    A gate, not an auth system: no per-user identity, no lockout and no
    session expiry.
    """

    def __init__(self, password: SecretStr | str) -> None:
        if isinstance(password, SecretStr):
            password = password.get_secret_value()
        self._password = password
        self._authenticated = False

    @property
    def is_authenticated(self) -> bool:
        return self._authenticated

    def authenticate(self, candidate: str) -> bool:
        """Exact comparison against the shared password."""
        ok = hmac.compare_digest(candidate.encode(), self._password.encode())
        if ok:
            self._authenticated = True
            logger.info("Board unlocked")
        else:
            logger.info("Rejected password attempt")
        return ok

    def logout(self) -> None:
        self._authenticated = False
        logger.info("Board locked")
