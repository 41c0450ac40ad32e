from __future__ import annotations

from werkzeug.security import check_password_hash

from ..core.exceptions import AuthenticationError


class AuthService:
    """Use case: the admin login gate.

    One admin account, configured through settings as a username plus a
    werkzeug password hash.
    """

    def __init__(self, username: str, password_hash: str):
        self._username = username
        self._password_hash = password_hash

    def authenticate(self, username: str, password: str) -> str:
        if not self._password_hash or username != self._username:
            raise AuthenticationError("Invalid username or password")

        try:
            ok = check_password_hash(self._password_hash, password or "")
        except (TypeError, ValueError):
            # e.g. a placeholder or corrupted hash in settings
            ok = False

        if not ok:
            raise AuthenticationError("Invalid username or password")
        return self._username
