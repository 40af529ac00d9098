import time


class TokenDenylist:
    """
    In-memory record of signed-out tokens, keyed by jti.

    Entries are dropped once the token would have expired anyway, so the
    set never outgrows the number of live sessions.
    """

    def __init__(self):
        self._revoked: dict[str, float] = {}

    def revoke(self, jti: str, expires_at: float) -> None:
        self._purge()
        self._revoked[jti] = expires_at

    def is_revoked(self, jti: str | None) -> bool:
        if jti is None:
            return False
        return jti in self._revoked

    def __len__(self) -> int:
        return len(self._revoked)

    def _purge(self) -> None:
        now = time.time()
        for jti in [j for j, exp in self._revoked.items() if exp <= now]:
            del self._revoked[jti]
