# api/auth.py

import threading
import time

from eth_account import Account
from eth_account.messages import encode_defunct

from burncore.utils import canonical_request


class AuthError(Exception):
    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class RequestGuard:
    """
    Recovers the caller of a signed request and refuses stale or replayed
    ones. A request_id is remembered until its timestamp leaves the TTL
    window, after which the timestamp check alone rejects it.
    """

    def __init__(self, ttl: int = 300, time_fn=time.time):
        self.ttl = ttl
        self.time_fn = time_fn
        self._seen: dict[str, int] = {}
        self._lock = threading.Lock()

    def verify(self, request: dict, signature: str) -> str:
        now = int(self.time_fn())

        ts = request.get("timestamp")
        if not isinstance(ts, int) or abs(now - ts) > self.ttl:
            raise AuthError("Request expired")

        message = canonical_request(request)

        try:
            recovered = Account.recover_message(
                encode_defunct(text=message),
                signature=signature
            )
        except Exception:
            raise AuthError("Invalid signature format")

        rid = request.get("request_id")

        with self._lock:
            # Prune expired ids to prevent unbounded growth
            expired = [k for k, v in self._seen.items() if now - v > self.ttl]
            for k in expired:
                del self._seen[k]

            if rid in self._seen:
                raise AuthError("Request already used")

            self._seen[rid] = ts

        return recovered.lower()


def sign_request(account, request: dict) -> dict:
    """Client side: builds the {"request", "signature"} body for `account`."""
    message = canonical_request(request)
    signed = account.sign_message(encode_defunct(text=message))

    return {
        "request": request,
        "signature": "0x" + bytes(signed.signature).hex(),
    }
