# burncore/utils.py

import json


def canonical_json(obj) -> bytes:
    return json.dumps(obj, sort_keys=True, separators=(",", ":")).encode()


def canonical_request(request: dict) -> str:
    """
    Returns the canonical text a client signs for an API request
    (sorted keys, no whitespace). MUST match the client side.
    """
    return canonical_json(request).decode()


def norm(addr: str | None) -> str | None:
    return addr.lower() if addr else addr


def balance_key(addr: str, asset: str) -> str:
    if addr and addr.startswith("0x"):
        addr = addr.lower()
    return f"{addr}:{asset}"


def require_uint(name: str, value) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{name} must be an int, got {type(value).__name__}")
    if value < 0:
        raise ValueError(f"{name} must be non-negative")
    return value
