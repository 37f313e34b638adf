# burncore/storage.py

import json
from pathlib import Path

from cryptography.fernet import Fernet

from burncore.ledger import AuditLedger
from burncore.state import EngineState

SNAPSHOT_FILE = "engine.enc"
SNAPSHOT_KEY_FILE = "node.fernet.key"


def load_or_create_key(key_file: Path) -> bytes:
    if key_file.exists():
        return key_file.read_bytes()

    key_file.parent.mkdir(parents=True, exist_ok=True)
    key = Fernet.generate_key()
    key_file.write_bytes(key)
    return key


class EngineStorage:
    """Encrypted snapshot of engine state, audit records and token balances."""

    def __init__(self, data_dir: Path):
        self.data_dir = Path(data_dir)
        self.path = self.data_dir / SNAPSHOT_FILE
        self.fernet = Fernet(load_or_create_key(self.data_dir / SNAPSHOT_KEY_FILE))

    def save(self, engine):
        payload = engine.snapshot()

        to_dict = getattr(engine.token_ledger, "to_dict", None)
        if to_dict:
            payload["token_ledger"] = to_dict()

        encrypted = self.fernet.encrypt(json.dumps(payload, sort_keys=True).encode())

        # atomic replace
        tmp = self.path.with_suffix(".tmp")
        tmp.write_bytes(encrypted)
        tmp.replace(self.path)

    def load(self):
        if not self.path.exists():
            return None
        return json.loads(self.fernet.decrypt(self.path.read_bytes()))


def restore_state(snapshot: dict, owner: str):
    """
    Rebuilds EngineState and AuditLedger from a snapshot. The ledger is
    re-checked against the totals and the owner must match the running one.
    """
    state = EngineState.from_dict(snapshot["state"])

    if state.config.owner != owner.lower():
        raise ValueError(
            f"Snapshot owner {state.config.owner} does not match node owner {owner.lower()}"
        )

    ledger = AuditLedger.restore(state.totals, snapshot.get("records", []))
    return state, ledger
