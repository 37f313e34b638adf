# burncore/keystore.py

from pathlib import Path

from cryptography.fernet import Fernet
from eth_account import Account
from eth_account.signers.local import LocalAccount

from burncore.storage import load_or_create_key

OWNER_KEY_FILE = "owner.key"
FERNET_KEY_FILE = "owner.fernet.key"


def load_or_create_owner_account(data_dir: Path) -> LocalAccount:
    """
    The owner account is created once per node and kept encrypted on disk.
    Its address is the engine's immutable owner.
    """
    data_dir = Path(data_dir)
    fernet = Fernet(load_or_create_key(data_dir / FERNET_KEY_FILE))
    key_file = data_dir / OWNER_KEY_FILE

    if key_file.exists():
        raw = fernet.decrypt(key_file.read_bytes())
        return Account.from_key(raw)

    account = Account.create()
    key_file.write_bytes(fernet.encrypt(bytes(account.key)))
    return account
