# burncore/token_ledger.py

from typing import Protocol

from burncore.errors import InsufficientBalance
from burncore.utils import balance_key, norm


class TokenLedger(Protocol):
    def destroy(self, amount: int, from_: str) -> None:
        """Burns `amount` from `from_` or raises InsufficientBalance without side effects."""
        ...


class InMemoryTokenLedger:
    """
    Balances keyed "{address}:{asset}" for a single native asset.

    Only what the burn engine needs: credit at genesis, read, destroy.
    """

    def __init__(self, asset: str = "BURN"):
        self.asset = asset
        self.balances: dict[str, int] = {}

    @classmethod
    def from_allocations(cls, allocations: dict, asset: str = "BURN"):
        ledger = cls(asset)
        for addr, amount in allocations.items():
            ledger.credit(addr, int(amount))
        return ledger

    def credit(self, addr: str, amount: int):
        if amount <= 0:
            raise ValueError("Invalid amount")
        key = balance_key(addr, self.asset)
        self.balances[key] = self.balances.get(key, 0) + amount

    def balance_of(self, addr: str) -> int:
        return self.balances.get(balance_key(addr, self.asset), 0)

    def total_supply(self) -> int:
        return sum(v for v in self.balances.values() if v > 0)

    def destroy(self, amount: int, from_: str) -> None:
        if amount <= 0:
            raise ValueError("Invalid amount")

        key = balance_key(from_, self.asset)
        available = self.balances.get(key, 0)

        if available < amount:
            raise InsufficientBalance(norm(from_), amount, available)

        self.balances[key] = available - amount

    def to_dict(self):
        return {"asset": self.asset, "balances": dict(self.balances)}

    @classmethod
    def from_dict(cls, data: dict):
        ledger = cls(data.get("asset", "BURN"))
        ledger.balances = {k: int(v) for k, v in data.get("balances", {}).items()}
        return ledger
