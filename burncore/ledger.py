# burncore/ledger.py

from dataclasses import asdict, dataclass

from burncore.state import Totals
from burncore.utils import norm

MANUAL_BURN_REASON = "manual-user-burn"
DYNAMIC_BURN_REASON = "ai-dynamic-burn-v2"

REASONS = frozenset({MANUAL_BURN_REASON, DYNAMIC_BURN_REASON})


@dataclass(frozen=True)
class BurnRecord:
    id: int
    height: int
    amount: int
    actor: str
    reason: str
    volatility: int
    sentiment: int
    liquidity: int

    def to_dict(self):
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict):
        return cls(
            id=int(data["id"]),
            height=int(data["height"]),
            amount=int(data["amount"]),
            actor=data["actor"],
            reason=data["reason"],
            volatility=int(data.get("volatility", 0)),
            sentiment=int(data.get("sentiment", 0)),
            liquidity=int(data.get("liquidity", 0)),
        )


class AuditLedger:
    """
    Append-only record of every successful burn.

    Ids come from `Totals.total_cycles`: append bumps the counter and uses the
    new value, so ids are 1, 2, 3... with no gaps, and the counter always
    equals the number of records.
    """

    def __init__(self, totals: Totals):
        self.totals = totals
        self._records: dict[int, BurnRecord] = {}

    def append(self, amount, reason, volatility, sentiment, liquidity, actor, height) -> int:
        if amount <= 0:
            raise ValueError("Ledger amount must be positive")
        if reason not in REASONS:
            raise ValueError(f"Unknown burn reason: {reason}")

        record_id = self.totals.total_cycles + 1

        record = BurnRecord(
            id=record_id,
            height=height,
            amount=amount,
            actor=norm(actor),
            reason=reason,
            volatility=volatility,
            sentiment=sentiment,
            liquidity=liquidity,
        )

        self._records[record_id] = record
        self.totals.total_cycles = record_id

        return record_id

    def get(self, record_id: int) -> BurnRecord | None:
        return self._records.get(record_id)

    def page(self, start: int = 1, limit: int = 100) -> list[BurnRecord]:
        if limit <= 0:
            return []
        start = max(start, 1)
        end = min(start + limit, self.totals.total_cycles + 1)
        return [self._records[i] for i in range(start, end)]

    def __len__(self):
        return len(self._records)

    def __iter__(self):
        for i in range(1, self.totals.total_cycles + 1):
            yield self._records[i]

    # --------------------------------------------------
    # SNAPSHOT RESTORE
    # --------------------------------------------------

    @classmethod
    def restore(cls, totals: Totals, records: list[dict]):
        """
        Rebuilds a ledger from persisted records and checks it against the
        persisted totals before handing it back.
        """
        ledger = cls(totals)

        burned = 0
        for expected_id, raw in enumerate(sorted(records, key=lambda r: r["id"]), start=1):
            record = BurnRecord.from_dict(raw)

            if record.id != expected_id:
                raise ValueError(f"Ledger gap: expected id {expected_id}, got {record.id}")
            if record.amount <= 0:
                raise ValueError(f"Ledger record {record.id} has non-positive amount")
            if record.reason not in REASONS:
                raise ValueError(f"Ledger record {record.id} has unknown reason")

            ledger._records[record.id] = record
            burned += record.amount

        if len(ledger._records) != totals.total_cycles:
            raise ValueError("total_cycles does not match ledger size")
        if burned != totals.total_burned:
            raise ValueError("total_burned does not match ledger sum")

        return ledger
