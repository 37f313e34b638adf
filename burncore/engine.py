# burncore/engine.py

import threading
from collections.abc import Callable
from dataclasses import asdict, dataclass

from burncore.access import AccessGate, Action
from burncore.caps import SafetyCapPolicy
from burncore.clock import HeightSource
from burncore.errors import BurnEngineError, InvalidAmount
from burncore.formula import BurnBreakdown, BurnFormula
from burncore.ledger import DYNAMIC_BURN_REASON, MANUAL_BURN_REASON, AuditLedger, BurnRecord
from burncore.state import EngineState
from burncore.telemetry import Telemetry, get_logger
from burncore.token_ledger import TokenLedger
from burncore.utils import norm, require_uint

logger = get_logger(__name__)

STATUS_EXECUTED = "executed"


@dataclass(frozen=True)
class BurnCycleResult:
    burned: int
    total_burned: int
    remaining_headroom: int
    status: str
    cycle_id: int

    def to_dict(self):
        return asdict(self)


@dataclass(frozen=True)
class SystemStatus:
    paused: bool
    oracle: str
    max_cap: int
    total_cycles: int

    def to_dict(self):
        return asdict(self)


class BurnEngine:
    """
    Orchestrates one burn per call: gate -> compute -> validate -> destroy ->
    record -> telemetry.

    Every public call runs under one lock that guards config, totals and the
    audit ledger together. Checks and the height read run before any mutation
    and the external destroy runs before bookkeeping, so a rejected or failed
    call leaves the state untouched. When `persist` is set it runs after every
    mutation and before telemetry, and its failures reach the caller.
    """

    def __init__(
        self,
        state: EngineState,
        token_ledger: TokenLedger,
        height_source: HeightSource,
        ledger: AuditLedger | None = None,
        formula: BurnFormula | None = None,
        telemetry: Telemetry | None = None,
        persist: Callable[["BurnEngine"], None] | None = None,
    ):
        self.state = state
        self.token_ledger = token_ledger
        self.height_source = height_source
        self.ledger = ledger or AuditLedger(state.totals)
        self.formula = formula or BurnFormula()
        self.telemetry = telemetry or Telemetry()
        self.persist = persist

        if self.ledger.totals is not state.totals:
            raise ValueError("Audit ledger must share the engine totals")

        self.gate = AccessGate(state.config)
        self.caps = SafetyCapPolicy()
        self._lock = threading.RLock()

    # --------------------------------------------------
    # ADMIN
    # --------------------------------------------------

    def set_oracle(self, caller: str, new_oracle: str) -> None:
        with self._lock:
            self._authorize(caller, Action.ADMIN)

            if not new_oracle:
                raise ValueError("Missing oracle address")

            previous = self.state.config.oracle
            self.state.config.oracle = norm(new_oracle)

            self._commit(
                "oracle_updated",
                previous=previous,
                oracle=self.state.config.oracle,
                caller=norm(caller),
            )

    def set_paused(self, caller: str, paused: bool) -> None:
        with self._lock:
            self._authorize(caller, Action.ADMIN)

            previous = self.state.config.paused
            self.state.config.paused = bool(paused)

            self._commit(
                "pause_toggled",
                previous=previous,
                paused=self.state.config.paused,
                caller=norm(caller),
            )

    def set_max_burn_cap(self, caller: str, new_cap: int) -> None:
        require_uint("new_cap", new_cap)

        with self._lock:
            self._authorize(caller, Action.ADMIN)

            previous = self.state.config.max_burn_per_cycle
            self.state.config.max_burn_per_cycle = new_cap

            self._commit(
                "max_burn_cap_updated",
                previous=previous,
                max_cap=new_cap,
                caller=norm(caller),
            )

    # --------------------------------------------------
    # BURNS
    # --------------------------------------------------

    def manual_burn(self, caller: str, amount: int) -> int:
        with self._lock:
            self._authorize(caller, Action.MANUAL_BURN)

            if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
                self._reject(InvalidAmount(), caller, Action.MANUAL_BURN)

            actor = norm(caller)
            height = self.height_source.current_height()
            self._destroy(amount, actor, Action.MANUAL_BURN)

            record_id = self.ledger.append(amount, MANUAL_BURN_REASON, 0, 0, 0, actor, height)
            self.state.totals.total_burned += amount

            self._commit(
                "manual_burn",
                amount=amount,
                caller=actor,
                record_id=record_id,
            )

            return record_id

    def execute_dynamic_burn_cycle(
        self,
        caller: str,
        volatility: int,
        sentiment: int,
        volume_24h: int,
        liquidity_depth: int,
        moving_average_price: int,
    ) -> BurnCycleResult:
        # moving_average_price is logged with the cycle but takes no part in the amount
        with self._lock:
            self._authorize(caller, Action.DYNAMIC_BURN)

            for name, value in (
                ("volatility", volatility),
                ("sentiment", sentiment),
                ("volume_24h", volume_24h),
                ("liquidity_depth", liquidity_depth),
                ("moving_average_price", moving_average_price),
            ):
                require_uint(name, value)

            breakdown = self.formula.breakdown(volatility, sentiment, volume_24h, liquidity_depth)
            amount = breakdown.amount
            cap = self.state.config.max_burn_per_cycle

            try:
                self.caps.validate(amount, cap)
            except BurnEngineError as e:
                self._reject(e, caller, Action.DYNAMIC_BURN, amount=amount, cap=cap)

            actor = norm(caller)
            height = self.height_source.current_height()
            self._destroy(amount, actor, Action.DYNAMIC_BURN)

            record_id = self.ledger.append(
                amount,
                DYNAMIC_BURN_REASON,
                volatility,
                sentiment,
                liquidity_depth,
                actor,
                height,
            )
            self.state.totals.total_burned += amount

            self._commit(
                "dynamic_burn_executed",
                record_id=record_id,
                caller=actor,
                moving_average_price=moving_average_price,
                **breakdown.to_dict(),
            )

            return BurnCycleResult(
                burned=amount,
                total_burned=self.state.totals.total_burned,
                remaining_headroom=cap - amount,
                status=STATUS_EXECUTED,
                cycle_id=record_id,
            )

    def preview_dynamic_burn(self, volatility, sentiment, volume_24h, liquidity_depth) -> BurnBreakdown:
        """Formula breakdown for the given inputs; checks nothing and commits nothing."""
        return self.formula.breakdown(volatility, sentiment, volume_24h, liquidity_depth)

    # --------------------------------------------------
    # QUERIES
    # --------------------------------------------------

    def get_total_burned(self) -> int:
        with self._lock:
            return self.state.totals.total_burned

    def get_burn_history(self, record_id: int) -> BurnRecord | None:
        with self._lock:
            return self.ledger.get(record_id)

    def list_burn_history(self, start: int = 1, limit: int = 100) -> list[BurnRecord]:
        with self._lock:
            return self.ledger.page(start, limit)

    def get_system_status(self) -> SystemStatus:
        with self._lock:
            config = self.state.config
            return SystemStatus(
                paused=config.paused,
                oracle=config.oracle,
                max_cap=config.max_burn_per_cycle,
                total_cycles=self.state.totals.total_cycles,
            )

    def snapshot(self) -> dict:
        with self._lock:
            return {
                "state": self.state.to_dict(),
                "records": [r.to_dict() for r in self.ledger],
            }

    # --------------------------------------------------
    # HELPERS
    # --------------------------------------------------

    def _authorize(self, caller, action):
        decision = self.gate.authorize(caller, action)
        try:
            decision.raise_for_denial()
        except BurnEngineError as e:
            self._reject(e, caller, action)

    def _commit(self, event, **fields):
        if self.persist is not None:
            try:
                self.persist(self)
            except Exception as e:
                logger.error("engine_persist_failed", telemetry_event=event, error=str(e))
                raise

        self.telemetry.emit(event, **fields)

    def _destroy(self, amount, actor, action):
        try:
            self.token_ledger.destroy(amount, actor)
        except BurnEngineError as e:
            self._reject(e, actor, action, amount=amount)

    def _reject(self, error, caller, action, **fields):
        logger.warning(
            "burn_engine_rejected",
            action=action.value,
            caller=norm(caller) if isinstance(caller, str) else caller,
            error=error.code,
            message=error.message,
            **fields,
        )
        raise error
