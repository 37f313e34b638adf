# burncore/node.py

from burncore.clock import SlotHeightSource
from burncore.engine import BurnEngine
from burncore.ledger import AuditLedger
from burncore.state import EngineState, SystemConfig
from burncore.storage import EngineStorage, restore_state
from burncore.telemetry import Telemetry, get_logger
from burncore.token_ledger import InMemoryTokenLedger

logger = get_logger(__name__)


def build_engine(settings, owner: str, storage: EngineStorage | None = None) -> BurnEngine:
    """
    Loads the engine from its snapshot, or creates a fresh one seeded with the
    genesis allocations. When `storage` is given the snapshot is rewritten after
    every successful mutating call.
    """
    snapshot = storage.load() if storage else None

    if snapshot:
        state, ledger = restore_state(snapshot, owner)
        token_ledger = InMemoryTokenLedger.from_dict(
            snapshot.get("token_ledger", {"asset": settings.native_asset})
        )
        logger.info(
            "engine_restored",
            owner=state.config.owner,
            total_cycles=state.totals.total_cycles,
            total_burned=state.totals.total_burned,
        )
    else:
        state = EngineState(
            SystemConfig(
                owner=owner,
                oracle=settings.oracle,
                max_burn_per_cycle=settings.max_burn_per_cycle,
            )
        )
        ledger = AuditLedger(state.totals)
        token_ledger = InMemoryTokenLedger.from_allocations(
            settings.genesis_allocations, asset=settings.native_asset
        )
        logger.info("engine_created", owner=state.config.owner, oracle=state.config.oracle)

    return BurnEngine(
        state,
        token_ledger,
        SlotHeightSource(settings.slot_duration),
        ledger=ledger,
        telemetry=Telemetry(),
        persist=storage.save if storage else None,
    )
