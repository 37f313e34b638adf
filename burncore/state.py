# burncore/state.py

from burncore.utils import norm

DEFAULT_MAX_BURN_PER_CYCLE = 1_000_000 * 10**18


class SystemConfig:
    def __init__(
        self,
        owner: str,
        oracle: str | None = None,
        paused: bool = False,
        max_burn_per_cycle: int = DEFAULT_MAX_BURN_PER_CYCLE,
    ):
        if not owner:
            raise ValueError("Missing owner")

        self._owner = norm(owner)
        self.oracle = norm(oracle) if oracle else self._owner
        self.paused = paused
        self.max_burn_per_cycle = max_burn_per_cycle

    @property
    def owner(self) -> str:
        # fixed at construction
        return self._owner

    def to_dict(self):
        return {
            "owner": self.owner,
            "oracle": self.oracle,
            "paused": self.paused,
            "max_burn_per_cycle": self.max_burn_per_cycle,
        }

    @classmethod
    def from_dict(cls, data: dict):
        return cls(
            owner=data["owner"],
            oracle=data.get("oracle"),
            paused=bool(data.get("paused", False)),
            max_burn_per_cycle=int(data.get("max_burn_per_cycle", DEFAULT_MAX_BURN_PER_CYCLE)),
        )


class Totals:
    def __init__(self, total_burned: int = 0, total_cycles: int = 0):
        self.total_burned = total_burned
        self.total_cycles = total_cycles

    def to_dict(self):
        return {
            "total_burned": self.total_burned,
            "total_cycles": self.total_cycles,
        }

    @classmethod
    def from_dict(cls, data: dict):
        return cls(
            total_burned=int(data.get("total_burned", 0)),
            total_cycles=int(data.get("total_cycles", 0)),
        )


class EngineState:
    """
    The whole mutable state set of one engine: configuration and running
    totals. Passed into BurnEngine explicitly, there is no module-level
    instance.
    """

    def __init__(self, config: SystemConfig, totals: Totals | None = None):
        self.config = config
        self.totals = totals or Totals()

    @classmethod
    def create(cls, owner: str, **config):
        return cls(SystemConfig(owner, **config))

    def to_dict(self):
        return {
            "config": self.config.to_dict(),
            "totals": self.totals.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict):
        return cls(
            SystemConfig.from_dict(data["config"]),
            Totals.from_dict(data.get("totals", {})),
        )
