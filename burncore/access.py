# burncore/access.py

from dataclasses import dataclass
from enum import Enum

from burncore.errors import BurnEngineError, NotAuthorized, Paused
from burncore.state import SystemConfig
from burncore.utils import norm


class Action(str, Enum):
    ADMIN = "admin"
    MANUAL_BURN = "manual_burn"
    DYNAMIC_BURN = "dynamic_burn"


@dataclass(frozen=True)
class AccessDecision:
    action: Action
    caller: str
    allowed: bool
    error: type[BurnEngineError] | None = None
    reason: str = ""

    def raise_for_denial(self):
        if self.allowed:
            return
        if self.error is NotAuthorized:
            raise NotAuthorized(self.reason, caller=self.caller)
        raise self.error(self.reason)


class AccessGate:
    """
    Role and availability checks against the live SystemConfig.

    The three queries are side-effect free. `authorize` combines them into
    the precondition set of one operation and returns a typed decision.
    """

    def __init__(self, config: SystemConfig):
        self.config = config

    def is_owner(self, caller: str) -> bool:
        return bool(caller) and norm(caller) == self.config.owner

    def is_oracle(self, caller: str) -> bool:
        return bool(caller) and norm(caller) == self.config.oracle

    def is_active(self) -> bool:
        return not self.config.paused

    def authorize(self, caller: str, action: Action) -> AccessDecision:
        caller = norm(caller)

        if action == Action.ADMIN:
            # admin stays available while paused
            if not self.is_owner(caller):
                return self._deny(action, caller, NotAuthorized, "Caller is not the owner")
            return AccessDecision(action, caller, True)

        if not self.is_active():
            return self._deny(action, caller, Paused, "Burns are paused")

        if action == Action.DYNAMIC_BURN and not self.is_oracle(caller):
            return self._deny(action, caller, NotAuthorized, "Caller is not the oracle")

        return AccessDecision(action, caller, True)

    @staticmethod
    def _deny(action, caller, error, reason):
        return AccessDecision(action, caller, False, error=error, reason=reason)
