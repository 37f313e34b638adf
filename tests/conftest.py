"""Shared test fixtures for the burn engine test suite."""

from typing import Any

import pytest
from eth_account import Account

from burncore.clock import CounterHeightSource
from burncore.engine import BurnEngine
from burncore.state import EngineState
from burncore.telemetry import Telemetry
from burncore.token_ledger import InMemoryTokenLedger

OWNER_KEY = "0x" + "11" * 32
ORACLE_KEY = "0x" + "22" * 32
USER_KEY = "0x" + "33" * 32

ORACLE_BALANCE = 10**12
USER_BALANCE = 1_000_000


@pytest.fixture
def owner_account():
    return Account.from_key(OWNER_KEY)


@pytest.fixture
def oracle_account():
    return Account.from_key(ORACLE_KEY)


@pytest.fixture
def user_account():
    return Account.from_key(USER_KEY)


@pytest.fixture
def owner(owner_account) -> str:
    return owner_account.address.lower()


@pytest.fixture
def oracle(oracle_account) -> str:
    return oracle_account.address.lower()


@pytest.fixture
def user(user_account) -> str:
    return user_account.address.lower()


@pytest.fixture
def token_ledger(oracle, user) -> InMemoryTokenLedger:
    return InMemoryTokenLedger.from_allocations({oracle: ORACLE_BALANCE, user: USER_BALANCE})


@pytest.fixture
def events() -> list[tuple[str, dict[str, Any]]]:
    return []


@pytest.fixture
def engine(owner, oracle, token_ledger, events) -> BurnEngine:
    """Engine with distinct owner and oracle, both burn paths funded."""
    telemetry = Telemetry()
    telemetry.subscribe(lambda event, fields: events.append((event, fields)))

    return BurnEngine(
        EngineState.create(owner, oracle=oracle),
        token_ledger,
        CounterHeightSource(),
        telemetry=telemetry,
    )
