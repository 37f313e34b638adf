"""Tests for the HTTP API."""

import time
import uuid

import pytest
from fastapi.testclient import TestClient

from api.auth import AuthError, RequestGuard, sign_request
from api.server import create_app
from burncore.state import DEFAULT_MAX_BURN_PER_CYCLE


@pytest.fixture
def client(engine) -> TestClient:
    return TestClient(create_app(engine))


def signed(account, action: str, **fields) -> dict:
    request = {
        "action": action,
        "request_id": uuid.uuid4().hex,
        "timestamp": int(time.time()),
        **fields,
    }
    return sign_request(account, request)


CYCLE = {
    "volatility": 80,
    "sentiment": 30,
    "volume_24h": 500_000_000,
    "liquidity_depth": 150,
    "moving_average_price": 100,
}


class TestQueries:
    def test_health(self, client: TestClient) -> None:
        assert client.get("/health").json() == {"status": "ok"}

    def test_status(self, client: TestClient, oracle: str) -> None:
        assert client.get("/status").json() == {
            "paused": False,
            "oracle": oracle,
            "max_cap": DEFAULT_MAX_BURN_PER_CYCLE,
            "total_cycles": 0,
        }

    def test_unknown_history_is_404(self, client: TestClient) -> None:
        assert client.get("/burn/history/1").status_code == 404

    def test_preview(self, client: TestClient) -> None:
        body = {k: v for k, v in CYCLE.items() if k != "moving_average_price"}
        response = client.post("/burn/preview", json=body)

        assert response.status_code == 200
        assert response.json()["amount"] == 300_000
        assert response.json()["volatility_multiplier"] == 200
        assert client.get("/status").json()["total_cycles"] == 0

    def test_balance(self, client: TestClient, user: str) -> None:
        data = client.get(f"/balance/{user.upper().replace('0X', '0x')}").json()
        assert data == {"address": user, "balance": 1_000_000}


class TestBurns:
    def test_cycle_by_oracle(self, client: TestClient, oracle_account, oracle: str) -> None:
        response = client.post("/burn/cycle", json=signed(oracle_account, "dynamic_burn_cycle", **CYCLE))

        assert response.status_code == 200
        data = response.json()
        assert data["ok"] is True
        assert data["burned"] == 300_000
        assert data["total_burned"] == 300_000
        assert data["remaining_headroom"] == DEFAULT_MAX_BURN_PER_CYCLE - 300_000
        assert data["status"] == "executed"

        record = client.get(f"/burn/history/{data['cycle_id']}").json()
        assert record["reason"] == "ai-dynamic-burn-v2"
        assert record["actor"] == oracle
        assert client.get("/burn/total").json() == {"total_burned": 300_000}

    def test_cycle_by_owner_is_forbidden(self, client: TestClient, owner_account) -> None:
        response = client.post("/burn/cycle", json=signed(owner_account, "dynamic_burn_cycle", **CYCLE))

        assert response.status_code == 403
        assert response.json()["error"] == "not_authorized"

    def test_zero_amount_cycle(self, client: TestClient, oracle_account) -> None:
        body = signed(oracle_account, "dynamic_burn_cycle", **{**CYCLE, "volume_24h": 0})
        response = client.post("/burn/cycle", json=body)

        assert response.status_code == 400
        assert response.json()["error"] == "invalid_amount"
        assert client.get("/status").json()["total_cycles"] == 0

    def test_out_of_range_volatility(self, client: TestClient, oracle_account) -> None:
        body = signed(oracle_account, "dynamic_burn_cycle", **{**CYCLE, "volatility": 101})
        assert client.post("/burn/cycle", json=body).status_code == 422

    def test_manual_burn(self, client: TestClient, user_account, user: str) -> None:
        response = client.post("/burn/manual", json=signed(user_account, "manual_burn", amount=250))

        assert response.status_code == 200
        assert response.json()["record_id"] == 1
        assert response.json()["caller"] == user
        assert client.get(f"/balance/{user}").json()["balance"] == 1_000_000 - 250

    def test_manual_burn_insufficient(self, client: TestClient, user_account) -> None:
        response = client.post("/burn/manual", json=signed(user_account, "manual_burn", amount=10**9))

        assert response.status_code == 402
        assert response.json()["error"] == "insufficient_balance"

    def test_history_page(self, client: TestClient, user_account) -> None:
        for amount in (1, 2, 3):
            client.post("/burn/manual", json=signed(user_account, "manual_burn", amount=amount))

        data = client.get("/burn/history", params={"start": 2, "limit": 5}).json()
        assert data["count"] == 2
        assert [r["amount"] for r in data["records"]] == [2, 3]


class TestAdmin:
    def test_pause_flow(self, client: TestClient, owner_account, oracle_account, user_account) -> None:
        response = client.post("/admin/paused", json=signed(owner_account, "set_paused", paused=True))
        assert response.json() == {"ok": True, "paused": True}

        burn = client.post("/burn/manual", json=signed(user_account, "manual_burn", amount=1))
        assert burn.status_code == 423
        assert burn.json()["error"] == "paused"

        cycle = client.post("/burn/cycle", json=signed(oracle_account, "dynamic_burn_cycle", **CYCLE))
        assert cycle.status_code == 423

        cap = client.post("/admin/cap", json=signed(owner_account, "set_max_burn_cap", max_cap=10))
        assert cap.json() == {"ok": True, "max_cap": 10}

    def test_set_oracle(self, client: TestClient, owner_account, user: str) -> None:
        response = client.post("/admin/oracle", json=signed(owner_account, "set_oracle", oracle=user))

        assert response.status_code == 200
        assert client.get("/status").json()["oracle"] == user

    def test_admin_requires_owner(self, client: TestClient, oracle_account) -> None:
        response = client.post("/admin/cap", json=signed(oracle_account, "set_max_burn_cap", max_cap=1))
        assert response.status_code == 403

    def test_over_cap(self, client: TestClient, owner_account, oracle_account) -> None:
        client.post("/admin/cap", json=signed(owner_account, "set_max_burn_cap", max_cap=1_000))

        response = client.post("/burn/cycle", json=signed(oracle_account, "dynamic_burn_cycle", **CYCLE))
        assert response.status_code == 400
        assert response.json()["error"] == "cap_exceeded"


class TestSignedRequests:
    def test_replay_rejected(self, client: TestClient, user_account) -> None:
        body = signed(user_account, "manual_burn", amount=1)

        assert client.post("/burn/manual", json=body).status_code == 200
        assert client.post("/burn/manual", json=body).status_code == 401

    def test_tampered_request_changes_caller(self, client: TestClient, owner_account) -> None:
        body = signed(owner_account, "set_max_burn_cap", max_cap=1)
        body["request"]["max_cap"] = 2

        # recovers some other address, which is not the owner
        assert client.post("/admin/cap", json=body).status_code == 403

    def test_garbage_signature(self, client: TestClient, owner_account) -> None:
        body = signed(owner_account, "set_paused", paused=True)
        body["signature"] = "0x1234"

        assert client.post("/admin/paused", json=body).status_code == 401

    def test_wrong_action_for_endpoint(self, client: TestClient, owner_account) -> None:
        body = signed(owner_account, "set_paused", paused=True)
        assert client.post("/admin/cap", json=body).status_code == 422


class TestRequestGuard:
    def test_expired_request(self, owner_account) -> None:
        guard = RequestGuard(ttl=10, time_fn=lambda: 1_000)
        body = sign_request(owner_account, {"action": "x", "request_id": "r1", "timestamp": 900})

        with pytest.raises(AuthError, match="expired"):
            guard.verify(body["request"], body["signature"])

    def test_recovers_signer(self, owner_account, owner: str) -> None:
        guard = RequestGuard(ttl=10, time_fn=lambda: 1_000)
        body = sign_request(owner_account, {"action": "x", "request_id": "r1", "timestamp": 995})

        assert guard.verify(body["request"], body["signature"]) == owner

    def test_request_id_forgotten_after_ttl(self, owner_account) -> None:
        now = [1_000]
        guard = RequestGuard(ttl=10, time_fn=lambda: now[0])

        first = sign_request(owner_account, {"action": "x", "request_id": "r1", "timestamp": 1_000})
        guard.verify(first["request"], first["signature"])

        now[0] = 1_020
        again = sign_request(owner_account, {"action": "x", "request_id": "r1", "timestamp": 1_020})
        guard.verify(again["request"], again["signature"])
