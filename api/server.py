# api/server.py

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api.auth import AuthError, RequestGuard
from api.models import (
    BurnCycleRequest,
    ManualBurnRequest,
    MarketConditions,
    SetMaxBurnCapRequest,
    SetOracleRequest,
    SetPausedRequest,
    Signed,
)
from burncore.engine import BurnEngine
from burncore.errors import BurnEngineError
from burncore.utils import norm


def create_app(engine: BurnEngine, request_ttl: int = 300, guard: RequestGuard | None = None) -> FastAPI:
    app = FastAPI(
        title="Dynamic Burn Engine API",
        version="0.1.0"
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.engine = engine
    app.state.guard = guard or RequestGuard(ttl=request_ttl)

    @app.exception_handler(BurnEngineError)
    async def burn_engine_error_handler(request: Request, exc: BurnEngineError):
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    def caller_of(payload: Signed) -> str:
        try:
            return app.state.guard.verify(payload.request.model_dump(), payload.signature)
        except AuthError as e:
            raise HTTPException(status_code=401, detail=e.message)

    # -----------------------------
    # QUERIES
    # -----------------------------

    @app.get("/health")
    def health():
        return {"status": "ok"}

    @app.get("/status")
    def get_status():
        return engine.get_system_status().to_dict()

    @app.get("/burn/total")
    def get_total_burned():
        return {"total_burned": engine.get_total_burned()}

    @app.get("/burn/history/{record_id}")
    def get_burn_history(record_id: int):
        record = engine.get_burn_history(record_id)
        if record is None:
            raise HTTPException(status_code=404, detail="Burn record not found")
        return record.to_dict()

    @app.get("/burn/history")
    def list_burn_history(start: int = 1, limit: int = 100):
        limit = max(0, min(limit, 1000))
        records = engine.list_burn_history(start, limit)
        return {
            "count": len(records),
            "records": [r.to_dict() for r in records],
        }

    @app.get("/balance/{address}")
    def get_balance(address: str):
        balance_of = getattr(engine.token_ledger, "balance_of", None)
        if balance_of is None:
            raise HTTPException(status_code=501, detail="Token ledger does not expose balances")

        return {
            "address": norm(address),
            "balance": balance_of(address),
        }

    @app.post("/burn/preview")
    def preview_burn(payload: MarketConditions):
        return engine.preview_dynamic_burn(
            payload.volatility,
            payload.sentiment,
            payload.volume_24h,
            payload.liquidity_depth,
        ).to_dict()

    # -----------------------------
    # BURNS
    # -----------------------------

    @app.post("/burn/manual")
    def manual_burn(payload: Signed[ManualBurnRequest]):
        caller = caller_of(payload)
        record_id = engine.manual_burn(caller, payload.request.amount)

        return {
            "ok": True,
            "caller": caller,
            "record_id": record_id,
            "amount": payload.request.amount,
        }

    @app.post("/burn/cycle")
    def burn_cycle(payload: Signed[BurnCycleRequest]):
        caller = caller_of(payload)
        req = payload.request

        result = engine.execute_dynamic_burn_cycle(
            caller,
            req.volatility,
            req.sentiment,
            req.volume_24h,
            req.liquidity_depth,
            req.moving_average_price,
        )

        return {"ok": True, **result.to_dict()}

    # -----------------------------
    # ADMIN
    # -----------------------------

    @app.post("/admin/oracle")
    def set_oracle(payload: Signed[SetOracleRequest]):
        caller = caller_of(payload)
        engine.set_oracle(caller, payload.request.oracle)
        return {"ok": True, "oracle": engine.get_system_status().oracle}

    @app.post("/admin/paused")
    def set_paused(payload: Signed[SetPausedRequest]):
        caller = caller_of(payload)
        engine.set_paused(caller, payload.request.paused)
        return {"ok": True, "paused": engine.get_system_status().paused}

    @app.post("/admin/cap")
    def set_max_burn_cap(payload: Signed[SetMaxBurnCapRequest]):
        caller = caller_of(payload)
        engine.set_max_burn_cap(caller, payload.request.max_cap)
        return {"ok": True, "max_cap": engine.get_system_status().max_cap}

    return app
