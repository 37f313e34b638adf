# api/models.py

from typing import Generic, Literal, TypeVar

from pydantic import BaseModel, Field


class SignedFields(BaseModel):
    request_id: str = Field(min_length=1, max_length=128)
    timestamp: int


class SetOracleRequest(SignedFields):
    action: Literal["set_oracle"]
    oracle: str = Field(min_length=1)


class SetPausedRequest(SignedFields):
    action: Literal["set_paused"]
    paused: bool


class SetMaxBurnCapRequest(SignedFields):
    action: Literal["set_max_burn_cap"]
    max_cap: int = Field(ge=0)


class ManualBurnRequest(SignedFields):
    action: Literal["manual_burn"]
    amount: int


class MarketConditions(BaseModel):
    volatility: int = Field(ge=0, le=100)
    sentiment: int = Field(ge=0, le=100)
    volume_24h: int = Field(ge=0)
    liquidity_depth: int = Field(ge=0)


class BurnCycleRequest(SignedFields, MarketConditions):
    action: Literal["dynamic_burn_cycle"]
    moving_average_price: int = Field(ge=0)


RequestT = TypeVar("RequestT", bound=SignedFields)


class Signed(BaseModel, Generic[RequestT]):
    """A request plus the caller's signature over its canonical JSON."""

    request: RequestT
    signature: str
