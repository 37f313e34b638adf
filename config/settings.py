# config/settings.py

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from burncore.state import DEFAULT_MAX_BURN_PER_CYCLE

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class Settings(BaseSettings):
    """
    Loaded from defaults, then BURN_* environment variables and a .env file.
    Genesis allocations are given as JSON, e.g.
    BURN_GENESIS_ALLOCATIONS='{"0xabc...": 1000000}'.
    """

    model_config = SettingsConfigDict(
        env_prefix="BURN_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    host_ip: str = Field(default="0.0.0.0", description="API bind address")
    host_port: int = Field(default=8000, description="API port")
    data_dir: Path = Field(default=Path("data"), description="Keys and engine snapshot")

    slot_duration: int = Field(default=60, gt=0, description="Seconds per height tick")
    native_asset: str = Field(default="BURN")
    max_burn_per_cycle: int = Field(default=DEFAULT_MAX_BURN_PER_CYCLE, ge=0)
    oracle: str | None = Field(default=None, description="Initial oracle; defaults to the owner")
    genesis_allocations: dict[str, int] = Field(default_factory=dict)

    request_ttl: int = Field(default=300, gt=0, description="Seconds a signed request stays valid")

    log_level: LogLevel = "INFO"
    log_format: Literal["json", "console"] = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()


HOST_IP = get_settings().host_ip
HOST_PORT = get_settings().host_port
