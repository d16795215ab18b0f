import os
from functools import lru_cache
from typing import Literal

from pydantic import BaseModel, Field

DEFAULT_FOREX_SYMBOLS = [
    "EURUSD=X",
    "GBPUSD=X",
    "USDJPY=X",
    "USDCAD=X",
    "AUDUSD=X",
    "NZDUSD=X",
]


class Settings(BaseModel):
    FOREX_PROVIDER: Literal["yahoo", "demo"] = "yahoo"
    FOREX_PROVIDER_URL: str = "https://query1.finance.yahoo.com"
    FOREX_SYMBOLS: list[str] = Field(default_factory=lambda: list(DEFAULT_FOREX_SYMBOLS))
    FOREX_FEED_URL: str = "http://127.0.0.1:8000"
    FOREX_REFRESH_INTERVAL_SEC: float = Field(default=60.0, gt=0)
    FOREX_PAGE_REFRESH_SEC: int = Field(default=5, gt=0)

    @classmethod
    def from_env(cls) -> "Settings":
        raw_symbols = os.getenv("FOREX_SYMBOLS", "")
        symbols = [s.strip() for s in raw_symbols.split(",") if s.strip()]
        if not symbols:
            symbols = list(DEFAULT_FOREX_SYMBOLS)

        values = {
            "FOREX_PROVIDER": os.getenv("FOREX_PROVIDER"),
            "FOREX_PROVIDER_URL": os.getenv("FOREX_PROVIDER_URL"),
            "FOREX_SYMBOLS": symbols,
            "FOREX_FEED_URL": os.getenv("FOREX_FEED_URL"),
            "FOREX_REFRESH_INTERVAL_SEC": os.getenv("FOREX_REFRESH_INTERVAL_SEC"),
            "FOREX_PAGE_REFRESH_SEC": os.getenv("FOREX_PAGE_REFRESH_SEC"),
        }
        # unset env keeps the field default
        return cls.model_validate({k: v for k, v in values.items() if v is not None})


@lru_cache
def get_settings() -> Settings:
    return Settings.from_env()
