from pydantic import BaseModel, ConfigDict, Field, field_validator


class QuoteRecord(BaseModel):
    model_config = ConfigDict(populate_by_name=True, allow_inf_nan=False)

    id: str
    symbol: str
    bid: float
    ask: float
    change: float
    change_percent: float = Field(alias="changePercent")

    @field_validator("bid", "ask", "change", "change_percent", mode="before")
    @classmethod
    def _reject_bool(cls, value):
        if isinstance(value, bool):
            raise ValueError("boolean is not a price")
        return value


class FetchSuccess(BaseModel):
    quotes: list[QuoteRecord]


class FetchFailure(BaseModel):
    reason: str


FetchResult = FetchSuccess | FetchFailure


class BoardState(BaseModel):
    quotes: list[QuoteRecord] = Field(default_factory=list)
    loading: bool = True
    last_error: str | None = None
    last_success_ts: int | None = None
