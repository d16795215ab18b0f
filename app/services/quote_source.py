from __future__ import annotations

from pydantic import ValidationError

from app.config.settings import DEFAULT_FOREX_SYMBOLS
from app.errors import UpstreamFetchError
from app.schemas.quote import QuoteRecord


def to_quote_record(symbol: str, row: dict) -> QuoteRecord:
    """Map one provider record onto the normalized quote shape."""
    try:
        return QuoteRecord(
            id=symbol,
            symbol=symbol,
            bid=row.get("bid"),
            ask=row.get("ask"),
            change=row.get("regularMarketChange"),
            change_percent=row.get("regularMarketChangePercent"),
        )
    except ValidationError as exc:
        raise UpstreamFetchError(f"malformed quote for {symbol}: {exc.error_count()} invalid field(s)") from exc


class QuoteSourceAdapter:
    """One provider call per request for a fixed, ordered symbol list."""

    def __init__(self, *, provider, symbols: list[str] | None = None) -> None:
        self.provider = provider
        self.symbols = list(symbols or DEFAULT_FOREX_SYMBOLS)
        self.requests = 0
        self.failures = 0
        self.last_error: str | None = None
        self.last_symbol_count = 0

    def _resolve(self, rows) -> list[QuoteRecord]:
        if not isinstance(rows, list):
            raise UpstreamFetchError("provider returned a non-list payload")

        by_symbol: dict[str, dict] = {}
        for row in rows:
            if isinstance(row, dict) and row.get("symbol"):
                by_symbol[str(row["symbol"])] = row

        out: list[QuoteRecord] = []
        for symbol in self.symbols:
            row = by_symbol.get(symbol)
            if row is None:
                raise UpstreamFetchError(f"missing quote for {symbol}")
            out.append(to_quote_record(symbol, row))
        return out

    def get_quotes(self) -> list[QuoteRecord]:
        self.requests += 1
        try:
            quotes = self._resolve(self.provider.get_quotes(list(self.symbols)))
        except UpstreamFetchError as exc:
            self._record_failure(exc)
            raise
        except Exception as exc:
            self._record_failure(exc)
            raise UpstreamFetchError(str(exc)) from exc

        self.last_error = None
        self.last_symbol_count = len(quotes)
        return quotes

    def _record_failure(self, exc: Exception) -> None:
        self.failures += 1
        self.last_error = str(exc)
        print(
            f"[FOREX][provider_error] symbols={','.join(self.symbols)} error={exc}",
            flush=True,
        )

    def metrics(self) -> dict:
        return {
            "provider_requests": self.requests,
            "provider_failures": self.failures,
            "provider_last_error": self.last_error,
            "last_symbol_count": self.last_symbol_count,
        }
