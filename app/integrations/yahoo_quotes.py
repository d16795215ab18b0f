from __future__ import annotations

from typing import Any, Dict, List, Optional

import requests

from app.errors import UpstreamFetchError


class YahooQuoteClient:
    """Batch quote client for the Yahoo Finance v7 quote endpoint."""

    _DEFAULT_BASE_URL = "https://query1.finance.yahoo.com"
    _USER_AGENT = "Mozilla/5.0 (X11; Linux x86_64) forex-market-overview/0.1"

    def __init__(
        self,
        session: Optional[Any] = None,
        base_url: Optional[str] = None,
        timeout: float = 5,
    ) -> None:
        self.session = session or requests
        self.base_url = (base_url or self._DEFAULT_BASE_URL).rstrip("/")
        self.timeout = timeout

    def get_quotes(self, symbols: List[str]) -> List[Dict[str, Any]]:
        response = self.session.get(
            f"{self.base_url}/v7/finance/quote",
            headers={"user-agent": self._USER_AGENT, "accept": "application/json"},
            params={"symbols": ",".join(symbols)},
            timeout=self.timeout,
        )
        response.raise_for_status()
        payload = response.json()

        body = payload.get("quoteResponse") if isinstance(payload, dict) else None
        if not isinstance(body, dict):
            raise UpstreamFetchError("missing quoteResponse in payload")
        if body.get("error"):
            raise UpstreamFetchError(f"provider error: {body['error']}")

        result = body.get("result")
        if not isinstance(result, list):
            raise UpstreamFetchError("missing quoteResponse.result list")
        return result


class DemoQuoteClient:
    """Offline provider with fixed values, keyed by symbol."""

    _ROWS = {
        "EURUSD=X": (1.1233, 1.1234, 0.0023, 0.2),
        "GBPUSD=X": (1.3788, 1.3789, 0.0045, 0.33),
        "USDJPY=X": (109.44, 109.45, -0.15, -0.14),
        "USDCAD=X": (1.2344, 1.2345, 0.0012, 0.1),
        "AUDUSD=X": (0.6621, 0.6622, -0.0008, -0.12),
        "NZDUSD=X": (0.6102, 0.6103, 0.0, 0.0),
        "USDCNY=X": (6.4566, 6.4567, -0.0123, -0.19),
    }

    def get_quotes(self, symbols: List[str]) -> List[Dict[str, Any]]:
        out: List[Dict[str, Any]] = []
        for symbol in symbols:
            bid, ask, change, change_pct = self._ROWS.get(symbol, (1.0, 1.0, 0.0, 0.0))
            out.append(
                {
                    "symbol": symbol,
                    "bid": bid,
                    "ask": ask,
                    "regularMarketChange": change,
                    "regularMarketChangePercent": change_pct,
                }
            )
        return out
