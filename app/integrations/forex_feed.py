from __future__ import annotations

from typing import Any, Optional

import requests
from pydantic import ValidationError

from app.schemas.quote import FetchFailure, FetchResult, FetchSuccess, QuoteRecord


class ForexFeedClient:
    """Reads the quote set through the `/api/forex` HTTP boundary."""

    def __init__(
        self,
        base_url: str = "http://127.0.0.1:8000",
        *,
        session: Optional[Any] = None,
        path: str = "/api/forex",
        timeout: float = 5,
    ) -> None:
        self.base_url = base_url
        self.session = session or requests
        self.path = path
        self.timeout = timeout

    @property
    def url(self) -> str:
        return f"{self.base_url.rstrip('/')}{self.path}"

    @staticmethod
    def _error_message(response: Any) -> str:
        try:
            body = response.json()
        except ValueError:
            return ""
        if isinstance(body, dict):
            return str(body.get("message") or body.get("detail") or "")
        return ""

    def fetch(self) -> FetchResult:
        try:
            response = self.session.get(self.url, timeout=self.timeout)
        except requests.RequestException as exc:
            return FetchFailure(reason=f"request failed: {exc}")

        if response.status_code != 200:
            reason = f"HTTP {response.status_code}"
            message = self._error_message(response)
            if message:
                reason = f"{reason}: {message}"
            return FetchFailure(reason=reason)

        try:
            payload = response.json()
        except ValueError as exc:
            return FetchFailure(reason=f"invalid JSON body: {exc}")
        if not isinstance(payload, list):
            return FetchFailure(reason="expected a JSON array of quotes")

        try:
            quotes = [QuoteRecord.model_validate(row) for row in payload]
        except ValidationError as exc:
            return FetchFailure(reason=f"invalid quote record: {exc.error_count()} invalid field(s)")
        return FetchSuccess(quotes=quotes)
