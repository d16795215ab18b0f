from __future__ import annotations

from app.schemas.quote import BoardState, QuoteRecord

PAGE_TITLE = "Forex Market Overview"

COLUMNS = [
    {"field": "symbol", "header": "Symbol"},
    {"field": "bid", "header": "Bid"},
    {"field": "ask", "header": "Ask"},
    {"field": "change", "header": "Change"},
    {"field": "change_percent", "header": "% Change"},
]


def format_price(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def format_change(value: float) -> str:
    return f"{value:.4f}"


def format_change_percent(value: float) -> str:
    """Two decimals with trailing zeros dropped: 0.20 -> '0.2%'."""
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    if text == "-0":
        text = "0"
    return f"{text}%"


def change_class(value: float) -> str:
    if value > 0:
        return "positive-change"
    if value < 0:
        return "negative-change"
    return ""


def build_row(quote: QuoteRecord) -> dict:
    return {
        "id": quote.id,
        "symbol": quote.symbol,
        "bid": format_price(quote.bid),
        "ask": format_price(quote.ask),
        "change": format_change(quote.change),
        "change_percent": format_change_percent(quote.change_percent),
        "change_class": change_class(quote.change),
        "change_percent_class": change_class(quote.change_percent),
    }


def build_rows(quotes: list[QuoteRecord]) -> list[dict]:
    # one row per id; a later duplicate replaces the earlier one in place
    rows: dict[str, dict] = {}
    for quote in quotes:
        rows[quote.id] = build_row(quote)
    return list(rows.values())


def render_context(state: BoardState, *, poll_interval_seconds: int = 5) -> dict:
    return {
        "title": PAGE_TITLE,
        "columns": COLUMNS,
        "rows": [] if state.loading else build_rows(state.quotes),
        "loading": state.loading,
        "last_error": state.last_error,
        "last_success_ts": state.last_success_ts,
        "poll_interval_seconds": poll_interval_seconds,
    }
