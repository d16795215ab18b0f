import re
import unittest

from fastapi.testclient import TestClient

from app.main import app
from app.schemas.quote import BoardState, FetchFailure, FetchSuccess, QuoteRecord
from app.services.dashboard_view import (
    build_rows,
    change_class,
    format_change,
    format_change_percent,
    format_price,
    render_context,
)
from app.services.refresh_cycle import RefreshCycleController

SCENARIO = [
    ("EURUSD=X", 1.1233, 1.1234, 0.0023, 0.2),
    ("USDJPY=X", 109.44, 109.45, -0.15, -0.14),
    ("GBPUSD=X", 1.3788, 1.3789, 0.0045, 0.33),
    ("USDCNY=X", 6.4566, 6.4567, -0.0123, -0.19),
    ("USDCAD=X", 1.2344, 1.2345, 0.0012, 0.1),
]


def scenario_quotes() -> list[QuoteRecord]:
    return [
        QuoteRecord(id=s, symbol=s, bid=bid, ask=ask, change=chg, change_percent=pct)
        for s, bid, ask, chg, pct in SCENARIO
    ]


class StubFetcher:
    def __init__(self, result) -> None:
        self.result = result

    def fetch(self):
        return self.result


class TestFormatting(unittest.TestCase):
    def test_change_has_four_decimals(self):
        self.assertEqual(format_change(0.0023), "0.0023")
        self.assertEqual(format_change(-0.15), "-0.1500")
        self.assertEqual(format_change(0), "0.0000")

    def test_change_percent_rounds_and_drops_trailing_zeros(self):
        self.assertEqual(format_change_percent(0.2), "0.2%")
        self.assertEqual(format_change_percent(-0.14), "-0.14%")
        self.assertEqual(format_change_percent(0.336), "0.34%")
        self.assertEqual(format_change_percent(10.0), "10%")
        self.assertEqual(format_change_percent(-0.001), "0%")

    def test_price_is_shown_as_plain_number(self):
        self.assertEqual(format_price(1.1234), "1.1234")
        self.assertEqual(format_price(109.45), "109.45")
        self.assertEqual(format_price(2.0), "2")

    def test_change_class_follows_sign(self):
        self.assertEqual(change_class(0.1), "positive-change")
        self.assertEqual(change_class(-0.1), "negative-change")
        self.assertEqual(change_class(0.0), "")

    def test_rows_are_keyed_by_id(self):
        quotes = scenario_quotes()
        newer = quotes[0].model_copy(update={"bid": 1.2})

        rows = build_rows(quotes + [newer])

        self.assertEqual(len(rows), 5)
        self.assertEqual(rows[0]["id"], "EURUSD=X")
        self.assertEqual(rows[0]["bid"], "1.2")

    def test_context_has_no_rows_while_loading(self):
        context = render_context(BoardState(quotes=scenario_quotes(), loading=True))

        self.assertTrue(context["loading"])
        self.assertEqual(context["rows"], [])
        self.assertEqual(context["title"], "Forex Market Overview")


class TestDashboardPage(unittest.TestCase):
    def setUp(self):
        self.original_controller = app.state.board_controller
        self.controller = RefreshCycleController(fetcher=StubFetcher(FetchSuccess(quotes=scenario_quotes())))
        app.state.board_controller = self.controller
        self.client = TestClient(app)

    def tearDown(self):
        app.state.board_controller = self.original_controller

    def test_progress_indicator_until_first_fetch(self):
        res = self.client.get('/')

        self.assertEqual(res.status_code, 200)
        self.assertIn('role="progressbar"', res.text)
        self.assertNotIn('EURUSD=X', res.text)

        self.controller.fetch_once()
        res = self.client.get('/')

        self.assertNotIn('role="progressbar"', res.text)
        self.assertIn('EURUSD=X', res.text)

    def test_progress_indicator_hidden_after_failed_fetch(self):
        self.controller.fetcher = StubFetcher(FetchFailure(reason='HTTP 500'))
        self.controller.fetch_once()

        res = self.client.get('/')

        self.assertNotIn('role="progressbar"', res.text)
        self.assertIn('latest refresh failed', res.text)

    def test_title_and_headers(self):
        self.controller.fetch_once()

        res = self.client.get('/')

        self.assertRegex(res.text, re.compile(r'<title>\s*forex.*market', re.IGNORECASE))
        headers = [
            h.lower()
            for h in re.findall(r'<th role="columnheader"[^>]*>([^<]*)</th>', res.text)
        ]
        for pattern in (r'symbol', r'bid', r'ask', r'^change$', r'%\s*change'):
            self.assertTrue(any(re.search(pattern, h) for h in headers), pattern)

    def test_all_quotes_are_rendered_with_formatting(self):
        self.controller.fetch_once()

        res = self.client.get('/')

        for symbol, *_ in SCENARIO:
            self.assertIn(symbol, res.text)
        self.assertIn('1.1234', res.text)
        self.assertIn('0.0023', res.text)
        self.assertIn('0.2%', res.text)
        self.assertIn('negative-change', res.text)

    def test_dashboard_state_endpoint(self):
        res = self.client.get('/api/dashboard/state')
        self.assertTrue(res.json()['loading'])

        self.controller.fetch_once()
        body = self.client.get('/api/dashboard/state').json()

        self.assertFalse(body['loading'])
        self.assertEqual([q['symbol'] for q in body['quotes']], [s for s, *_ in SCENARIO])
        self.assertEqual(body['quotes'][0]['changePercent'], 0.2)
        self.assertEqual(body['rows'][1]['change'], '-0.1500')


if __name__ == '__main__':
    unittest.main()
