from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from app.errors import UpstreamFetchError
from app.services.dashboard_view import build_rows

router = APIRouter()


@router.get('/forex')
def get_forex(request: Request):
    adapter = request.app.state.quote_source
    try:
        quotes = adapter.get_quotes()
    except UpstreamFetchError as exc:
        print(f"[FOREX][api_error] path=/api/forex error={exc}", flush=True)
        return JSONResponse(status_code=500, content={'message': 'Error fetching data.'})
    return [q.model_dump(by_alias=True) for q in quotes]


@router.get('/dashboard/state')
def get_dashboard_state(request: Request):
    controller = request.app.state.board_controller
    state = controller.snapshot()
    return {
        'loading': state.loading,
        'last_error': state.last_error,
        'last_success_ts': state.last_success_ts,
        'quotes': [q.model_dump(by_alias=True) for q in state.quotes],
        'rows': [] if state.loading else build_rows(state.quotes),
    }


@router.get('/metrics/refresh')
def refresh_metrics(request: Request):
    metrics = request.app.state.quote_source.metrics()
    metrics.update(request.app.state.board_controller.metrics())
    return metrics
