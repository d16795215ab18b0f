from pathlib import Path

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from app.services.dashboard_view import render_context

router = APIRouter(tags=['ui'])

templates = Jinja2Templates(directory=str(Path(__file__).resolve().parents[1] / 'templates'))


@router.get('/', response_class=HTMLResponse)
def dashboard(request: Request):
    state = request.app.state.board_controller.snapshot()
    context = render_context(
        state,
        poll_interval_seconds=request.app.state.page_refresh_sec,
    )
    return templates.TemplateResponse(request, 'dashboard.html', context)
