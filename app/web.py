from __future__ import annotations

from pathlib import Path
from typing import Optional, Sequence

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

from app.schemas import DashboardState, Reading
from services.chart import build_chart
from services.dashboard import DashboardController, build_default_controller

BRIGHT_LUX_THRESHOLD = 100

templates = Jinja2Templates(directory=str(Path(__file__).resolve().parent / "templates"))


def get_controller() -> DashboardController:
    return build_default_controller()


def _aircon_on(readings: Sequence[Reading]) -> Optional[bool]:
    if not readings:
        return None
    return readings[-1].aircon_active


router = APIRouter(include_in_schema=False)


@router.get("/ui", name="ui_index", response_class=HTMLResponse)
async def ui_index(
    request: Request,
    controller: DashboardController = Depends(get_controller),
) -> HTMLResponse:
    snapshot = controller.snapshot()
    showing_loader = snapshot.state is DashboardState.loading and not snapshot.readings
    return templates.TemplateResponse(
        request,
        "ui/index.html",
        {
            "snapshot": snapshot,
            "chart": build_chart(snapshot.readings),
            "aircon_on": _aircon_on(snapshot.readings),
            "bright_threshold": BRIGHT_LUX_THRESHOLD,
            "showing_loader": showing_loader,
            "reload_seconds": int(controller.clock_interval),
        },
    )


@router.post("/ui/refresh", name="ui_refresh")
async def ui_refresh(
    request: Request,
    controller: DashboardController = Depends(get_controller),
) -> RedirectResponse:
    controller.request_refresh()
    return RedirectResponse(
        url=request.url_for("ui_index"),
        status_code=status.HTTP_303_SEE_OTHER,
    )
