"""HTTP route definitions for the service."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from app.schemas import DashboardSnapshot, RefreshResponse
from services.dashboard import DashboardController, build_default_controller

router = APIRouter()


def get_controller() -> DashboardController:
    return build_default_controller()


@router.get(
    "/api/dashboard",
    response_model=DashboardSnapshot,
    summary="Current dashboard state, live or sample.",
)
async def get_dashboard(
    controller: DashboardController = Depends(get_controller),
) -> DashboardSnapshot:
    return controller.snapshot()


@router.post(
    "/api/refresh",
    status_code=status.HTTP_202_ACCEPTED,
    response_model=RefreshResponse,
    summary="Start a manual acquisition cycle in the background.",
)
async def refresh_dashboard(
    controller: DashboardController = Depends(get_controller),
) -> RefreshResponse:
    return RefreshResponse(accepted=controller.request_refresh())


@router.get(
    "/health",
    summary="Health check endpoint.",
    status_code=status.HTTP_200_OK,
)
async def healthcheck() -> dict[str, str]:
    return {"status": "ok"}


@router.get(
    "/",
    summary="Root endpoint mirrors health information.",
    status_code=status.HTTP_200_OK,
)
async def root() -> dict[str, str]:
    return {"status": "ok", "detail": "See /ui for the dashboard and /health for service status."}
