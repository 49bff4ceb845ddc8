from dataclasses import asdict

from fastapi import APIRouter, Depends, HTTPException, Query, status

from app.core.deps import get_monitor
from app.schemas.generator import (
    GridStatusResponse,
    NotificationResponse,
    TelemetryResponse,
)
from engine.generator import FuelTooLowError, GeneratorTelemetry, StopCause
from engine.generator.health import assess
from engine.monitoring import GeneratorMonitor

router = APIRouter()


def _telemetry_response(
    monitor: GeneratorMonitor, telemetry: GeneratorTelemetry
) -> TelemetryResponse:
    data = asdict(telemetry)
    data["status"] = telemetry.status.value
    return TelemetryResponse(
        **data,
        total_runtime_seconds=monitor.total_runtime_seconds(),
        health=assess(telemetry),
    )


@router.get(
    "/telemetry",
    response_model=TelemetryResponse,
    summary="Current generator telemetry",
)
async def get_telemetry(monitor: GeneratorMonitor = Depends(get_monitor)):
    return _telemetry_response(monitor, monitor.current_telemetry())


@router.post(
    "/start",
    response_model=TelemetryResponse,
    summary="Start the generator",
    description="Refused with 409 when the tank is below the minimum start level.",
)
async def start_generator(monitor: GeneratorMonitor = Depends(get_monitor)):
    try:
        telemetry = monitor.start()
    except FuelTooLowError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
    return _telemetry_response(monitor, telemetry)


@router.post(
    "/stop",
    response_model=TelemetryResponse,
    summary="Stop the generator",
)
async def stop_generator(monitor: GeneratorMonitor = Depends(get_monitor)):
    telemetry = monitor.stop(StopCause.OPERATOR)
    return _telemetry_response(monitor, telemetry)


@router.get("/grid", response_model=GridStatusResponse, summary="Utility grid status")
async def get_grid_status(monitor: GeneratorMonitor = Depends(get_monitor)):
    return GridStatusResponse.model_validate(monitor.current_grid_status())


@router.get(
    "/notifications",
    response_model=list[NotificationResponse],
    summary="Recent alerts, newest first",
)
async def list_notifications(
    limit: int = Query(default=20, ge=1, le=500),
    monitor: GeneratorMonitor = Depends(get_monitor),
):
    return [
        NotificationResponse(
            severity=n.severity.value,
            code=n.code,
            message=n.message,
            timestamp=n.timestamp,
        )
        for n in monitor.recent_notifications(limit)
    ]
