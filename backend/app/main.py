import time
from functools import partial
from contextlib import asynccontextmanager
from collections.abc import AsyncGenerator

import numpy as np
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import Settings, settings
from app.core.logging import log_notification, setup_logging
from app.api.v1 import generator
from engine.generator import FuelAccountant, MaintenanceSchedule
from engine.grid import GridMonitor
from engine.monitoring import NOTIFICATION, GeneratorMonitor


def build_monitor(config: Settings) -> GeneratorMonitor:
    fuel = FuelAccountant(
        initial_level_pct=config.initial_fuel_pct,
        started_at=time.time(),
        consumption_pct_per_hour=config.fuel_consumption_pct_per_hour,
    )
    grid = GridMonitor(
        outage_probability=config.grid_outage_probability,
        rng=np.random.default_rng(config.grid_seed),
    )
    monitor = GeneratorMonitor(
        fuel=fuel,
        grid=grid,
        maintenance=MaintenanceSchedule(
            last_service=config.last_maintenance_date,
            next_service=config.next_maintenance_date,
        ),
        generator_tick_s=config.generator_tick_seconds,
        grid_poll_s=config.grid_poll_seconds,
        history_size=config.notification_history,
    )
    monitor.subscribe(NOTIFICATION, partial(log_notification, monitor))
    return monitor


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    monitor: GeneratorMonitor = app.state.monitor
    monitor.start_timers()
    yield
    await monitor.aclose()


def create_app(monitor: GeneratorMonitor | None = None) -> FastAPI:
    setup_logging(json_format=settings.log_json)

    application = FastAPI(
        title=settings.app_name,
        version="0.1.0",
        lifespan=lifespan,
    )
    application.state.monitor = monitor or build_monitor(settings)

    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    application.include_router(
        generator.router, prefix="/api/v1/generator", tags=["generator"]
    )

    @application.get("/health")
    async def health_check() -> dict:
        mon: GeneratorMonitor = application.state.monitor
        grid = mon.current_grid_status()
        return {
            "status": "ok",
            "services": {
                "generator": mon.status.value,
                "grid": "available" if grid.available else "outage",
            },
        }

    return application


app = create_app()
