"""FastAPI application factory with lifespan management."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from spinlab.api.dependencies import set_clock
from spinlab.api.routes import api_router
from spinlab.config import SimulationConfig
from spinlab.engine.clock import SimulationClock
from spinlab.utils.logging import setup_logging

logger = logging.getLogger(__name__)


def create_app(config: SimulationConfig | None = None, setup_logs: bool = True) -> FastAPI:
    """Build and return the fully-configured FastAPI application."""
    if config is None:
        config = SimulationConfig()

    _config = config

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if setup_logs:
            setup_logging(_config.log_level)
        clock = SimulationClock(_config).initialize(
            _config.lattice_size,
            _config.temperature,
            _config.model_kind,
            _config.boundary,
            _config.algorithm,
        )
        set_clock(clock)
        if _config.autostart:
            clock.start()
            logger.info("API server started — simulation running.")
        else:
            clock.advance(1)
            logger.info("API server started — simulation stopped.")
        yield
        clock.stop()
        set_clock(None)
        logger.info("API server shutting down.")

    app = FastAPI(
        title="spinlab",
        description=(
            "Interactive Monte Carlo simulator for 2D spin lattices.\n\n"
            "## API Groups\n\n"
            "- **State** — Latest frame, on-demand snapshot, order-parameter history\n"
            "- **Parameters** — Temperature, field, boundary, model, algorithm, Potts q, speed\n"
            "- **Control** — Simulation lifecycle: start, stop, step, reset\n"
            "- **Config** — Read-only startup configuration\n"
        ),
        version="0.1.0",
        lifespan=lifespan,
        openapi_tags=[
            {"name": "State", "description": "Frames polled by the display layer at ~30 Hz, plus the rolling magnetization history."},
            {"name": "Parameters", "description": "Live simulation parameters. Changes take effect on the next step."},
            {"name": "Control", "description": "Start, stop, single-step and reset."},
            {"name": "Config", "description": "Read-only configuration the server was started with."},
        ],
    )

    # CORS — allow any origin in dev
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router)

    return app
