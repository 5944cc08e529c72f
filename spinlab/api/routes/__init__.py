"""Versioned API route modules."""

from fastapi import APIRouter

from spinlab.api.routes.config import router as config_router
from spinlab.api.routes.control import router as control_router
from spinlab.api.routes.parameters import router as parameters_router
from spinlab.api.routes.state import router as state_router

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(state_router, tags=["State"])
api_router.include_router(parameters_router, tags=["Parameters"])
api_router.include_router(control_router, tags=["Control"])
api_router.include_router(config_router, tags=["Config"])

__all__ = ["api_router"]
