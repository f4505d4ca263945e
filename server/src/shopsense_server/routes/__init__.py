"""API routes for the Shopsense tracking service."""

from fastapi import APIRouter

from shopsense_server.routes.internal import router as internal_router
from shopsense_server.routes.tracking import router as tracking_router

router = APIRouter()
router.include_router(tracking_router, prefix="/track")
router.include_router(internal_router, prefix="/internal")
