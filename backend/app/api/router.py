"""
API Router.

Aggregates all endpoint routers.
"""

from fastapi import APIRouter
from backend.app.api.endpoints import parcels, payments, tracking, riders, users

router = APIRouter()

router.include_router(parcels.router)
router.include_router(payments.router)
router.include_router(tracking.router)
router.include_router(riders.router)
router.include_router(users.router)
