"""Inventory routes package — assembles all sub-routers."""

from fastapi import APIRouter

from .batch import router as batch_router
from .public import router as public_router
from .records import router as records_router

router = APIRouter()
# batch first: static /records/batch must register before /records/{record_id}
router.include_router(batch_router)
router.include_router(records_router)
router.include_router(public_router)
