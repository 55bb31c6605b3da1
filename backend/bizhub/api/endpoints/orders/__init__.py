"""
Order API package

- core: response building, pagination
- crud: list, read, create, update, delete
- actions: status changes
"""

from fastapi import APIRouter
from .crud import router as crud_router
from .actions import router as actions_router

router = APIRouter()

router.include_router(crud_router, prefix="/orders")
router.include_router(actions_router, prefix="/orders")
