"""
Menu API routers.

All routes are mounted under /api/imenu by menu_api.main.
"""

from fastapi import APIRouter

from .menus import router as menus_router
from .menu_items import router as menu_items_router


router = APIRouter()
router.include_router(menus_router)
router.include_router(menu_items_router)


__all__ = ["router"]
