"""
API v1 Router
"""

from fastapi import APIRouter

from app.api.v1 import auth, export, groups, images, labeler, labelers, tags

router = APIRouter()

# Include all endpoint routers
router.include_router(auth.router)
router.include_router(labelers.router)
router.include_router(groups.router)
router.include_router(tags.router)
router.include_router(images.router)
router.include_router(export.router)
router.include_router(labeler.router)

__all__ = ["router"]
