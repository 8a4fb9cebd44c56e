"""
API route modules.

Each module defines routes for one domain area.
"""

from routes.layout import router as layout_router
from routes.materials import router as materials_router

__all__ = [
    "layout_router",
    "materials_router",
]
