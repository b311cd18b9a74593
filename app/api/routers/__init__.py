"""
app/api/routers package marker.
"""

from app.api.routers.conservador_router import router as conservador_router
from app.api.routers.referencial_upload import router as referencial_upload_router

__all__ = [
    "conservador_router",
    "referencial_upload_router",
]
