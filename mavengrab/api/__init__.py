"""API exports."""

from .routes import router as health_router
from .grape import router as grape_router

__all__ = ["health_router", "grape_router"]
