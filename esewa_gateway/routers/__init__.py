"""FastAPI routers. Requires the `api` extra."""
from .callbacks import create_callback_router

__all__ = ["create_callback_router"]
