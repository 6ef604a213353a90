from .ws_routes import router as ws_router

__all__ = ["ws_router"]
