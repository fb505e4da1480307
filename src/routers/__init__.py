# FastAPI Routers
from src.routers.interactions import router as interactions_router

__all__ = ["interactions_router"]
