from .ai import get_model_router, router as ai_router

__all__ = [
    "ai_router",
    "get_model_router"
]
