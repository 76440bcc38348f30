"""
Router export for the Pixel Vault Service

Mount it with app.include_router(router) to serve the /vault endpoints.
"""

from .api.routes import router

__all__ = ["router"]
