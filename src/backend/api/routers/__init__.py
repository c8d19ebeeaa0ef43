"""
API routers package.
"""

from api.routers.promptql import router as promptql_router

__all__ = ["promptql_router"]
