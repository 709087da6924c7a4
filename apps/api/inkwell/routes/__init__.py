"""Route modules."""

from .auth import router as auth_router
from .blogs import router as blogs_router
from .editor import router as editor_router
from .users import router as users_router

__all__ = ["auth_router", "blogs_router", "editor_router", "users_router"]
