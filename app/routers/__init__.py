"""API routers."""

from app.routers.auth import router as auth_router
from app.routers.auth import session_router
from app.routers.profile import router as profile_router
from app.routers.users import router as users_router

__all__ = ["auth_router", "session_router", "profile_router", "users_router"]
