from mathquest.presentation.api.routers.admin import router as admin_router
from mathquest.presentation.api.routers.auth import router as auth_router
from mathquest.presentation.api.routers.users import router as users_router

__all__ = ["admin_router", "auth_router", "users_router"]
