"""API route aggregation.

All routers registered here get mounted in main.py.

Learn: The diary router is protected at the include_router level
using FastAPI's dependencies parameter. The auth router is open
because register and login must be; its protected routes (/users,
/me) declare get_current_user themselves.
"""

from fastapi import APIRouter, Depends

from diary_api.api.auth import router as auth_router
from diary_api.api.diaries import router as diaries_router
from diary_api.api.health import router as health_router
from diary_api.auth.dependencies import get_current_user

_auth = [Depends(get_current_user)]

api_router = APIRouter(prefix="/api/v1")

# Open routes, no auth required
api_router.include_router(health_router, tags=["health"])
api_router.include_router(auth_router, tags=["auth"])

# Protected routes, require a valid bearer token
api_router.include_router(diaries_router, tags=["diaries"], dependencies=_auth)
