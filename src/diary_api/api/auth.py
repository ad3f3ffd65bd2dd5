"""Auth API: registration, login, user listing.

Learn: Routes for user authentication:
- POST /auth/register → create a new user account
- POST /auth/login → username/password → JWT access token
- GET /auth/users → every registered user (bearer token required)
- GET /auth/me → the identity carried by the caller's token

Each service error maps to its own status code. StoreError is the
floor: anything the database could not do becomes a 500.
"""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from diary_api.auth.dependencies import CurrentIdentity, get_current_user
from diary_api.db.engine import get_db
from diary_api.schemas.auth import (
    IdentityRead,
    LoginRequest,
    RegisterRequest,
    TokenResponse,
    UserRead,
)
from diary_api.services.errors import StoreError
from diary_api.services.user_service import (
    InvalidCredentialsError,
    UsernameTakenError,
    UserNotFoundError,
    UserService,
)

router = APIRouter(prefix="/auth")


def _user_svc(db: AsyncSession = Depends(get_db)) -> UserService:
    return UserService(db)


# ─── Register ────────────────────────────────────────────


@router.post("/register", response_model=UserRead, status_code=201)
async def register(body: RegisterRequest, svc: UserService = Depends(_user_svc)):
    """Create a new user account."""
    try:
        return await svc.register(body.username, body.password)
    except UsernameTakenError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except StoreError as e:
        raise HTTPException(status_code=500, detail=str(e))


# ─── Login ───────────────────────────────────────────────


@router.post("/login", response_model=TokenResponse)
async def login(body: LoginRequest, svc: UserService = Depends(_user_svc)):
    """Login with username and password → JWT access token."""
    try:
        token = await svc.login(body.username, body.password)
    except UserNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InvalidCredentialsError:
        raise HTTPException(
            status_code=401,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    except StoreError as e:
        raise HTTPException(status_code=500, detail=str(e))
    return TokenResponse(access_token=token)


# ─── Users ──────────────────────────────────────────────


@router.get(
    "/users",
    response_model=list[UserRead],
    dependencies=[Depends(get_current_user)],
)
async def list_users(svc: UserService = Depends(_user_svc)):
    """List every registered user."""
    try:
        return await svc.list_all()
    except StoreError as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/me", response_model=IdentityRead)
async def get_me(identity: CurrentIdentity = Depends(get_current_user)):
    """Get the identity encoded in the caller's token."""
    return IdentityRead(
        user_id=identity.user_id,
        username=identity.username,
        permissions=identity.permissions,
    )
