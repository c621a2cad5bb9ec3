from fastapi import APIRouter, Response, status

from taskboard.api.deps import AppSettings, CurrentUser, Services
from taskboard.schemas.user import AuthResponse, UserLogin, UserRegister, UserResponse
from taskboard.utils.cookies import clear_session_cookie, set_session_cookie

router = APIRouter(tags=["auth"])


@router.post("/signup", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def signup(
    data: UserRegister, response: Response, services: Services, settings: AppSettings
):
    """Register and sign in in one step."""
    user = await services.auth.register(data)
    token = services.auth.issue_token(user.id)
    set_session_cookie(response, token, settings)
    return AuthResponse(user=user, token=token)


@router.post("/login", response_model=AuthResponse)
async def login(data: UserLogin, response: Response, services: Services, settings: AppSettings):
    user, token = await services.auth.login(data.email, data.password.get_secret_value())
    set_session_cookie(response, token, settings)
    return AuthResponse(user=user, token=token)


@router.post("/logout")
async def logout(response: Response, settings: AppSettings):
    clear_session_cookie(response, settings)
    return {"message": "Logged out"}


@router.get("/profile", response_model=UserResponse)
async def profile(user: CurrentUser, services: Services):
    return await services.auth.get_profile(user.id)
