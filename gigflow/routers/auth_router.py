import logging
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from gigflow.core.config import settings
from gigflow.core.database import get_db
from gigflow.core.exceptions import UnauthenticatedError
from gigflow.core.security import get_current_user
from gigflow.models.user import User
from gigflow.services.auth_service import AuthService
from gigflow.schemas.base_schema import Envelope
from gigflow.schemas.user_schema import LoginResponse, UserCreate, UserLogin, UserResponse


logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/auth", # 路由前綴
    tags=["Auth"]    # API 文件分類標籤
)


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def register_new_user(
    user_data: UserCreate, # Request Body 會被 Pydantic 驗證
    db: AsyncSession = Depends(get_db)
):
    """
    註冊新使用者

    - 密碼需至少8碼，且包含英文和數字。
    """
    auth_service = AuthService(db)
    new_user = await auth_service.register_user(user_data)
    return {"success": True, "message": "User registered successfully", "user": new_user}


@router.post("/login", response_model=LoginResponse)
async def login(
    credentials: UserLogin,
    response: Response,
    db: AsyncSession = Depends(get_db)
):
    """
    以 email / 密碼登入。Token 同時寫入 httpOnly cookie 並回傳於 body。
    """
    auth_service = AuthService(db)
    user = await auth_service.authenticate_user(
        email=credentials.email,
        password=credentials.password
    )
    if not user:
        raise UnauthenticatedError("Invalid email or password")

    access_token = auth_service.create_login_token(user)
    response.set_cookie(
        key=settings.AUTH_COOKIE_NAME,
        value=access_token,
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite="none" if settings.COOKIE_SECURE else "lax",
    )

    logger.info(f"User logged in: {user.user_id}")
    return {"success": True, "message": "Login successful", "user": user, "token": access_token}


@router.post("/logout", response_model=Envelope)
async def logout(response: Response):
    response.delete_cookie(key=settings.AUTH_COOKIE_NAME)
    return {"success": True, "message": "Logged out successfully"}


@router.get("/me", response_model=UserResponse)
async def read_users_me(
    current_user: User = Depends(get_current_user)
):
    """
    獲取當前登入使用者的基本資料 (不含密碼)
    """
    return {"success": True, "user": current_user}
