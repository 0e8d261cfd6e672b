# gigflow/core/security.py
# 負責密碼雜湊與 JWT 權杖的產生與驗證
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.ext.asyncio import AsyncSession

from gigflow.core.config import settings
from gigflow.core.database import get_db
from gigflow.core.exceptions import UnauthenticatedError
from gigflow.models.user import User
from gigflow.repositories.user_repo import UserRepository
from gigflow.schemas.user_schema import TokenData

logger = logging.getLogger(__name__)

# 1. 密碼雜湊設定 (Bcrypt)
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# 2. Authorization Header；缺少時不自動回 401，改由 get_current_user 判斷
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login", auto_error=False)

def verify_password(plain_password: str, hashed_password: str) -> bool:
    """驗證明文密碼是否與雜湊值相符"""
    return pwd_context.verify(plain_password, hashed_password)

def get_password_hash(password: str) -> str:
    """產生密碼的雜湊值"""
    return pwd_context.hash(password)

def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """
    根據傳入的 data (e.g., user_id) 產生 JWT access token
    """
    to_encode = data.copy() # 避免修改原始資料
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    to_encode.update({"exp": expire})

    return jwt.encode(
        to_encode,
        settings.JWT_SECRET_KEY,
        algorithm=settings.JWT_ALGORITHM
    )

def verify_access_token(token: str) -> TokenData | None:
    """
    驗證 JWT 簽章與期限，回傳 TokenData 或 None
    """
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET_KEY,
            algorithms=[settings.JWT_ALGORITHM]
        )
    except JWTError:
        return None

    user_id = payload.get("user_id")
    if not user_id:
        return None
    return TokenData(user_id=str(user_id))

def extract_token(request_cookies, bearer_token: Optional[str]) -> Optional[str]:
    """Cookie 優先，其次才是 Authorization: Bearer"""
    return request_cookies.get(settings.AUTH_COOKIE_NAME) or bearer_token

async def resolve_user_from_token(token: Optional[str], db: AsyncSession) -> User:
    """
    驗證 Token 並解析出 User；任何失敗都回 401 (fail closed)
    """
    if not token:
        raise UnauthenticatedError("Not authorized, no token provided")

    token_data = verify_access_token(token)
    if token_data is None:
        raise UnauthenticatedError("Not authorized, token invalid or expired")

    user = await UserRepository(db).get_user_by_id(user_id=token_data.user_id)
    if user is None:
        raise UnauthenticatedError("Not authorized, user not found")
    return user

async def get_current_user(
    request: Request,
    bearer_token: Optional[str] = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_db)
) -> User:
    """
    FastAPI 依賴項：驗證 Token 並回傳 User Model (用於 REST API)
    """
    token = extract_token(request.cookies, bearer_token)
    return await resolve_user_from_token(token, db)
