# gigflow/schemas/user_schema.py
from pydantic import BaseModel, EmailStr, Field, StringConstraints, field_validator
from typing import Annotated, Optional
from datetime import datetime
import re

from gigflow.schemas.base_schema import CamelModel, Envelope

# 登入請求的格式
class UserLogin(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)

# Token 內的資料
class TokenData(BaseModel):
    user_id: str


# 註冊請求 Body
class UserCreate(BaseModel):
    name: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=100)]
    email: EmailStr
    # 密碼要求英數混合
    password: str = Field(..., min_length=8, max_length=72)

    @field_validator('password')
    @classmethod
    def validate_password(cls, v: str) -> str:
        """
        驗證密碼是否至少8碼且包含英文和數字
        """
        if not re.search(r'(?=.*[a-zA-Z])(?=.*[0-9])', v):
            raise ValueError('Password must contain both letters and digits')
        return v

# 註冊/查詢使用者的安全回應 (不含密碼)
class UserOut(CamelModel):
    user_id: str
    name: str
    email: EmailStr
    created_at: Optional[datetime] = None

# 嵌在案件/提案中的精簡使用者資訊
class UserBrief(CamelModel):
    user_id: str
    name: str
    email: str


class UserResponse(Envelope):
    user: UserOut


class LoginResponse(Envelope):
    user: UserOut
    token: str
