import logging
import uuid

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from gigflow.core.exceptions import ConflictError
from gigflow.core.security import verify_password, create_access_token, get_password_hash
from gigflow.models.user import User
from gigflow.repositories.user_repo import UserRepository
from gigflow.schemas.user_schema import UserCreate

logger = logging.getLogger(__name__)

class AuthService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.user_repo = UserRepository(db)

    async def authenticate_user(self, email: str, password: str) -> User | None:
        """
        驗證使用者帳號密碼。
        成功回傳 User 物件，失敗回傳 None。
        """
        user = await self.user_repo.get_user_by_email(email)

        if not user:
            return None

        if not verify_password(plain_password=password, hashed_password=user.password_hash):
            return None

        return user

    async def register_user(self, user_create: UserCreate) -> User:
        """
        處理使用者註冊
        """
        # 1. 檢查 Email 是否已被註冊
        existing_user = await self.user_repo.get_user_by_email(user_create.email)
        if existing_user:
            raise ConflictError("User with this email already exists")

        # 2. 雜湊密碼
        hashed_password = get_password_hash(user_create.password)

        # 3. 建立 User ORM 模型
        new_user = User(
            user_id=str(uuid.uuid4()),
            name=user_create.name,
            email=user_create.email,
            password_hash=hashed_password,
        )

        # 4. 儲存；同時註冊時由唯一索引擋下
        try:
            created_user = await self.user_repo.create_user(new_user)
        except IntegrityError:
            await self.db.rollback()
            raise ConflictError("User with this email already exists")

        logger.info(f"User registered: {created_user.user_id}")
        return created_user

    def create_login_token(self, user: User) -> str:
        """
        為指定使用者建立 access token
        """
        return create_access_token(data={"sub": str(user.user_id), "user_id": str(user.user_id)})
