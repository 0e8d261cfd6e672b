# gigflow/core/config.py
# 應用程式設定 (資料庫連線字串、JWT 秘鑰、CORS 來源等)
from typing import List, Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # 伺服器設定
    HOST: str = "0.0.0.0"
    PORT: int = 5000

    # 資料庫設定
    DATABASE_URL: str
    # MySQL 建議使用 "READ COMMITTED"；SQLite 請留空
    DB_ISOLATION_LEVEL: Optional[str] = None
    DB_POOL_TIMEOUT_SECONDS: float = 10.0
    # 單一交易 (例如 hire) 的時間上限
    DB_OPERATION_TIMEOUT_SECONDS: float = 15.0
    DB_ECHO: bool = False
    # 啟動時自動建立資料表 (開發用)
    DB_CREATE_TABLES: bool = False

    # JWT 設定
    JWT_SECRET_KEY: str
    JWT_ALGORITHM: str = "HS256"
    # 存取令牌過期時間（分鐘）
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7
    AUTH_COOKIE_NAME: str = "token"
    COOKIE_SECURE: bool = False

    # 允許的前端來源，逗號分隔
    FRONTEND_URL: str = "http://localhost:5173"

    # 每個 HTTP 請求的時間上限
    REQUEST_TIMEOUT_SECONDS: float = 30.0

    LOG_LEVEL: str = "INFO"

    @property
    def allowed_origins(self) -> List[str]:
        return [origin.strip() for origin in self.FRONTEND_URL.split(",") if origin.strip()]

    # 環境變數檔案
    class Config:
        env_file = ".env"

# 建立設定實例
settings = Settings()
