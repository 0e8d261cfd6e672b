import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

from gigflow.core.config import settings
from gigflow.core.database import create_tables, engine
from gigflow.core.exceptions import AppError
from gigflow.core.websocket_manager import notification_hub
from gigflow.routers import auth_router, bid_router, gig_router, notification_router

# --- 匯入所有 Model 檔案 ---
# 都在應用程式啟動時被 SQLAlchemy 註冊。
from gigflow.models import user
from gigflow.models import gig
from gigflow.models import bid


# 設定基礎日誌
logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__) # 建立一個 logger 實例


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.DB_CREATE_TABLES:
        await create_tables()
    await notification_hub.startup()
    logger.info(f"GigFlow API started, allowed origins: {settings.allowed_origins}")
    yield
    await notification_hub.shutdown()
    await engine.dispose()


app = FastAPI(title="GigFlow API", lifespan=lifespan)

# --- 設定 CORS (跨來源資源共用) ---
# 帶 cookie 的請求只能允許明確的來源
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _envelope(status_code: int, message: str, errors=None) -> JSONResponse:
    body = {"success": False, "message": message}
    if errors:
        body["errors"] = errors
    return JSONResponse(status_code=status_code, content=body)


# --- 請求逾時 ---
@app.middleware("http")
async def enforce_request_timeout(request: Request, call_next):
    try:
        return await asyncio.wait_for(call_next(request), timeout=settings.REQUEST_TIMEOUT_SECONDS)
    except asyncio.TimeoutError:
        logger.error(f"Request timed out: {request.method} {request.url.path}")
        return _envelope(status.HTTP_503_SERVICE_UNAVAILABLE, "Request timed out, please retry")


# --- 錯誤處理：統一回傳 {success: false, message, errors?} ---
@app.exception_handler(AppError)
async def handle_app_error(request: Request, exc: AppError):
    if exc.status_code >= 500:
        logger.error(f"{exc.kind} error on {request.method} {request.url.path}: {exc.message}")
    return _envelope(exc.status_code, exc.message, exc.errors)


@app.exception_handler(RequestValidationError)
async def handle_validation_error(request: Request, exc: RequestValidationError):
    errors = []
    for err in exc.errors():
        location = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        errors.append(f"{location}: {err.get('msg')}" if location else err.get("msg"))
    return _envelope(status.HTTP_400_BAD_REQUEST, "Validation failed", errors)


@app.exception_handler(StarletteHTTPException)
async def handle_http_exception(request: Request, exc: StarletteHTTPException):
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    return _envelope(exc.status_code, message)


@app.exception_handler(IntegrityError)
async def handle_integrity_error(request: Request, exc: IntegrityError):
    logger.warning(f"Integrity error on {request.method} {request.url.path}: {exc.orig}")
    return _envelope(status.HTTP_400_BAD_REQUEST, "Request conflicts with existing data")


@app.exception_handler(Exception)
async def handle_unexpected_error(request: Request, exc: Exception):
    # 不把內部錯誤訊息回傳給前端
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return _envelope(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


# --- 健康檢查 ---
@app.get("/health")
def health_check():
    return {"success": True, "status": "ok", "message": "GigFlow API running"}

# --- 載入 API 路由 ---
app.include_router(auth_router.router)
app.include_router(gig_router.router)
app.include_router(bid_router.router)
app.include_router(notification_router.router)
