# gigflow/core/exceptions.py
# 服務層使用的錯誤型別；由 main.py 的 exception handler 轉成統一的回應格式
from typing import List, Optional

from fastapi import status


class AppError(Exception):
    """所有業務錯誤的基底類別"""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    kind: str = "internal"
    default_message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None, errors: Optional[List[str]] = None):
        self.message = message or self.default_message
        self.errors = errors
        super().__init__(self.message)


class ValidationFailedError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    kind = "validation"
    default_message = "Validation failed"


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    kind = "not_found"
    default_message = "Resource not found"


class ForbiddenError(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    kind = "forbidden"
    default_message = "Not authorized to perform this action"


class ConflictError(AppError):
    # 狀態前提不成立 (重複提案、案件已成交、提案非 pending)
    status_code = status.HTTP_400_BAD_REQUEST
    kind = "conflict"
    default_message = "Request conflicts with the current state"


class UnauthenticatedError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    kind = "unauthenticated"
    default_message = "Not authorized, no token provided"


class InternalError(AppError):
    pass


class StoreTimeoutError(InternalError):
    """資料庫操作逾時；客戶端可重試"""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_message = "The server is busy, please retry"
