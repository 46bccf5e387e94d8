import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

log = logging.getLogger(__name__)

class AppError(Exception):
    def __init__(self, message: str, status_code: int = 400, code: str = "app_error"):
        super().__init__(message)
        self.status_code = status_code
        self.code = code
        self.message = message

class NotFoundError(AppError):
    def __init__(self, message: str = "Not found"):
        super().__init__(message, status_code=404, code="not_found")

class UnauthorizedError(AppError):
    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message, status_code=401, code="unauthorized")

class ForbiddenError(AppError):
    def __init__(self, message: str = "Forbidden"):
        super().__init__(message, status_code=403, code="forbidden")

class ValidationError(AppError):
    def __init__(self, message: str = "Validation error", status_code: int = 422):
        super().__init__(message, status_code=status_code, code="validation_error")

class MissingRecipientError(ValidationError):
    """Raised before any transport call when a notification has no recipient."""
    def __init__(self, message: str = "Recipient email is required"):
        super().__init__(message, status_code=400)

class ConflictError(AppError):
    def __init__(self, message: str = "Conflict"):
        super().__init__(message, status_code=409, code="conflict")

class PersistenceError(AppError):
    def __init__(self, message: str = "Database request failed"):
        super().__init__(message, status_code=502, code="persistence_error")

class NotificationError(AppError):
    def __init__(self, message: str = "Notification delivery failed"):
        super().__init__(message, status_code=502, code="notification_error")

def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(AppError)
    async def handle_app_error(request: Request, exc: AppError):
        if exc.status_code >= 500:
            log.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return JSONResponse(
            status_code=exc.status_code,
            content={"ok": False, "error": exc.code, "message": exc.message}
        )
