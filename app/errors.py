# app/errors.py
# Role: Application error taxonomy.
#       Every foreseeable failure is raised as an AppError subclass and turned
#       into the error envelope by the handlers registered in app/main.py.

from typing import Any


class ErrorCodes:
    UNAUTHORIZED = "ERR_UNAUTHORIZED"
    FORBIDDEN = "ERR_FORBIDDEN"
    VALIDATION = "ERR_VALIDATION"
    NOT_FOUND = "ERR_NOT_FOUND"
    CONFLICT = "ERR_CONFLICT"
    INTERNAL = "ERR_INTERNAL"


class AppError(Exception):
    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = 500,
        context: Any = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.status_code = status_code
        self.context = context


class ValidationError(AppError):
    def __init__(self, message: str, context: Any = None):
        super().__init__(ErrorCodes.VALIDATION, message, 400, context)


class UnauthorizedError(AppError):
    def __init__(self, message: str = "No valid session"):
        super().__init__(ErrorCodes.UNAUTHORIZED, message, 401)


class ForbiddenError(AppError):
    def __init__(self, message: str = "Insufficient permissions"):
        super().__init__(ErrorCodes.FORBIDDEN, message, 403)


class NotFoundError(AppError):
    def __init__(self, message: str = "Resource not found"):
        super().__init__(ErrorCodes.NOT_FOUND, message, 404)


class ConflictError(AppError):
    def __init__(self, message: str, context: Any = None):
        super().__init__(ErrorCodes.CONFLICT, message, 409, context)


class InsufficientBalanceError(ValidationError):
    def __init__(self, message: str = "Insufficient balance in account", context: Any = None):
        super().__init__(message, context)
