from artify.exception.base_exception import BaseCustomException, ErrorCode

class UnauthenticatedError(BaseCustomException):
    error_code = ErrorCode.AUTH_UNAUTHENTICATED
    message = "Unauthorized"
    status_code = 401

class ForbiddenError(BaseCustomException):
    error_code = ErrorCode.AUTH_FORBIDDEN
    message = "Forbidden"
    status_code = 403

class AuthNotConfiguredError(BaseCustomException):
    error_code = ErrorCode.AUTH_NOT_CONFIGURED
    message = "Auth not configured on server"
    status_code = 500
