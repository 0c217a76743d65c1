from artify.exception.base_exception import BaseCustomException, ErrorCode

class RateLimitException(BaseCustomException):
    error_code = ErrorCode.RATE_LIMIT_EXCEEDED
    message = "요청 횟수가 초과되었습니다. 잠시 후 다시 시도해주세요."
    status_code = 429
