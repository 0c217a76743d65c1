from artify.exception.base_exception import BaseCustomException, ErrorCode

class InvalidIdentifierError(BaseCustomException):
    """경로/본문의 식별자가 저장소 ID(UUID) 형식이 아닌 경우"""
    error_code = ErrorCode.COMMON_INVALID_ID
    message = "Invalid ID"
    status_code = 400

    def __init__(self, resource: str = None):
        super().__init__(message=f"Invalid {resource} ID" if resource else None)
