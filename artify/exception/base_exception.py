from enum import Enum

class ErrorCode(str, Enum):
    """
    애플리케이션 전반에서 사용하는 에러 코드 정의.
    형식: 카테고리(영문)-번호(3자리)
    """
    # 1. COMMON: 공통/일반 에러
    GENERIC_UNKNOWN = "GENERIC-000"
    COMMON_INTERNAL_ERROR = "COMMON-001"
    COMMON_INVALID_ID = "COMMON-003"
    VALIDATION_ERROR = "VALIDATION-001"

    # 2. AUTH: 인증/인가
    AUTH_UNAUTHENTICATED = "AUTH-001"   # 토큰 없음
    AUTH_FORBIDDEN = "AUTH-002"         # 토큰 검증 실패 (만료/위조/형식 오류)
    AUTH_NOT_CONFIGURED = "AUTH-003"    # 서버에 인증 공급자 설정 없음

    # 3. ARTWORK
    ARTWORK_FIELD_MISSING = "ARTWORK-001"
    ARTWORK_EMPTY_PATCH = "ARTWORK-002"
    ARTWORK_NOT_FOUND = "ARTWORK-003"

    # 4. FAVORITE
    FAVORITE_INVALID_TARGET = "FAVORITE-001"
    FAVORITE_NOT_FOUND = "FAVORITE-002"

    # 5. RATE
    RATE_LIMIT_EXCEEDED = "RATE-001"

    @staticmethod
    def http_error(status_code: int) -> str:
        """
        HTTP 상태 코드 기반 에러 코드 생성 (예: 404 -> "HTTP_404")
        Starlette가 직접 발생시키는 HTTPException(라우트 없음, 메서드 불일치 등)에 사용합니다.
        """
        return f"HTTP_{status_code}"


class BaseCustomException(Exception):
    """
    모든 커스텀 예외의 최상위 클래스.
    이 클래스를 상속받아 구체적인 예외를 정의해야 함.
    """
    error_code: ErrorCode = ErrorCode.GENERIC_UNKNOWN
    message: str = "알 수 없는 오류가 발생했습니다."
    status_code: int = 500

    def __init__(self, message: str = None, error_code: ErrorCode = None, status_code: int = None):
        if message:
            self.message = message
        if error_code:
            self.error_code = error_code
        if status_code:
            self.status_code = status_code
        super().__init__(self.message)
