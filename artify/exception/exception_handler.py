from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException
from datetime import datetime
import logging
import traceback

from artify.core import config
from artify.core.response import ValidationErrorDetail, error_response
from artify.exception.base_exception import BaseCustomException, ErrorCode
from artify.exception.common.rate_limit_exception import RateLimitException

logger = logging.getLogger("app")


def _client_ip(request: Request) -> str | None:
    real_ip = getattr(request.state, "real_ip", None)
    if real_ip:
        return real_ip
    return request.client.host if request.client else None


async def custom_exception_handler(request: Request, exc: BaseCustomException):
    """
    커스텀 예외 처리 핸들러 (도메인 에러)

    Rationale:
        4xx는 클라이언트 입력 문제이므로 경고 수준으로, 스택 트레이스 없이 기록합니다.
        5xx 도메인 예외(인증 공급자 미설정 등)는 운영자가 확인해야 하므로 에러 수준으로 기록합니다.
    """
    # error_code가 Enum이면 .value, 아니면 그대로 사용
    error_code_value = exc.error_code.value if hasattr(exc.error_code, "value") else exc.error_code

    log = logger.error if exc.status_code >= 500 else logger.warning
    log({
        "timestamp": datetime.now().isoformat(timespec="seconds"),
        "status": exc.status_code,
        "errorCode": error_code_value,
        "message": exc.message,
        "client_ip": _client_ip(request),
        "path": request.url.path,
    })

    return JSONResponse(
        status_code=exc.status_code,
        content=error_response(
            message=exc.message,
            code=error_code_value,
        ).model_dump(),
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """
    Starlette HTTPException(없는 경로, 허용되지 않은 메서드 등)을 Envelope 포맷으로 변환
    """
    return JSONResponse(
        status_code=exc.status_code,
        content=error_response(
            message=str(exc.detail),
            code=ErrorCode.http_error(exc.status_code),
        ).model_dump(),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    Pydantic Validation Error를 400 Envelope 포맷으로 변환

    Rationale:
        잘못된 JSON 본문, 타입이 맞지 않는 필드 등은 모두 클라이언트 입력 오류(400)로 취급합니다.
        필드별 상세 정보를 result에 담아 프론트엔드가 폼 에러를 표시할 수 있게 합니다.
    """
    error_details = {}
    for error in exc.errors():
        field = ".".join(str(loc) for loc in error["loc"])
        error_details[field] = ValidationErrorDetail(
            message=error["msg"],
            type=error["type"],
            input=error.get("input"),
        )

    logger.warning({
        "status": status.HTTP_400_BAD_REQUEST,
        "errorCode": ErrorCode.VALIDATION_ERROR.value,
        "fields": sorted(error_details),
        "path": request.url.path,
    })

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_response(
            message="입력값을 확인해주세요.",
            code=ErrorCode.VALIDATION_ERROR.value,
            result=error_details,
        ).model_dump(mode="json"),
    )


async def global_exception_handler(request: Request, exc: Exception):
    """
    전역 예외 처리 핸들러 (5xx, 미처리 예외)

    저장소 장애, 예상치 못한 예외 등은 상세 내용을 서버 로그에만 남기고
    클라이언트에는 일반 메시지만 반환합니다.
    """
    error_msg = str(exc)
    stack_trace = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))

    # 항상 스택 트레이스 포함하여 서버 로그에 남김
    logger.error(
        {
            "timestamp": datetime.now().isoformat(timespec="seconds"),
            "status": 500,
            "errorCode": ErrorCode.COMMON_INTERNAL_ERROR.value,
            "message": "Internal Server Error",
            "detail": error_msg,
            "path": request.url.path,
            "method": request.method,
        },
        exc_info=(type(exc), exc, exc.__traceback__),
    )

    response_content = error_response(
        code=ErrorCode.COMMON_INTERNAL_ERROR.value,
        message="Internal Server Error",
    ).model_dump()

    # 개발 환경(IS_DEBUG=True)인 경우에만 스택 트레이스 포함
    if config.IS_DEBUG:
        response_content["result"] = {
            "error_detail": error_msg,
            "stack_trace": stack_trace,
        }

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=response_content,
    )


async def rate_limit_exception_handler(request: Request, exc: RateLimitExceeded):
    """
    slowapi의 RateLimitExceeded를 비즈니스 예외(RateLimitException)로 변환하여
    일관된 에러 응답 포맷(429)을 유지합니다.
    """
    return await custom_exception_handler(request, RateLimitException())


def register_exception_handlers(app) -> None:
    app.add_exception_handler(BaseCustomException, custom_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(RateLimitExceeded, rate_limit_exception_handler)
    app.add_exception_handler(Exception, global_exception_handler)
