# =============================================================================
# 공통 HTTP 미들웨어
# =============================================================================
# TraceIDMiddleware   요청별 추적 ID 발급/전파 (X-Trace-ID)
# RealIPMiddleware    프록시 뒤 실제 클라이언트 IP 기록 + 요청 로그
# CacheControlMiddleware  작품/좋아요/즐겨찾기 응답 캐시 방지
# =============================================================================

import logging
import time
import uuid
from typing import Optional

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from artify.core.context import set_subject, set_trace_id
from artify.validate.identifier_validator import is_valid_id

logger = logging.getLogger(__name__)

TRACE_ID_HEADER = "X-Trace-ID"

# 헬스체크 경로는 요청 로그/캐시 헤더 대상에서 제외
HEALTH_CHECK_PATHS = frozenset({"/", "/ping"})

# 앞에 있을수록 우선. X-Forwarded-For는 "client, proxy1, proxy2" 형식
PROXY_IP_HEADERS = ("CF-Connecting-IP", "X-Forwarded-For", "X-Real-IP")

NO_STORE_HEADERS = {
    "Cache-Control": "no-store, no-cache, must-revalidate, max-age=0",
    "Pragma": "no-cache",
    "Expires": "0",
}


def _accepted_trace_id(value: Optional[str]) -> Optional[str]:
    """클라이언트가 보낸 Trace ID 중 UUID 형식만 수용"""
    if not value:
        return None
    if not is_valid_id(value):
        logger.warning("Invalid Trace ID received", extra={"received_trace_id": value[:64]})
        return None
    return value


class TraceIDMiddleware(BaseHTTPMiddleware):
    """
    요청마다 Trace ID를 정해 로그 컨텍스트와 응답 헤더에 싣습니다.

    프론트엔드가 UUID 형식의 X-Trace-ID를 보내면 그대로 이어 쓰고,
    없거나 형식이 틀리면 새 UUIDv4를 발급합니다.
    인증 subject는 요청 시작 시 비워 두고, 인증 Dependency가 채웁니다.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        trace_id = _accepted_trace_id(request.headers.get(TRACE_ID_HEADER)) or str(uuid.uuid4())

        set_trace_id(trace_id)
        set_subject(None)
        request.state.trace_id = trace_id

        response = await call_next(request)
        response.headers[TRACE_ID_HEADER] = trace_id
        return response


class CacheControlMiddleware(BaseHTTPMiddleware):
    """
    헬스체크를 제외한 모든 응답에 캐시 방지 헤더를 붙입니다.

    Rationale:
        좋아요 수, 즐겨찾기 목록은 요청마다 달라지므로
        CDN/브라우저가 이전 응답을 재사용하면 안 됩니다.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        response = await call_next(request)
        if request.url.path not in HEALTH_CHECK_PATHS:
            response.headers.update(NO_STORE_HEADERS)
        return response


def resolve_client_ip(request: Request) -> str:
    """프록시 헤더 -> 소켓 주소 순으로 클라이언트 IP 결정"""
    for header in PROXY_IP_HEADERS:
        value = request.headers.get(header)
        if value:
            return value.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


class RealIPMiddleware(BaseHTTPMiddleware):
    """
    실제 클라이언트 IP를 request.state.real_ip에 기록하고, 응답 후 요청 로그를 남깁니다.
    Rate Limit 키(get_real_ip)가 이 값을 사용합니다.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        real_ip = resolve_client_ip(request)
        request.state.real_ip = real_ip

        started = time.perf_counter()
        response = await call_next(request)

        if request.url.path not in HEALTH_CHECK_PATHS:
            logger.info(
                f"[{real_ip}] {request.method} {request.url.path} -> {response.status_code}",
                extra={
                    "real_ip": real_ip,
                    "method": request.method,
                    "path": request.url.path,
                    "status": response.status_code,
                    "elapsed_ms": round((time.perf_counter() - started) * 1000, 1),
                    "user_agent": request.headers.get("User-Agent", ""),
                },
            )
        return response


def get_real_ip(request: Request) -> str:
    """slowapi key_func. RealIPMiddleware를 거치지 않은 요청은 직접 계산"""
    return getattr(request.state, "real_ip", None) or resolve_client_ip(request)
