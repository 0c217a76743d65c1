import contextvars
from typing import Optional

# 요청 단위 식별자. 로깅 시 request 객체 없이 현재 요청을 식별하기 위해 사용합니다.
trace_id_context: contextvars.ContextVar[Optional[str]] = contextvars.ContextVar("trace_id", default=None)

# 인증된 요청의 subject id (Supabase user id). 공개 라우트에서는 None.
subject_context: contextvars.ContextVar[Optional[str]] = contextvars.ContextVar("subject", default=None)


def get_trace_id() -> Optional[str]:
    """현재 컨텍스트의 Trace ID를 반환합니다."""
    return trace_id_context.get()


def set_trace_id(trace_id: str) -> None:
    trace_id_context.set(trace_id)


def get_subject() -> Optional[str]:
    return subject_context.get()


def set_subject(subject_id: Optional[str]) -> None:
    """인증 검증이 끝난 뒤 principal의 subject id를 기록합니다."""
    subject_context.set(subject_id)
