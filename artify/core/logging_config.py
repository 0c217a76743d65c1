import logging
import json
import os
import re
from logging.handlers import TimedRotatingFileHandler
from typing import Any

from artify.core.context import get_subject, get_trace_id

# LogRecord 기본 속성. extra로 전달된 값만 골라내기 위해 사용합니다.
_RESERVED_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", (), None)).keys()) | {"message", "asctime"}


class LogMasker:
    """
    로그에 남으면 안 되는 값(토큰, 비밀번호, 키)을 마스킹합니다.

    Rationale:
        Authorization 헤더의 Bearer 토큰이나 Supabase 서비스 키가
        에러 로그의 detail/extra를 통해 파일에 기록되는 것을 막기 위해 사용합니다.
    """

    MASK = "***"
    SENSITIVE_KEYS = (
        "authorization",
        "password",
        "secret",
        "token",
        "api_key",
        "apikey",
        "private_key",
        "supabase_key",
    )

    _KEY_PATTERN = "|".join(re.escape(k) for k in SENSITIVE_KEYS)
    # key=value, key: value 형식 (access_token, refresh_token 등 접두사 포함)
    _PAIR_RE = re.compile(
        rf"(?P<key>\b\w*(?:{_KEY_PATTERN})\w*)(?P<sep>\s*[=:]\s*)(?P<value>[^\s,&;\"']+)",
        re.IGNORECASE,
    )
    _BEARER_RE = re.compile(r"(Bearer\s+)[A-Za-z0-9\-_.=+/]+", re.IGNORECASE)

    @classmethod
    def is_sensitive(cls, key: Any) -> bool:
        if not isinstance(key, str):
            return False
        lowered = key.lower()
        return any(k in lowered for k in cls.SENSITIVE_KEYS)

    @classmethod
    def mask_string(cls, text: str) -> str:
        if not text:
            return text
        masked = cls._BEARER_RE.sub(lambda m: f"{m.group(1)}{cls.MASK}", text)
        return cls._PAIR_RE.sub(lambda m: f"{m.group('key')}{m.group('sep').strip()}{cls.MASK}", masked)

    @classmethod
    def mask_dict(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {
                k: cls.MASK if cls.is_sensitive(k) else cls.mask_dict(v)
                for k, v in data.items()
            }
        if isinstance(data, (list, tuple)):
            return [cls.mask_dict(item) for item in data]
        if isinstance(data, str):
            return cls.mask_string(data)
        return data


class SensitiveDataFilter(logging.Filter):
    """LogRecord의 메시지와 extra 필드를 마스킹하는 필터"""

    def filter(self, record: logging.LogRecord) -> bool:
        if isinstance(record.msg, dict):
            record.msg = LogMasker.mask_dict(record.msg)
        elif isinstance(record.msg, str):
            if record.args:
                record.msg = record.getMessage()
                record.args = ()
            record.msg = LogMasker.mask_string(record.msg)

        for key, value in list(vars(record).items()):
            if key in _RESERVED_ATTRS:
                continue
            setattr(record, key, LogMasker.MASK if LogMasker.is_sensitive(key) else LogMasker.mask_dict(value))
        return True


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        # 메시지가 dict면 그대로 기반으로 삼고, 아니면 기본 구조 생성
        base_message = record.msg if isinstance(record.msg, dict) else {
            "message": record.getMessage()
        }

        log = {
            "timestamp": self.formatTime(record, datefmt="%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "logger": record.name,
            "trace_id": get_trace_id(),
            **base_message,
        }

        subject = get_subject()
        if subject:
            log["subject"] = subject

        for key, value in vars(record).items():
            if key not in _RESERVED_ATTRS and key not in log:
                log[key] = value

        if record.exc_info:
            log["exc_info"] = self.formatException(record.exc_info)

        return json.dumps(log, ensure_ascii=False, default=str)


def setup_logging(log_dir: str = "logs", level: int = logging.INFO) -> None:
    os.makedirs(log_dir, exist_ok=True)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # uvicorn --reload 등으로 재호출될 때 핸들러가 중복 등록되지 않도록 정리
    for handler in list(root_logger.handlers):
        if getattr(handler, "_artify_handler", False):
            root_logger.removeHandler(handler)

    json_formatter = JsonFormatter()
    sensitive_filter = SensitiveDataFilter()

    # 콘솔 핸들러
    console_handler = logging.StreamHandler()

    # 일자별 파일 로테이션 핸들러 (자정 기준, 7일 보관)
    file_handler = TimedRotatingFileHandler(
        filename=os.path.join(log_dir, "app.log"),
        when="midnight",
        backupCount=7,
        encoding="utf-8",
        utc=False,
    )

    for handler in (console_handler, file_handler):
        handler.setFormatter(json_formatter)
        handler.addFilter(sensitive_filter)
        handler._artify_handler = True
        root_logger.addHandler(handler)
