import json
import os
from dotenv import load_dotenv

load_dotenv()

APP_ENV = os.getenv("APP_ENV", "production")
IS_DEBUG = APP_ENV == "development"

# supabase | memory
STORE_BACKEND = os.getenv("STORE_BACKEND", "supabase").strip().lower()

SUPABASE_URL = os.getenv("SUPABASE_URL")
SUPABASE_KEY = os.getenv("SUPABASE_KEY")
SUPABASE_CREDENTIALS_FILE = os.getenv("SUPABASE_CREDENTIALS_FILE", "supabase-credentials.json")

ARTWORKS_TABLE = os.getenv("ARTWORKS_TABLE", "artworks")
FAVORITES_TABLE = os.getenv("FAVORITES_TABLE", "favorites")

RATE_LIMIT_PER_MINUTE = int(os.getenv("RATE_LIMIT_PER_MINUTE", "60"))

LOG_DIR = os.getenv("LOG_DIR", "logs")


def load_supabase_credentials(
    url: str | None = None,
    key: str | None = None,
    credentials_file: str | None = None,
) -> tuple[str, str] | None:
    """
    Supabase 접속 정보를 반환합니다.

    Rationale:
        운영 환경(Vercel, Cloud Run 등)에서는 환경변수(SUPABASE_URL, SUPABASE_KEY)를 사용하고,
        로컬 개발 시에는 JSON 자격증명 파일({"url": ..., "key": ...})로 대체할 수 있도록 합니다.
        둘 다 없으면 None을 반환하여 인증이 필요한 라우트만 실패하도록 합니다.
    """
    url = url if url is not None else SUPABASE_URL
    key = key if key is not None else SUPABASE_KEY
    if url and key:
        return url, key

    path = credentials_file if credentials_file is not None else SUPABASE_CREDENTIALS_FILE
    if not path or not os.path.isfile(path):
        return None

    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    file_url = data.get("url")
    file_key = data.get("key")
    if not file_url or not file_key:
        raise ValueError(f"{path} 파일에 url과 key 항목이 필요합니다.")
    return file_url, file_key


# CORS 허용 오리진 (환경변수 기반)
def _parse_origins(value: str | None) -> list[str]:
    if not value:
        return []
    normalized = value.replace("\n", ",").replace(";", ",")
    items = [item.strip() for item in normalized.split(",")]
    return [item for item in items if item]

_DEFAULT_CLIENT_URL = "http://localhost:5173"

# 우선순위: CLIENT_URL(단일) + CORS_ALLOWED_ORIGINS(복수)
_client_url = [os.getenv("CLIENT_URL", _DEFAULT_CLIENT_URL)]
_cors_allowed_origins = _parse_origins(os.getenv("CORS_ALLOWED_ORIGINS"))

# 중복 제거를 위해 dict 키 보존 방식 사용
ALLOWED_ORIGINS = list(dict.fromkeys(_client_url + _cors_allowed_origins))
