import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from artify.api.artworks import router as artworks_router
from artify.api.community import router as community_router
from artify.api.favorites import router as favorites_router
from artify.auth.verifier import SupabaseIdentityVerifier
from artify.core import config
from artify.core.limiter import limiter
from artify.core.logging_config import setup_logging
from artify.core.middleware import CacheControlMiddleware, RealIPMiddleware, TraceIDMiddleware
from artify.core.supabase import create_supabase_client
from artify.exception.exception_handler import register_exception_handlers
from artify.repositories.memory import MemoryDocumentStore
from artify.repositories.supabase_repository import SupabaseDocumentStore

logger = logging.getLogger("app")


def build_resources(app: FastAPI) -> None:
    """
    저장소/인증 공급자를 생성하여 app.state에 등록합니다.

    - STORE_BACKEND=supabase: Supabase 테이블 저장소 (접속 정보 필수)
    - STORE_BACKEND=memory: 프로세스 메모리 저장소 (로컬 개발/데모용)
    - 인증 공급자 접속 정보가 없으면 identity_verifier=None -> 로그인 필요한 라우트만 500
    """
    credentials = config.load_supabase_credentials()
    client = create_supabase_client(*credentials) if credentials else None

    if config.STORE_BACKEND == "memory":
        store = MemoryDocumentStore(config.ARTWORKS_TABLE, config.FAVORITES_TABLE)
    elif config.STORE_BACKEND == "supabase":
        if client is None:
            raise ValueError("STORE_BACKEND=supabase 사용 시 SUPABASE_URL과 SUPABASE_KEY 환경변수가 필요합니다.")
        store = SupabaseDocumentStore(client, config.ARTWORKS_TABLE, config.FAVORITES_TABLE)
    else:
        raise ValueError(f"지원하지 않는 STORE_BACKEND 입니다: {config.STORE_BACKEND}")

    app.state.store = store
    app.state.identity_verifier = SupabaseIdentityVerifier(client) if client else None

    if app.state.identity_verifier is None:
        logger.warning("Identity provider not configured. Private routes will fail.")
    logger.info(f"Document store initialized (backend={config.STORE_BACKEND})")


@asynccontextmanager
async def lifespan(app: FastAPI):
    build_resources(app)
    try:
        yield
    finally:
        app.state.store.close()


def create_app() -> FastAPI:
    app = FastAPI(title="Artify API", lifespan=lifespan)

    # Rate Limiter (slowapi는 app.state.limiter를 참조)
    app.state.limiter = limiter

    # 미들웨어는 나중에 추가한 것이 바깥쪽에서 실행됨
    # 실행 순서: CORS -> TraceID -> RealIP -> CacheControl -> 라우터
    app.add_middleware(CacheControlMiddleware)
    app.add_middleware(RealIPMiddleware)
    app.add_middleware(TraceIDMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "X-Trace-ID"],
        expose_headers=["X-Trace-ID"],
    )

    @app.get("/", response_class=PlainTextResponse, include_in_schema=False)
    def root():
        return "Artify Server API OK!"

    @app.get("/ping")
    def ping():
        return {"ok": True}

    app.include_router(artworks_router)
    app.include_router(favorites_router)
    app.include_router(community_router)

    register_exception_handlers(app)
    return app


# 로깅 설정(콘솔 + 일자별 파일 로테이션, JSON 포맷)
setup_logging(config.LOG_DIR)

app = create_app()
