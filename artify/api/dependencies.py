from __future__ import annotations
from typing import Optional

from fastapi import Depends, Header, Request
from starlette.concurrency import run_in_threadpool

from artify.auth.principal import Principal
from artify.auth.verifier import IIdentityVerifier, extract_bearer_token
from artify.core.context import set_subject
from artify.exception.auth.auth_exception import AuthNotConfiguredError
from artify.repositories.base import IDocumentStore
from artify.services.artwork_service import ArtworkService
from artify.services.community_service import CommunityService
from artify.services.favorite_service import FavoriteService
from artify.validate.identifier_validator import validate_id


# --- Store / Auth Dependencies ---

def get_document_store(request: Request) -> IDocumentStore:
    """
    lifespan에서 생성된 문서 저장소 반환 (DI용)

    Rationale:
        전역 변수 + 최초 요청 시 연결하는 방식 대신, 프로세스 시작 시 생성한 인스턴스를
        app.state로 주입하여 연결 생명주기를 애플리케이션 시작/종료와 일치시킵니다.
    """
    return request.app.state.store


def get_identity_verifier(request: Request) -> Optional[IIdentityVerifier]:
    """인증 공급자 미설정 시 None"""
    return getattr(request.app.state, "identity_verifier", None)


async def get_current_principal(
    authorization: str | None = Header(default=None),
    verifier: Optional[IIdentityVerifier] = Depends(get_identity_verifier),
) -> Principal:
    """
    Authorization: Bearer <token> 헤더를 검증하고 Principal 반환 Dependency

    Raises:
        AuthNotConfiguredError(500): 서버에 인증 공급자 설정이 없는 경우
        UnauthenticatedError(401): 헤더가 없는 경우
        ForbiddenError(403): 토큰 형식 오류, 만료, 서명 불일치
    """
    if verifier is None:
        raise AuthNotConfiguredError()

    token = extract_bearer_token(authorization)
    # 외부 인증 서버 호출(동기 HTTP)은 스레드풀에서 실행
    principal = await run_in_threadpool(verifier.verify, token)
    set_subject(principal.subject_id)
    return principal


# --- Path Identifier Dependencies ---
# NOTE: 경로 식별자 검증을 인증보다 먼저 선언하여 "잘못된 ID -> 400"이 401/403보다 우선하도록 함

def valid_artwork_id(artwork_id: str) -> str:
    return validate_id(artwork_id, "artwork")


def valid_favorite_id(favorite_id: str) -> str:
    return validate_id(favorite_id, "favorite")


# --- Service Dependencies ---

def get_artwork_service(store: IDocumentStore = Depends(get_document_store)) -> ArtworkService:
    return ArtworkService(store)


def get_favorite_service(store: IDocumentStore = Depends(get_document_store)) -> FavoriteService:
    return FavoriteService(store)


def get_community_service(store: IDocumentStore = Depends(get_document_store)) -> CommunityService:
    return CommunityService(store)
