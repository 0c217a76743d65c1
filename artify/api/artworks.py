from typing import List, Optional

from fastapi import APIRouter, Body, Depends, Query, Request, status

from artify.api.dependencies import get_artwork_service, get_current_principal, valid_artwork_id
from artify.auth.principal import Principal
from artify.core.limiter import WRITE_RATE_LIMIT, limiter
from artify.models.artwork import (
    Artwork,
    ArtworkCreate,
    ArtworkUpdate,
    CreatedResponse,
    MessageResponse,
    OkResponse,
)
from artify.services.artwork_service import ArtworkService

router = APIRouter(
    prefix="/artworks",
    tags=["Artworks"],
    responses={400: {"description": "Invalid artwork ID"}, 404: {"description": "Not found"}},
)

# NOTE: 고정 경로(/featured, /search, /explore, /user/...)는 /{artwork_id}보다 먼저 등록해야 함


@router.get("", response_model=List[Artwork])
def list_artworks(service: ArtworkService = Depends(get_artwork_service)):
    """전체 작품 목록 (공개 여부 무관)"""
    return service.list_all()


@router.get("/featured", response_model=List[Artwork])
def featured_artworks(service: ArtworkService = Depends(get_artwork_service)):
    """최신 공개 작품 6개"""
    return service.featured()


@router.get("/search", response_model=List[Artwork])
def search_artworks(
    category: Optional[str] = Query(default=None, description="카테고리 (정확히 일치)"),
    title: Optional[str] = Query(default=None, description="제목 부분 일치 (대소문자 무시)"),
    userName: Optional[str] = Query(default=None, description="작가 이름 부분 일치 (대소문자 무시)"),
    service: ArtworkService = Depends(get_artwork_service),
):
    """
    공개 작품 검색

    title과 userName이 함께 주어지면 둘 중 하나라도 일치하는 작품을 반환합니다.
    """
    return service.search(category=category, title=title, user_name=userName)


@router.get("/explore", response_model=List[Artwork])
def explore_artworks(service: ArtworkService = Depends(get_artwork_service)):
    return service.explore()


@router.get("/user/{email}", response_model=List[Artwork])
def artworks_by_user(email: str, service: ArtworkService = Depends(get_artwork_service)):
    return service.by_user_email(email)


@router.post("", response_model=CreatedResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(WRITE_RATE_LIMIT)
def create_artwork(
    request: Request,
    principal: Principal = Depends(get_current_principal),
    payload: ArtworkCreate = Body(...),
    service: ArtworkService = Depends(get_artwork_service),
):
    """
    작품 생성 (로그인 필요)

    - **Body**: {title, imageUrl, category, visibility?, description?, medium?, dimensions?, price?}
    - 소유자 정보/작성 일시/좋아요 수는 서버가 설정하며 본문 값은 무시됩니다.

    Returns:
        201 Created: {"id": "<artwork id>"}
    """
    return CreatedResponse(id=service.create(payload, principal))


@router.get("/{artwork_id}", response_model=Artwork)
def get_artwork(
    artwork_id: str = Depends(valid_artwork_id),
    service: ArtworkService = Depends(get_artwork_service),
):
    return service.get(artwork_id)


@router.put("/{artwork_id}", response_model=OkResponse)
def update_artwork(
    artwork_id: str = Depends(valid_artwork_id),
    principal: Principal = Depends(get_current_principal),
    payload: ArtworkUpdate = Body(...),
    service: ArtworkService = Depends(get_artwork_service),
):
    """
    작품 수정 (소유자 전용)

    Returns:
        200 OK: {"ok": true}
        404 Not Found: 작품이 없거나 요청자 소유가 아님 (두 경우를 구분하지 않음)
    """
    service.update(artwork_id, payload, principal)
    return OkResponse()


@router.delete("/{artwork_id}", response_model=OkResponse)
def delete_artwork(
    artwork_id: str = Depends(valid_artwork_id),
    principal: Principal = Depends(get_current_principal),
    service: ArtworkService = Depends(get_artwork_service),
):
    """작품 삭제 (소유자 전용). 이미 삭제된 작품을 다시 삭제하면 404"""
    service.delete(artwork_id, principal)
    return OkResponse()


@router.patch("/{artwork_id}/like", response_model=MessageResponse)
@limiter.limit(WRITE_RATE_LIMIT)
def like_artwork(
    request: Request,
    artwork_id: str = Depends(valid_artwork_id),
    service: ArtworkService = Depends(get_artwork_service),
):
    """좋아요 +1 (로그인 불필요, 중복 허용)"""
    service.like(artwork_id)
    return MessageResponse(message="Liked!")
