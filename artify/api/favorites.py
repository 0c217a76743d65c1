from fastapi import APIRouter, Body, Depends, Request, status
from typing import List

from artify.api.dependencies import get_current_principal, get_favorite_service, valid_favorite_id
from artify.auth.principal import Principal
from artify.core.limiter import WRITE_RATE_LIMIT, limiter
from artify.models.artwork import CreatedResponse, OkResponse
from artify.models.favorite import FavoriteCreate, FavoriteWithArtwork
from artify.services.favorite_service import FavoriteService

router = APIRouter(
    prefix="/favorites",
    tags=["Favorites"],
    responses={401: {"description": "Unauthorized"}, 403: {"description": "Forbidden"}},
)


@router.post("", response_model=CreatedResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(WRITE_RATE_LIMIT)
def add_favorite(
    request: Request,
    principal: Principal = Depends(get_current_principal),
    payload: FavoriteCreate = Body(...),
    service: FavoriteService = Depends(get_favorite_service),
):
    """
    즐겨찾기 추가

    - **Body**: {"artworkId": "<artwork id>"} (UUID 형식 필수, 존재하는 작품이어야 함)

    Returns:
        201 Created: {"id": "<favorite id>"}
    """
    return CreatedResponse(id=service.add(payload.artworkId, principal))


@router.get("", response_model=List[FavoriteWithArtwork])
def get_favorites(
    principal: Principal = Depends(get_current_principal),
    service: FavoriteService = Depends(get_favorite_service),
):
    """
    내 즐겨찾기 목록 (작품 정보 포함)

    작품이 삭제된 즐겨찾기는 포함되지 않습니다.
    """
    return service.list(principal)


@router.delete("/{favorite_id}", response_model=OkResponse)
def delete_favorite(
    favorite_id: str = Depends(valid_favorite_id),
    principal: Principal = Depends(get_current_principal),
    service: FavoriteService = Depends(get_favorite_service),
):
    service.remove(favorite_id, principal)
    return OkResponse()
