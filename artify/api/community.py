from fastapi import APIRouter, Depends
from typing import List

from artify.api.dependencies import get_community_service
from artify.models.artwork import Artwork, TopArtist
from artify.services.community_service import CommunityService

router = APIRouter(tags=["Community"])


@router.get("/top-artists", response_model=List[TopArtist])
def top_artists(service: CommunityService = Depends(get_community_service)):
    """공개 작품 수 기준 상위 작가 5명"""
    return service.top_artists()


@router.get("/community-highlights", response_model=List[Artwork])
def community_highlights(service: CommunityService = Depends(get_community_service)):
    """좋아요가 가장 많은 공개 작품 6개"""
    return service.highlights()
