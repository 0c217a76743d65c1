from __future__ import annotations

from typing import List

from artify.models.artwork import Artwork, TopArtist
from artify.repositories.base import IDocumentStore
from artify.repositories.query import GroupCount, Limit, Match, OrderBy, Sort
from artify.services.artwork_service import PUBLIC_ONLY


class CommunityService:
    """커뮤니티 집계 뷰 (Top Artists, Community Highlights)"""

    TOP_ARTISTS_LIMIT = 5
    HIGHLIGHTS_LIMIT = 6

    def __init__(self, store: IDocumentStore):
        self.artworks = store.artworks

    def top_artists(self) -> List[TopArtist]:
        """공개 작품 수 기준 상위 작가 5명"""
        rows = self.artworks.aggregate([
            Match(PUBLIC_ONLY),
            GroupCount(by="user_name", as_field="total_artworks"),
            Sort((OrderBy("total_artworks", descending=True),)),
            Limit(self.TOP_ARTISTS_LIMIT),
        ])
        return [TopArtist.model_validate(row) for row in rows]

    def highlights(self) -> List[Artwork]:
        """좋아요가 가장 많은 공개 작품 6개"""
        docs = self.artworks.find_many(
            PUBLIC_ONLY,
            sort=[OrderBy("likes", descending=True)],
            limit=self.HIGHLIGHTS_LIMIT,
        )
        return [Artwork.model_validate(doc) for doc in docs]
