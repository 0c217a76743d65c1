from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, List

from artify.auth.principal import Principal
from artify.exception.artwork.artwork_exception import ArtworkNotFoundError
from artify.exception.favorite.favorite_exception import FavoriteNotFoundError, InvalidFavoriteTargetError
from artify.models.favorite import FavoriteWithArtwork
from artify.repositories.base import IDocumentStore
from artify.repositories.query import Lookup, Match, OrderBy, Sort
from artify.services.artwork_service import utc_now
from artify.services.ownership import DEFAULT_OWNERSHIP, OwnershipPolicy
from artify.validate.identifier_validator import is_valid_id, validate_id

logger = logging.getLogger("app")


class FavoriteService:
    """
    즐겨찾기 서비스

    Rationale:
        저장소에 외래 키가 없으므로 참조 작품 존재 여부는 추가 시점에 애플리케이션이 확인하고,
        이후 작품이 삭제되어 생긴 고아 즐겨찾기는 목록 조회 join(inner)에서 제외합니다.
    """

    def __init__(
        self,
        store: IDocumentStore,
        ownership: OwnershipPolicy = DEFAULT_OWNERSHIP,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.artworks = store.artworks
        self.favorites = store.favorites
        self.ownership = ownership
        self.clock = clock

    def add(self, artwork_id: str | None, principal: Principal) -> str:
        if not is_valid_id(artwork_id):
            raise InvalidFavoriteTargetError()
        artwork_id = validate_id(artwork_id)

        if self.artworks.find_one(artwork_id) is None:
            raise ArtworkNotFoundError()

        doc = self.ownership.stamp({"artwork_id": artwork_id, "added_at": self.clock()}, principal)
        favorite_id = self.favorites.insert(doc)
        logger.info({"message": "Favorite added", "favorite_id": favorite_id, "artwork_id": artwork_id})
        return favorite_id

    def list(self, principal: Principal) -> List[FavoriteWithArtwork]:
        """요청자의 즐겨찾기 + 작품 (최근 추가 순)"""
        rows = self.favorites.aggregate([
            Match(self.ownership.owned_by(principal)),
            Lookup(
                from_collection=self.artworks.name,
                local_field="artwork_id",
                foreign_field="id",
                as_field="artwork",
            ),
            Sort((OrderBy("added_at", descending=True),)),
        ])
        return [FavoriteWithArtwork.model_validate(row) for row in rows]

    def remove(self, favorite_id: str, principal: Principal) -> None:
        deleted = self.favorites.delete_one_if_match(self.ownership.owner_scope(favorite_id, principal))
        if deleted == 0:
            raise FavoriteNotFoundError()
        logger.info({"message": "Favorite removed", "favorite_id": favorite_id})
