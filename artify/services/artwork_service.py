"""
작품(Artwork) 조회/작성 서비스

라우터는 입력 검증과 응답 변환만 담당하고, 저장소 조건 구성과
서버 관리 필드(소유자, 작성 일시, 좋아요 수) 설정은 이 계층에서 처리합니다.
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable, List, Optional

from artify.auth.principal import Principal
from artify.exception.artwork.artwork_exception import (
    ArtworkFieldMissingError,
    ArtworkNotFoundError,
    EmptyArtworkPatchError,
)
from artify.models.artwork import Artwork, ArtworkCreate, ArtworkUpdate, Visibility
from artify.repositories.base import IDocumentStore
from artify.repositories.query import Filter, OrderBy
from artify.services.ownership import DEFAULT_OWNERSHIP, OwnershipPolicy

logger = logging.getLogger("app")

PUBLIC_ONLY = Filter(eq={"visibility": Visibility.PUBLIC.value})


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ArtworkService:
    """작품 CRUD 및 공개 목록 조회"""

    FEATURED_LIMIT = 6

    def __init__(
        self,
        store: IDocumentStore,
        ownership: OwnershipPolicy = DEFAULT_OWNERSHIP,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.artworks = store.artworks
        self.ownership = ownership
        self.clock = clock

    # ------------------------------------------------------------------
    # 공개 조회
    # ------------------------------------------------------------------
    def list_all(self) -> List[Artwork]:
        return self._to_models(self.artworks.find_many())

    def featured(self) -> List[Artwork]:
        """최신 공개 작품 6개"""
        docs = self.artworks.find_many(
            PUBLIC_ONLY,
            sort=[OrderBy("created_at", descending=True)],
            limit=self.FEATURED_LIMIT,
        )
        return self._to_models(docs)

    def search(
        self,
        category: Optional[str] = None,
        title: Optional[str] = None,
        user_name: Optional[str] = None,
    ) -> List[Artwork]:
        """
        공개 작품 검색

        - category: 정확히 일치
        - title / user_name: 대소문자 무시 부분 일치. 둘 다 주어지면 둘 중 하나만 맞아도 포함(OR)
        - 빈 문자열 파라미터는 전달되지 않은 것으로 취급
        """
        filter = PUBLIC_ONLY
        if category:
            filter = filter.and_eq(category=category)

        contains = {}
        if title:
            contains["title"] = title
        if user_name:
            contains["user_name"] = user_name
        if contains:
            filter = Filter(eq=filter.eq, contains_any=contains)

        return self._to_models(self.artworks.find_many(filter))

    def explore(self) -> List[Artwork]:
        return self._to_models(self.artworks.find_many(PUBLIC_ONLY))

    def by_user_email(self, email: str) -> List[Artwork]:
        return self._to_models(self.artworks.find_many(Filter(eq={"user_email": email})))

    def get(self, artwork_id: str) -> Artwork:
        doc = self.artworks.find_one(artwork_id)
        if doc is None:
            raise ArtworkNotFoundError()
        return Artwork.model_validate(doc)

    # ------------------------------------------------------------------
    # 소유자 전용 변경
    # ------------------------------------------------------------------
    def create(self, payload: ArtworkCreate, principal: Principal) -> str:
        """
        작품 생성

        Note:
            소유자 정보, 작성 일시, 좋아요 수는 항상 서버 값으로 설정합니다.
            요청 본문에 userEmail 등이 있어도 ArtworkCreate 단계에서 버려집니다.
        """
        if payload.missing_required():
            raise ArtworkFieldMissingError()

        doc = payload.to_columns()
        doc.update({
            "visibility": doc.get("visibility") or Visibility.PUBLIC.value,
            "user_name": principal.display_name or "Anonymous",
            "user_photo_url": principal.avatar_url,
            "created_at": self.clock(),
            "likes": 0,
        })
        doc = self.ownership.stamp(doc, principal)

        artwork_id = self.artworks.insert(doc)
        logger.info({"message": "Artwork created", "artwork_id": artwork_id, "category": doc["category"]})
        return artwork_id

    def update(self, artwork_id: str, payload: ArtworkUpdate, principal: Principal) -> None:
        """
        소유자 본인의 작품 수정

        Note:
            수정 가능한 필드(allow-list)만 반영하며, null 값은 무시합니다.
            소유자가 아니면 '없음'과 같은 404로 응답합니다.
        """
        if payload.blank_required():
            raise ArtworkFieldMissingError(message="Title, image URL, and category cannot be empty.")

        patch = payload.to_columns()
        if not patch:
            raise EmptyArtworkPatchError()

        matched = self.artworks.update_one_if_match(self.ownership.owner_scope(artwork_id, principal), patch)
        if matched == 0:
            raise ArtworkNotFoundError.not_owned()
        logger.info({"message": "Artwork updated", "artwork_id": artwork_id, "fields": sorted(patch)})

    def delete(self, artwork_id: str, principal: Principal) -> None:
        deleted = self.artworks.delete_one_if_match(self.ownership.owner_scope(artwork_id, principal))
        if deleted == 0:
            raise ArtworkNotFoundError.not_owned()
        logger.info({"message": "Artwork deleted", "artwork_id": artwork_id})

    # ------------------------------------------------------------------
    # 좋아요 (공개, 중복 허용)
    # ------------------------------------------------------------------
    def like(self, artwork_id: str) -> None:
        matched = self.artworks.increment_one_if_match(Filter(eq={"id": artwork_id}), "likes", 1)
        if matched == 0:
            raise ArtworkNotFoundError()

    @staticmethod
    def _to_models(docs) -> List[Artwork]:
        return [Artwork.model_validate(doc) for doc in docs]
