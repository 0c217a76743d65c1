from typing import Any, Optional, Protocol, Sequence

from artify.repositories.query import Filter, OrderBy, Stage


class IDocumentRepository(Protocol):
    """컬렉션(테이블) 단위 문서 저장소 인터페이스 (Repository Pattern Protocol)"""

    name: str

    def find_many(
        self,
        filter: Optional[Filter] = None,
        sort: Sequence[OrderBy] = (),
        limit: Optional[int] = None,
    ) -> list[dict]:
        """
        조건에 맞는 문서 목록 조회

        Args:
            filter (Filter | None): 조회 조건. None이면 전체
            sort (Sequence[OrderBy]): 정렬 키 (앞에 있을수록 우선)
            limit (int | None): 최대 개수

        Returns:
            list[dict]: 저장소 컬럼명 기준 문서 목록
        """
        ...

    def find_one(self, doc_id: str) -> Optional[dict]:
        """ID로 단일 문서 조회. 없으면 None"""
        ...

    def insert(self, doc: dict[str, Any]) -> str:
        """
        문서 추가

        Returns:
            str: 저장소가 발급한 문서 ID
        """
        ...

    def update_one_if_match(self, filter: Filter, patch: dict[str, Any]) -> int:
        """
        조건에 맞는 문서 하나의 필드를 patch 값으로 설정

        Returns:
            int: 조건에 일치한 문서 수 (0이면 없음 또는 소유자 불일치)
        """
        ...

    def increment_one_if_match(self, filter: Filter, column: str, amount: int = 1) -> int:
        """
        조건에 맞는 문서 하나의 숫자 필드를 저장소 측에서 원자적으로 증가

        Returns:
            int: 조건에 일치한 문서 수
        """
        ...

    def delete_one_if_match(self, filter: Filter) -> int:
        """
        조건에 맞는 문서 하나 삭제

        Returns:
            int: 삭제된 문서 수
        """
        ...

    def aggregate(self, pipeline: Sequence[Stage]) -> list[dict]:
        """Match / Lookup / GroupCount / Sort / Limit 단계로 구성된 집계 실행"""
        ...


class IDocumentStore(Protocol):
    """작품/즐겨찾기 컬렉션 묶음. 애플리케이션 시작 시 생성, 종료 시 close()"""

    artworks: IDocumentRepository
    favorites: IDocumentRepository

    def close(self) -> None:
        ...
