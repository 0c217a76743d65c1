from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Sequence
import logging
import re

from supabase import Client

from artify.repositories.base import IDocumentRepository, IDocumentStore
from artify.repositories.query import Filter, Match, OrderBy, Stage, run_pipeline

# 로거 설정
logger = logging.getLogger(__name__)


def _to_row(doc: Mapping[str, Any]) -> Dict[str, Any]:
    """httpx JSON 직렬화가 가능한 값으로 변환 (datetime -> ISO 8601, Enum -> value)"""
    row = {}
    for key, value in doc.items():
        if isinstance(value, (datetime, date)):
            value = value.isoformat()
        elif isinstance(value, Enum):
            value = value.value
        row[key] = value
    return row


def _imatch_value(needle: str) -> str:
    """
    PostgREST or=() 조건에 들어갈 imatch(대소문자 무시 정규식) 값 생성

    Rationale:
        ilike 패턴 안의 *는 PostgREST가 %로 바꾸므로 리터럴로 표현할 수 없습니다.
        정규식 메타문자를 이스케이프한 imatch로 부분 문자열 검색을 하고,
        쉼표/괄호가 or 구문을 깨지 않도록 값을 큰따옴표로 감쌉니다.
    """
    escaped = re.escape(needle)
    quoted = escaped.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{quoted}"'


def apply_filter(query, filter: Optional[Filter]):
    """Filter를 PostgREST 쿼리 빌더 조건으로 변환"""
    if filter is None:
        return query

    for column, value in filter.eq.items():
        query = query.eq(column, _to_row({column: value})[column])

    if filter.contains_any:
        conditions = ",".join(
            f"{column}.imatch.{_imatch_value(needle)}" for column, needle in filter.contains_any.items()
        )
        query = query.or_(conditions)
    return query


class SupabaseCollection(IDocumentRepository):
    """
    Supabase (PostgreSQL) 기반 컬렉션 구현체

    Args:
        client (Client): 애플리케이션 시작 시 생성된 Supabase 클라이언트
        table (str): 테이블명
        counters (Mapping[str, str]): 원자적 증가가 필요한 컬럼 -> Postgres 함수명
            (예: {"likes": "increment_artwork_likes"}, scripts/schema.sql 참고)
        page_size (int): limit 없는 조회를 나눠 받을 단위.
            PostgREST max-rows(Supabase 기본 1000)보다 크면 안 됩니다.
    """

    PAGE_SIZE = 1000

    def __init__(
        self,
        client: Client,
        table: str,
        counters: Optional[Mapping[str, str]] = None,
        page_size: int = PAGE_SIZE,
    ):
        self.client = client
        self.name = table
        self.counters = dict(counters or {})
        self.page_size = page_size

    def _fetch_all(self, build_query) -> List[dict]:
        """
        build_query()가 만든 조회를 .range()로 페이지 단위로 끝까지 읽습니다.

        Rationale:
            PostgREST는 응답 row 수를 max-rows로 자르고 에러를 내지 않으므로,
            limit 없는 조회를 한 번에 받으면 집계가 일부 데이터만으로 계산됩니다.
            페이지 경계가 흔들리지 않도록 id를 마지막 정렬 키로 둡니다.
        """
        rows: List[dict] = []
        while True:
            start = len(rows)
            page = build_query()\
                .order("id")\
                .range(start, start + self.page_size - 1)\
                .execute().data
            rows.extend(page)
            if len(page) < self.page_size:
                return rows

    def find_many(
        self,
        filter: Optional[Filter] = None,
        sort: Sequence[OrderBy] = (),
        limit: Optional[int] = None,
    ) -> List[dict]:
        def build_query():
            query = apply_filter(self.client.table(self.name).select("*"), filter)
            for key in sort:
                query = query.order(key.column, desc=key.descending)
            return query

        try:
            if limit is None:
                return self._fetch_all(build_query)
            return build_query().limit(limit).execute().data
        except Exception as e:
            # 에러 로깅 후 상위 호출자에게 전파 (Fail Fast)
            logger.error(f"Failed to query {self.name}: {e}", exc_info=True)
            raise

    def find_one(self, doc_id: str) -> Optional[dict]:
        """
        ID로 단일 문서 조회

        Rationale:
            maybe_single()은 결과가 없을 때 버전에 따라 None/예외가 달라 limit(1)로 조회합니다.
        """
        try:
            response = self.client.table(self.name)\
                .select("*")\
                .eq("id", doc_id)\
                .limit(1)\
                .execute()
            return response.data[0] if response.data else None
        except Exception as e:
            logger.error(f"Failed to fetch {self.name}/{doc_id}: {e}", exc_info=True)
            raise

    def insert(self, doc: Dict[str, Any]) -> str:
        try:
            response = self.client.table(self.name).insert(_to_row(doc)).execute()
            return str(response.data[0]["id"])
        except Exception as e:
            logger.error(f"Failed to insert into {self.name}: {e}", exc_info=True)
            raise

    def update_one_if_match(self, filter: Filter, patch: Dict[str, Any]) -> int:
        try:
            query = apply_filter(self.client.table(self.name).update(_to_row(patch)), filter)
            # 갱신된 row가 representation으로 반환되므로 그 개수가 matched count
            return len(query.execute().data)
        except Exception as e:
            logger.error(f"Failed to update {self.name}: {e}", exc_info=True)
            raise

    def increment_one_if_match(self, filter: Filter, column: str, amount: int = 1) -> int:
        """
        Postgres 함수(rpc)로 `column = column + amount`를 한 번의 UPDATE로 실행

        Rationale:
            조회 후 클라이언트에서 +1 하여 저장하면 동시 요청 시 갱신이 유실되므로,
            증가 연산은 반드시 DB에서 원자적으로 수행합니다.
        """
        function = self.counters.get(column)
        if function is None:
            raise ValueError(f"{self.name}.{column}에 대한 증가 함수가 등록되지 않았습니다.")
        if filter.contains_any or set(filter.eq) != {"id"}:
            raise ValueError("증가 연산은 id 조건만 지원합니다.")

        try:
            response = self.client.rpc(
                function, {"target_id": str(filter.eq["id"]), "amount": amount}
            ).execute()
        except Exception as e:
            logger.error(f"Failed to increment {self.name}.{column}: {e}", exc_info=True)
            raise

        data = response.data
        if isinstance(data, list):
            data = data[0] if data else 0
        return int(data or 0)

    def delete_one_if_match(self, filter: Filter) -> int:
        try:
            query = apply_filter(self.client.table(self.name).delete(), filter)
            return len(query.execute().data)
        except Exception as e:
            logger.error(f"Failed to delete from {self.name}: {e}", exc_info=True)
            raise

    def aggregate(self, pipeline: Sequence[Stage]) -> List[dict]:
        """
        첫 Match 단계는 DB 조회 조건으로 내려보내고, 나머지 단계는 애플리케이션에서 수행합니다.
        조회는 페이지 단위로 끝까지 읽으므로 max-rows를 넘는 테이블도 전체가 집계됩니다.
        """
        stages = list(pipeline)
        initial = stages.pop(0).filter if stages and isinstance(stages[0], Match) else None
        docs = self.find_many(initial)
        return run_pipeline(docs, stages, self._resolve_lookup)

    def _resolve_lookup(self, collection: str, column: str, values: List[Any]) -> List[dict]:
        try:
            return self._fetch_all(
                lambda: self.client.table(collection).select("*").in_(column, [str(v) for v in values])
            )
        except Exception as e:
            logger.error(f"Failed to join {self.name} -> {collection}: {e}", exc_info=True)
            raise


class SupabaseDocumentStore(IDocumentStore):
    """artworks / favorites 테이블 묶음"""

    def __init__(self, client: Client, artworks_table: str = "artworks", favorites_table: str = "favorites"):
        self.client = client
        self.artworks = SupabaseCollection(
            client, artworks_table, counters={"likes": "increment_artwork_likes"}
        )
        self.favorites = SupabaseCollection(client, favorites_table)

    def close(self) -> None:
        # supabase-py 동기 클라이언트는 내부 httpx 세션을 postgrest 클라이언트가 보유
        postgrest = getattr(self.client, "postgrest", None)
        session = getattr(postgrest, "session", None)
        if session is not None:
            session.close()
