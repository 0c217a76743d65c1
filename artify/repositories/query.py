"""
저장소 독립적인 조회 조건/집계 파이프라인 모델

Supabase(PostgREST)와 메모리 저장소가 같은 의미로 해석하도록 조건을 값 객체로 표현합니다.
파이프라인 단계는 MongoDB aggregation의 $match / $lookup+$unwind / $group+$sum / $sort / $limit에 대응합니다.
"""
from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Mapping, Sequence


@dataclass(frozen=True)
class Filter:
    """
    조회 조건

    Attributes:
        eq: 모든 항목이 일치해야 하는 equality 조건 (AND)
        contains_any: 대소문자 무시 부분 문자열 조건 묶음. 하나라도 일치하면 통과 (OR)
    """
    eq: Mapping[str, Any] = field(default_factory=dict)
    contains_any: Mapping[str, str] = field(default_factory=dict)

    def and_eq(self, **constraints: Any) -> "Filter":
        """기존 조건에 equality 조건을 추가한 새 Filter를 반환"""
        return Filter(eq={**self.eq, **constraints}, contains_any=dict(self.contains_any))

    def matches(self, doc: Mapping[str, Any]) -> bool:
        for column, expected in self.eq.items():
            if doc.get(column) != expected:
                return False

        if self.contains_any:
            return any(
                needle.casefold() in str(doc.get(column) or "").casefold()
                for column, needle in self.contains_any.items()
            )
        return True


@dataclass(frozen=True)
class OrderBy:
    column: str
    descending: bool = False


@dataclass(frozen=True)
class Match:
    filter: Filter


@dataclass(frozen=True)
class Lookup:
    """
    다른 컬렉션과 equality join 후 unwind (inner join)

    참조 대상이 없는 문서는 결과에서 제외됩니다.
    """
    from_collection: str
    local_field: str
    foreign_field: str
    as_field: str


@dataclass(frozen=True)
class GroupCount:
    """by 컬럼 값별 문서 수 집계. 결과: {by: 값, as_field: 개수}"""
    by: str
    as_field: str = "count"


@dataclass(frozen=True)
class Sort:
    keys: tuple[OrderBy, ...]


@dataclass(frozen=True)
class Limit:
    n: int


Stage = Match | Lookup | GroupCount | Sort | Limit

# (collection, field, values) -> 해당 field 값이 values에 포함되는 문서 목록
LookupResolver = Callable[[str, str, list[Any]], list[dict]]


def _sort_key(column: str) -> Callable[[Mapping[str, Any]], tuple[bool, Any]]:
    # None은 오름차순에서 앞, 내림차순에서 뒤 (MongoDB null 정렬과 동일)
    return lambda doc: (doc.get(column) is not None, doc.get(column))


def sort_documents(docs: Iterable[dict], keys: Sequence[OrderBy]) -> list[dict]:
    result = list(docs)
    # 안정 정렬을 뒤 키부터 적용하여 다중 키 정렬
    for key in reversed(keys):
        result.sort(key=_sort_key(key.column), reverse=key.descending)
    return result


def run_pipeline(docs: Iterable[dict], stages: Sequence[Stage], resolve: LookupResolver) -> list[dict]:
    """
    문서 목록에 파이프라인을 순서대로 적용합니다.

    Args:
        docs: 첫 단계의 입력 문서
        stages: 적용할 단계 목록
        resolve: Lookup 단계에서 참조 컬렉션 문서를 가져오는 함수
    """
    current = [dict(doc) for doc in docs]

    for stage in stages:
        if isinstance(stage, Match):
            current = [doc for doc in current if stage.filter.matches(doc)]

        elif isinstance(stage, Lookup):
            keys = list(dict.fromkeys(
                doc.get(stage.local_field) for doc in current if doc.get(stage.local_field) is not None
            ))
            foreign = resolve(stage.from_collection, stage.foreign_field, keys) if keys else []
            by_key = {}
            for row in foreign:
                by_key.setdefault(str(row.get(stage.foreign_field)), []).append(row)

            joined = []
            for doc in current:
                for row in by_key.get(str(doc.get(stage.local_field)), []):
                    joined.append({**doc, stage.as_field: dict(row)})
            current = joined

        elif isinstance(stage, GroupCount):
            counts = Counter(doc.get(stage.by) for doc in current)
            current = [{stage.by: value, stage.as_field: n} for value, n in counts.items()]

        elif isinstance(stage, Sort):
            current = sort_documents(current, stage.keys)

        elif isinstance(stage, Limit):
            current = current[: stage.n]

        else:
            raise TypeError(f"Unsupported pipeline stage: {stage!r}")

    return current
