import threading
import uuid
from copy import deepcopy
from typing import Any, Dict, List, Optional, Sequence

from artify.repositories.base import IDocumentRepository, IDocumentStore
from artify.repositories.query import Filter, OrderBy, Stage, run_pipeline, sort_documents


class MemoryCollection(IDocumentRepository):
    """
    In-Memory 컬렉션 구현체

    Note:
        서버 재시작 시 데이터가 초기화됩니다.
        같은 스토어의 컬렉션은 하나의 Lock을 공유하여 단일 문서 연산(특히 증가 연산)이 원자적으로 처리됩니다.
    """

    def __init__(self, name: str, store: "MemoryDocumentStore"):
        self.name = name
        self._store = store
        # Data Structure: {id: document} (삽입 순서 유지)
        self._docs: Dict[str, Dict[str, Any]] = {}

    def _first_match(self, filter: Filter) -> Optional[Dict[str, Any]]:
        return next((doc for doc in self._docs.values() if filter.matches(doc)), None)

    def find_many(
        self,
        filter: Optional[Filter] = None,
        sort: Sequence[OrderBy] = (),
        limit: Optional[int] = None,
    ) -> List[dict]:
        with self._store.lock:
            docs = [deepcopy(doc) for doc in self._docs.values() if filter is None or filter.matches(doc)]
        docs = sort_documents(docs, sort)
        return docs if limit is None else docs[:limit]

    def find_one(self, doc_id: str) -> Optional[dict]:
        with self._store.lock:
            doc = self._docs.get(str(doc_id))
            return deepcopy(doc) if doc is not None else None

    def insert(self, doc: Dict[str, Any]) -> str:
        doc_id = str(doc.get("id") or uuid.uuid4())
        with self._store.lock:
            self._docs[doc_id] = {**deepcopy(doc), "id": doc_id}
        return doc_id

    def update_one_if_match(self, filter: Filter, patch: Dict[str, Any]) -> int:
        with self._store.lock:
            doc = self._first_match(filter)
            if doc is None:
                return 0
            doc.update({k: v for k, v in deepcopy(patch).items() if k != "id"})
            return 1

    def increment_one_if_match(self, filter: Filter, column: str, amount: int = 1) -> int:
        with self._store.lock:
            doc = self._first_match(filter)
            if doc is None:
                return 0
            doc[column] = (doc.get(column) or 0) + amount
            return 1

    def delete_one_if_match(self, filter: Filter) -> int:
        with self._store.lock:
            doc = self._first_match(filter)
            if doc is None:
                return 0
            del self._docs[doc["id"]]
            return 1

    def aggregate(self, pipeline: Sequence[Stage]) -> List[dict]:
        with self._store.lock:
            docs = [deepcopy(doc) for doc in self._docs.values()]
        return run_pipeline(docs, pipeline, self._store.resolve_lookup)

    def clear(self) -> None:
        with self._store.lock:
            self._docs.clear()


class MemoryDocumentStore(IDocumentStore):
    """
    테스트 및 로컬 개발(STORE_BACKEND=memory)용 문서 저장소
    """

    def __init__(self, artworks_name: str = "artworks", favorites_name: str = "favorites"):
        self.lock = threading.RLock()
        self.artworks = MemoryCollection(artworks_name, self)
        self.favorites = MemoryCollection(favorites_name, self)

    def collection(self, name: str) -> MemoryCollection:
        for candidate in (self.artworks, self.favorites):
            if candidate.name == name:
                return candidate
        raise KeyError(f"Unknown collection: {name}")

    def resolve_lookup(self, collection: str, column: str, values: List[Any]) -> List[dict]:
        wanted = {str(v) for v in values}
        target = self.collection(collection)
        with self.lock:
            return [deepcopy(doc) for doc in target._docs.values() if str(doc.get(column)) in wanted]

    def close(self) -> None:
        with self.lock:
            self.artworks.clear()
            self.favorites.clear()
