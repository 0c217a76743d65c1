"""
소유권 정책 (Ownership Policy)

소유자만 수정/삭제할 수 있는 리소스의 조건을 한 곳에서 만듭니다.
"소유자 범위 변경 = 식별자 조건 AND 요청자 이메일 조건"을 저장소 조회 조건 하나로 표현하므로,
소유자가 아닌 요청은 0건 일치로 끝나고 '없음'과 구분되지 않습니다 (존재 여부 비노출).
"""
from dataclasses import dataclass

from artify.auth.principal import Principal
from artify.repositories.query import Filter


@dataclass(frozen=True)
class OwnershipPolicy:
    """
    Attributes:
        id_column (str): 리소스 식별자 컬럼
        owner_column (str): 소유자 이메일 컬럼
    """
    id_column: str = "id"
    owner_column: str = "user_email"

    def owned_by(self, principal: Principal) -> Filter:
        """요청자가 소유한 리소스 전체 조건"""
        return Filter(eq={self.owner_column: principal.email})

    def owner_scope(self, resource_id: str, principal: Principal) -> Filter:
        """요청자가 소유한 특정 리소스 조건"""
        return self.owned_by(principal).and_eq(**{self.id_column: resource_id})

    def stamp(self, doc: dict, principal: Principal) -> dict:
        """신규 문서에 소유자를 기록. 클라이언트가 보낸 값은 덮어씀"""
        return {**doc, self.owner_column: principal.email}


DEFAULT_OWNERSHIP = OwnershipPolicy()
