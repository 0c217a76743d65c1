"""
Bearer 토큰 검증 (Identity Verifier)

Authorization 헤더에서 꺼낸 토큰을 외부 인증 공급자(Supabase Auth)에 검증 요청하고,
검증된 클레임으로 Principal을 만듭니다. 세션 상태는 보관하지 않으며 요청마다 새로 검증합니다.

실패 유형:
- 토큰 없음: UnauthenticatedError (401)
- 토큰 형식 오류/만료/서명 불일치: ForbiddenError (403)
"""
import logging
from typing import Any, Mapping, Optional, Protocol

from supabase import AuthError, Client

from artify.auth.principal import Principal
from artify.exception.auth.auth_exception import ForbiddenError, UnauthenticatedError

logger = logging.getLogger(__name__)

BEARER_SCHEME = "bearer"


class IIdentityVerifier(Protocol):
    """인증 공급자 인터페이스"""

    def verify(self, token: str) -> Principal:
        """
        토큰을 검증하고 Principal을 반환합니다.

        Raises:
            ForbiddenError: 토큰이 유효하지 않은 경우
        """
        ...


def extract_bearer_token(authorization: Optional[str]) -> str:
    """
    Authorization 헤더에서 Bearer 토큰을 추출합니다.

    Raises:
        UnauthenticatedError: 헤더가 없거나 비어 있는 경우
        ForbiddenError: 헤더는 있지만 "Bearer <token>" 형식이 아닌 경우
    """
    if authorization is None or not authorization.strip():
        raise UnauthenticatedError()

    scheme, _, token = authorization.strip().partition(" ")
    token = token.strip()
    if scheme.lower() != BEARER_SCHEME or not token or " " in token:
        raise ForbiddenError()
    return token


def principal_from_claims(subject_id: Any, email: Optional[str], metadata: Optional[Mapping[str, Any]]) -> Principal:
    """
    검증된 사용자 정보로 Principal을 만듭니다.

    Rationale:
        소유권 필터가 이메일 기준이므로 이메일이 없는 계정(익명 로그인, 전화번호 로그인 등)은
        작품/즐겨찾기 소유자가 될 수 없어 403으로 처리합니다.
    """
    if not subject_id or not email:
        raise ForbiddenError()

    metadata = metadata or {}
    display_name = metadata.get("full_name") or metadata.get("name") or "Anonymous"
    avatar_url = metadata.get("avatar_url") or metadata.get("picture")
    return Principal(
        subject_id=str(subject_id),
        email=email,
        display_name=display_name,
        avatar_url=avatar_url,
    )


class SupabaseIdentityVerifier(IIdentityVerifier):
    """
    Supabase Auth 기반 토큰 검증 구현체

    서명/만료 검증은 Supabase Auth 서버(`auth.get_user(jwt)`)에 위임합니다.
    """

    def __init__(self, client: Client):
        self.client = client

    def verify(self, token: str) -> Principal:
        try:
            response = self.client.auth.get_user(token)
        except AuthError as e:
            # 토큰 값 자체는 로그에 남기지 않음
            logger.warning(f"Identity verification rejected: {getattr(e, 'message', e)}")
            raise ForbiddenError() from e

        user = getattr(response, "user", None) if response else None
        if user is None:
            raise ForbiddenError()

        return principal_from_claims(user.id, user.email, user.user_metadata)
