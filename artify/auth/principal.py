from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Principal:
    """
    인증 공급자가 서명한 클레임에서만 만들어지는 요청 주체.

    Note:
        요청 본문/헤더의 사용자 정보(userEmail 등)는 절대 Principal로 승격하지 않습니다.
    """
    subject_id: str
    email: str
    display_name: str = "Anonymous"
    avatar_url: Optional[str] = None
