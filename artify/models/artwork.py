from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class Visibility(str, Enum):
    PUBLIC = "Public"
    PRIVATE = "Private"


# 클라이언트가 생성/수정할 수 있는 컬럼 (API 필드명 -> 저장소 컬럼명)
# NOTE: user_email, user_name, user_photo_url, created_at, likes는 서버만 설정함
EDITABLE_COLUMNS = {
    "title": "title",
    "imageUrl": "image_url",
    "category": "category",
    "visibility": "visibility",
    "description": "description",
    "medium": "medium",
    "dimensions": "dimensions",
    "price": "price",
}


def _stored(api_name: str, column: str) -> AliasChoices:
    # 저장소 row(snake_case)와 API 응답(camelCase) 양쪽 모두에서 검증 가능하도록 함
    return AliasChoices(column, api_name)


class Artwork(BaseModel):
    """작품 응답 모델 (artworks 테이블 row 매핑)"""
    model_config = ConfigDict(populate_by_name=True)

    id: str
    title: str
    imageUrl: str = Field(validation_alias=_stored("imageUrl", "image_url"))
    category: str
    visibility: Visibility = Visibility.PUBLIC
    description: Optional[str] = None
    medium: Optional[str] = None
    dimensions: Optional[str] = None
    price: Optional[float] = None

    userEmail: str = Field(validation_alias=_stored("userEmail", "user_email"))
    userName: str = Field(default="Anonymous", validation_alias=_stored("userName", "user_name"))
    userPhotoURL: Optional[str] = Field(default=None, validation_alias=_stored("userPhotoURL", "user_photo_url"))
    createdAt: datetime = Field(validation_alias=_stored("createdAt", "created_at"))
    likes: int = Field(default=0, ge=0)

    @field_validator("id", mode="before")
    @classmethod
    def stringify_id(cls, v):
        """Supabase는 uuid 컬럼을 문자열로, 메모리 저장소는 그대로 반환하므로 문자열로 통일"""
        return str(v)

    @field_validator("likes", mode="before")
    @classmethod
    def handle_null_likes(cls, v):
        return 0 if v is None else v


class _ArtworkFields(BaseModel):
    """
    생성/수정 요청 공통 필드

    Rationale:
        extra="ignore"로 userEmail, createdAt, likes 같은 서버 관리 필드가 본문에 들어와도
        모델 단계에서 버려지도록 합니다. (클라이언트 값 신뢰 금지)
        필수 필드도 Optional로 받아 누락 시 422가 아닌 도메인 예외(400)로 응답합니다.
    """
    model_config = ConfigDict(extra="ignore")

    title: Optional[str] = None
    imageUrl: Optional[str] = None
    category: Optional[str] = None
    visibility: Optional[Visibility] = None
    description: Optional[str] = None
    medium: Optional[str] = None
    dimensions: Optional[str] = None
    price: Optional[float] = Field(default=None, ge=0)

    def to_columns(self) -> dict:
        """요청에 실제로 포함된 필드만 저장소 컬럼명으로 변환"""
        values = self.model_dump(exclude_unset=True, exclude_none=True)
        return {
            EDITABLE_COLUMNS[name]: value.value if isinstance(value, Visibility) else value
            for name, value in values.items()
        }


class ArtworkCreate(_ArtworkFields):
    """POST /artworks 요청 본문"""

    def missing_required(self) -> list[str]:
        return [name for name in ("title", "imageUrl", "category") if not (getattr(self, name) or "").strip()]


class ArtworkUpdate(_ArtworkFields):
    """PUT /artworks/{id} 요청 본문 (allow-list에 있는 필드만 반영)"""

    def blank_required(self) -> list[str]:
        """전달되었지만 비어 있는 필수 필드"""
        return [
            name for name in ("title", "imageUrl", "category")
            if name in self.model_fields_set and getattr(self, name) is not None and not getattr(self, name).strip()
        ]


class TopArtist(BaseModel):
    userName: Optional[str] = Field(validation_alias=_stored("userName", "user_name"))
    totalArtworks: int = Field(validation_alias=_stored("totalArtworks", "total_artworks"))


class CreatedResponse(BaseModel):
    id: str


class OkResponse(BaseModel):
    ok: bool = True


class MessageResponse(BaseModel):
    message: str
