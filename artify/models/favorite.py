from datetime import datetime
from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from artify.models.artwork import Artwork


class FavoriteCreate(BaseModel):
    """POST /favorites 요청 본문"""
    model_config = ConfigDict(extra="ignore")

    artworkId: Optional[str] = None


class FavoriteWithArtwork(BaseModel):
    """
    즐겨찾기 + 참조 작품 join 결과

    Args:
        id (str): 즐겨찾기 레코드 ID
        artworkId (str): 참조하는 작품 ID
        userEmail (str): 즐겨찾기한 사용자 이메일
        addedAt (datetime): 즐겨찾기 추가 일시
        artwork (Artwork): join된 작품 (작품이 삭제된 즐겨찾기는 목록에서 제외됨)
    """
    model_config = ConfigDict(populate_by_name=True)

    id: str
    artworkId: str = Field(validation_alias=AliasChoices("artwork_id", "artworkId"))
    userEmail: str = Field(validation_alias=AliasChoices("user_email", "userEmail"))
    addedAt: datetime = Field(validation_alias=AliasChoices("added_at", "addedAt"))
    artwork: Artwork

    @field_validator("id", "artworkId", mode="before")
    @classmethod
    def stringify_ids(cls, v):
        return str(v)
