from typing import Any, Generic, Optional, TypeVar
from pydantic import BaseModel, ConfigDict

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """
    에러 응답 공통 모델 (Envelope Pattern)

    Attributes:
        isSuccess (bool): 성공 여부 (에러 응답에서는 항상 false)
        code (str): 에러 코드 (예: "ARTWORK-003")
        message (str): 사용자 노출 가능한 메시지
        result (T | None): 상세 정보 (Validation 에러 필드 정보, 디버그 모드의 스택 트레이스 등)

    Rationale:
        성공 응답은 클라이언트가 이미 사용 중인 형태({id}, {ok}, 배열)를 그대로 유지하고,
        실패 응답만 Envelope으로 통일하여 프론트엔드가 message/code를 일관되게 읽도록 합니다.
    """
    isSuccess: bool
    code: str
    message: str
    result: Optional[T] = None

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "isSuccess": False,
                    "code": "ARTWORK-003",
                    "message": "Artwork not found or not owned by user",
                    "result": None,
                },
                {
                    "isSuccess": False,
                    "code": "VALIDATION-001",
                    "message": "입력값을 확인해주세요.",
                    "result": {
                        "body.title": {
                            "message": "Input should be a valid string",
                            "type": "string_type",
                            "input": 123,
                        }
                    },
                },
            ]
        }
    )


class ValidationErrorDetail(BaseModel):
    """
    Validation 에러의 상세 정보를 담는 모델
    """
    message: str
    type: str
    input: Any | None = None


def error_response(message: str, code: str = "ERROR", result: Optional[Any] = None) -> ApiResponse[Any]:
    """실패 응답 생성 팩토리 함수"""
    return ApiResponse(isSuccess=False, code=code, message=message, result=result)
