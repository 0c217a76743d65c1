import uuid

from artify.exception.common.identifier_exception import InvalidIdentifierError


def is_valid_id(value: object) -> bool:
    """저장소 식별자(UUID 문자열) 형식인지 확인"""
    if not isinstance(value, str) or not value.strip():
        return False
    try:
        uuid.UUID(value)
    except ValueError:
        return False
    return True


def validate_id(value: str, resource: str = None) -> str:
    """
    식별자 형식 검증 후 정규화된 문자열(소문자 하이픈 형식) 반환

    Raises:
        InvalidIdentifierError: UUID 형식이 아닌 경우 (400)
    """
    if not is_valid_id(value):
        raise InvalidIdentifierError(resource)
    return str(uuid.UUID(value))
