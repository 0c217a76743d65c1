from artify.exception.base_exception import BaseCustomException, ErrorCode

class ArtworkFieldMissingError(BaseCustomException):
    error_code = ErrorCode.ARTWORK_FIELD_MISSING
    message = "Title, image URL, and category are required."
    status_code = 400

class EmptyArtworkPatchError(BaseCustomException):
    error_code = ErrorCode.ARTWORK_EMPTY_PATCH
    message = "No updatable fields were provided."
    status_code = 400

class ArtworkNotFoundError(BaseCustomException):
    error_code = ErrorCode.ARTWORK_NOT_FOUND
    message = "Artwork not found"
    status_code = 404

    @classmethod
    def not_owned(cls) -> "ArtworkNotFoundError":
        """소유자 불일치도 '없음'과 동일하게 응답하여 존재 여부를 노출하지 않음"""
        return cls(message="Artwork not found or not owned by user")
