from artify.exception.base_exception import BaseCustomException, ErrorCode

class InvalidFavoriteTargetError(BaseCustomException):
    error_code = ErrorCode.FAVORITE_INVALID_TARGET
    message = "Valid artwork ID is required."
    status_code = 400

class FavoriteNotFoundError(BaseCustomException):
    error_code = ErrorCode.FAVORITE_NOT_FOUND
    message = "Favorite not found or not owned by user"
    status_code = 404
