"""Domain errors raised by the recommendations service"""

from fastapi import status


class RecommenderError(Exception):
    """
    Base class for all service errors

    Each subclass carries the HTTP status it surfaces as, a stable error
    kind for the response envelope and a default message.
    """

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error: str = "internal_error"
    default_message: str = "Internal server error"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class AuthenticationError(RecommenderError):
    """Missing or malformed bearer token"""

    status_code = status.HTTP_401_UNAUTHORIZED
    error = "authentication_failed"
    default_message = "Authentication required"


class UserInvalidError(RecommenderError):
    """Non-positive user id extracted from the token"""

    status_code = status.HTTP_401_UNAUTHORIZED
    error = "user_invalid"
    default_message = "User not found"


class RecipeNotFoundError(RecommenderError):
    status_code = status.HTTP_400_BAD_REQUEST
    error = "recipe_not_found"
    default_message = "Recipe not found"


class PreferencesNotSetError(RecommenderError):
    status_code = status.HTTP_400_BAD_REQUEST
    error = "preferences_not_set"
    default_message = "Please set your food preferences first"


class InvalidAlgorithmError(RecommenderError):
    status_code = status.HTTP_400_BAD_REQUEST
    error = "invalid_algorithm"
    default_message = "Invalid recommendation algorithm"


class InvalidRatingError(RecommenderError):
    status_code = status.HTTP_400_BAD_REQUEST
    error = "invalid_rating"
    default_message = "Rating must be between 1 and 5"


class InvalidLimitError(RecommenderError):
    status_code = status.HTTP_400_BAD_REQUEST
    error = "invalid_limit"
    default_message = "Limit must be between 1 and 50"


class StoreError(RecommenderError):
    """Unclassified failure of the history store"""

    error = "store_failure"
    default_message = "Failed to access recommendation data"


class CatalogueError(RecommenderError):
    """Unclassified failure while reading the recipe catalogue"""

    error = "catalogue_failure"
    default_message = "Failed to read recipe catalogue"
