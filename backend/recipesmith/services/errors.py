# recipesmith/services/errors.py
# Failure taxonomy shared by the generation, image, storage and search clients.
# transport: InvalidResponse, BadStatusCode
# payload:   EmptyContent, EncodingError, DecodingError
# domain:    MissingData, UnknownError

from __future__ import annotations


class RecipeAPIError(Exception):
    """Base class for every outbound API failure."""


class InvalidResponse(RecipeAPIError):
    pass


class BadStatusCode(RecipeAPIError):
    def __init__(self, status_code: int):
        super().__init__(f"unexpected status code {status_code}")
        self.status_code = status_code


class EmptyContent(RecipeAPIError):
    pass


class EncodingError(RecipeAPIError):
    pass


class DecodingError(RecipeAPIError):
    pass


class MissingData(RecipeAPIError):
    pass


class UnknownError(RecipeAPIError):
    pass
