class RecipeFinderError(Exception):
    """Base class for errors raised by recipe_finder."""


class InvalidCatalog(RecipeFinderError):
    pass


class MalformedRecipe(RecipeFinderError):
    """A single catalog record could not be indexed.

    `position` is the record's index in the raw catalog.
    """

    def __init__(self, position: int, reason: str):
        super().__init__(f"record {position}: {reason}")
        self.position = position
        self.reason = reason


class EmptySelection(RecipeFinderError):
    pass


class RecognitionError(RecipeFinderError):
    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class RecognitionNotConfigured(RecognitionError):
    pass


class RecognitionRateLimited(RecognitionError):
    def __init__(self, message: str = "Daily request limit exceeded"):
        super().__init__(message, status_code=429)
