"""Exception hierarchy for senko."""


class SenkoError(Exception):
    """Base class for all senko errors."""


class InvalidRatingError(SenkoError, ValueError):
    """Raised when a rating outside 1..4 is submitted."""

    def __init__(self, rating: object):
        super().__init__(f"Rating must be one of 1, 2, 3, 4 (got {rating!r})")
        self.rating = rating


class DeckFormatError(SenkoError):
    """Raised when a deck file cannot be parsed into questions."""

    def __init__(self, message: str, line: int | None = None):
        if line is not None:
            message = f"line {line}: {message}"
        super().__init__(message)
        self.line = line
