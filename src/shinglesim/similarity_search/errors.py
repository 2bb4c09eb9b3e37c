# src/shinglesim/similarity_search/errors.py


class SimilarityError(Exception):
    """Base class for every error raised by the similarity pipeline."""


class EmptyInputError(SimilarityError):
    """A document produced no shingles (fewer tokens than the shingle length)."""


class InvalidConfigurationError(SimilarityError, ValueError):
    """A tuning value (shingle length, permutations, runs, ...) is out of range."""


class SeedMismatchError(InvalidConfigurationError):
    """Two fingerprint sequences were built under different seeds."""


class DocumentOpenError(SimilarityError, OSError):
    """A document (or the database listing) could not be opened."""


class DocumentNotFoundError(DocumentOpenError):
    pass


def require_positive(name: str, value) -> int:
    """
    Return `value` as an int, raising InvalidConfigurationError unless it is >= 1.
    Booleans are rejected even though they are ints.
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidConfigurationError(f"{name} must be an integer, got {value!r}")
    if value < 1:
        raise InvalidConfigurationError(f"{name} must be >= 1, got {value}")
    return value


__all__ = [
    "SimilarityError",
    "EmptyInputError",
    "InvalidConfigurationError",
    "SeedMismatchError",
    "DocumentOpenError",
    "DocumentNotFoundError",
    "require_positive",
]
