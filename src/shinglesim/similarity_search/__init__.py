# src/shinglesim/similarity_search/__init__.py
from .errors import (
    DocumentNotFoundError,
    DocumentOpenError,
    EmptyInputError,
    InvalidConfigurationError,
    SeedMismatchError,
    SimilarityError,
)
from .configs import SimilaritySettings
from .tokenizer import Tokenizer, tokenize
from .shingler import ShingleRing, iter_shingles
from .murmur import hash64
from .permutations import SplitMix64, permutation_matrix, permutation_row
from .estimator import DocumentFingerprint, column_minima, compare, resemblance
from .pipeline import (
    AveragedResult,
    ComparisonResult,
    RankedMatch,
    average_comparison,
    compare_against,
    compare_documents,
    fingerprint_document,
    fingerprint_text,
    new_seed,
)

__all__ = [
    "SimilarityError", "EmptyInputError", "InvalidConfigurationError", "SeedMismatchError",
    "DocumentOpenError", "DocumentNotFoundError",
    "SimilaritySettings",
    "Tokenizer", "tokenize",
    "ShingleRing", "iter_shingles",
    "hash64",
    "SplitMix64", "permutation_row", "permutation_matrix",
    "DocumentFingerprint", "column_minima", "compare", "resemblance",
    "ComparisonResult", "AveragedResult", "RankedMatch",
    "new_seed", "fingerprint_document", "fingerprint_text",
    "compare_documents", "average_comparison", "compare_against",
]
