# src/shinglesim/similarity_search/estimator.py
"""
MinHash similarity estimator.

For every permutation column j the minimum over each document's rows is
taken; the fraction of columns where both minima are equal estimates the
Jaccard similarity of the two fingerprint sets.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Sequence, Union

import numpy as np

from . import configs
from .errors import EmptyInputError, SeedMismatchError, require_positive
from .permutations import as_fingerprint_array, iter_matrix_chunks

logger = logging.getLogger(__name__)


@dataclass
class DocumentFingerprint:
    """Ordered fingerprints of one document (duplicates kept) and how they were made."""
    values: np.ndarray
    seed: int
    shingle_length: int
    name: Optional[str] = None

    def __len__(self) -> int:
        return len(self.values)


@dataclass
class Resemblance:
    matches: int
    permutations: int

    @property
    def similarity(self) -> float:
        return self.matches / self.permutations


Fingerprints = Union[DocumentFingerprint, Sequence[int], np.ndarray]


def _values(fingerprints: Fingerprints, label: str) -> np.ndarray:
    raw = fingerprints.values if isinstance(fingerprints, DocumentFingerprint) else fingerprints
    values = as_fingerprint_array(raw)
    if values.size == 0:
        raise EmptyInputError(f"{label} has no fingerprints")
    return values


def _check_seeds(first: Fingerprints, second: Fingerprints):
    if isinstance(first, DocumentFingerprint) and isinstance(second, DocumentFingerprint):
        if first.seed != second.seed:
            raise SeedMismatchError(
                f"fingerprints built with different seeds ({first.seed} != {second.seed})"
            )


def column_minima(fingerprints: Fingerprints, permutations: int = configs.PERMUTATIONS,
                  chunk_rows: int = configs.PERMUTATION_CHUNK_ROWS) -> np.ndarray:
    """
    Per-column minimum of the document's permutation matrix.

    The matrix is built `chunk_rows` rows at a time so memory stays at
    O(chunk_rows x permutations) whatever the document size.
    """
    values = _values(fingerprints, "document")
    minima = None
    for chunk in iter_matrix_chunks(values, permutations, chunk_rows):
        chunk_min = chunk.min(axis=0)
        minima = chunk_min if minima is None else np.minimum(minima, chunk_min)
    return minima


def resemblance_from_minima(minima_1: np.ndarray, minima_2: np.ndarray) -> Resemblance:
    if minima_1.shape != minima_2.shape:
        raise ValueError(
            f"column minima have different lengths ({minima_1.shape[0]} != {minima_2.shape[0]})"
        )
    matches = int(np.count_nonzero(minima_1 == minima_2))
    return Resemblance(matches=matches, permutations=int(minima_1.shape[0]))


def resemblance(fingerprints_1: Fingerprints, fingerprints_2: Fingerprints,
                permutations: int = configs.PERMUTATIONS,
                chunk_rows: int = configs.PERMUTATION_CHUNK_ROWS) -> Resemblance:
    require_positive("permutations", permutations)
    _check_seeds(fingerprints_1, fingerprints_2)
    values_1 = _values(fingerprints_1, "first document")
    values_2 = _values(fingerprints_2, "second document")

    result = resemblance_from_minima(
        column_minima(values_1, permutations, chunk_rows),
        column_minima(values_2, permutations, chunk_rows),
    )
    logger.debug(
        "resemblance: %d x %d fingerprints, %d/%d matching minimums",
        len(values_1), len(values_2), result.matches, result.permutations,
    )
    return result


def compare(fingerprints_1: Fingerprints, fingerprints_2: Fingerprints,
            permutations: int = configs.PERMUTATIONS,
            chunk_rows: int = configs.PERMUTATION_CHUNK_ROWS) -> float:
    """
    Estimated Jaccard similarity in [0, 1].

    Both sides must come from the same seed; when both are DocumentFingerprint
    objects this is checked and SeedMismatchError raised otherwise.
    """
    return resemblance(fingerprints_1, fingerprints_2, permutations, chunk_rows).similarity
