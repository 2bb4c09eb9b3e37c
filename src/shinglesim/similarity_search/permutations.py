# src/shinglesim/similarity_search/permutations.py
"""
Permutation source for the MinHash estimator.

Each fingerprint v seeds a SplitMix64 generator; column j of its row is the
j-th draw (0-based) of that generator. SplitMix64 is fully specified, so the
matrix is identical on every platform:

    state_j = v + (j + 1) * GAMMA           (mod 2**64)
    z = (state_j ^ (state_j >> 30)) * C1
    z = (z ^ (z >> 27)) * C2
    out = z ^ (z >> 31)

Because the mix is a bijection on 64-bit ints, two different fingerprints
never collide in the same column.
"""

from typing import Iterator, List, Sequence

import numpy as np

from .errors import require_positive

MASK64 = 0xFFFFFFFFFFFFFFFF
GAMMA = 0x9E3779B97F4A7C15
C1 = 0xBF58476D1CE4E5B9
C2 = 0x94D049BB133111EB

_GAMMA = np.uint64(GAMMA)
_C1 = np.uint64(C1)
_C2 = np.uint64(C2)
_S30 = np.uint64(30)
_S27 = np.uint64(27)
_S31 = np.uint64(31)


class SplitMix64:
    """Scalar generator, one draw at a time."""

    def __init__(self, seed: int):
        self.state = seed & MASK64

    def next(self) -> int:
        self.state = (self.state + GAMMA) & MASK64
        z = self.state
        z = ((z ^ (z >> 30)) * C1) & MASK64
        z = ((z ^ (z >> 27)) * C2) & MASK64
        return z ^ (z >> 31)

    def draws(self, count: int) -> List[int]:
        return [self.next() for _ in range(count)]


def _mix(z: np.ndarray) -> np.ndarray:
    # uint64 array arithmetic wraps silently
    z = (z ^ (z >> _S30)) * _C1
    z = (z ^ (z >> _S27)) * _C2
    return z ^ (z >> _S31)


def _column_offsets(permutations: int) -> np.ndarray:
    return np.arange(1, permutations + 1, dtype=np.uint64) * _GAMMA


def as_fingerprint_array(values) -> np.ndarray:
    if isinstance(values, np.ndarray) and values.dtype == np.uint64:
        return values.reshape(-1)
    return np.array([int(v) & MASK64 for v in values], dtype=np.uint64)


def permutation_row(fingerprint: int, permutations: int) -> np.ndarray:
    """The `permutations` successive draws of the generator seeded by `fingerprint`."""
    require_positive("permutations", permutations)
    return _mix(np.uint64(fingerprint & MASK64) + _column_offsets(permutations))


def permutation_matrix(fingerprints: Sequence[int], permutations: int) -> np.ndarray:
    """N x permutations uint64 matrix, one row per fingerprint."""
    require_positive("permutations", permutations)
    values = as_fingerprint_array(fingerprints)
    return _mix(values[:, None] + _column_offsets(permutations)[None, :])


def iter_matrix_chunks(fingerprints: Sequence[int], permutations: int,
                       chunk_rows: int) -> Iterator[np.ndarray]:
    """Yield the permutation matrix `chunk_rows` rows at a time."""
    require_positive("permutations", permutations)
    require_positive("chunk_rows", chunk_rows)
    values = as_fingerprint_array(fingerprints)
    offsets = _column_offsets(permutations)[None, :]
    for start in range(0, len(values), chunk_rows):
        yield _mix(values[start:start + chunk_rows, None] + offsets)
