# src/shinglesim/similarity_search/pipeline.py
"""
End-to-end comparisons: tokens -> shingles -> fingerprints -> MinHash score.

A document source is either a Tokenizer (reset before every use, so the same
document can be re-read for each run) or a zero-argument callable that opens
a fresh stream; streams opened here are closed here.
"""

import logging
import random
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Callable, Dict, IO, Iterable, Iterator, List, Mapping, Optional, Sequence, Union

import numpy as np

from .configs import SimilaritySettings
from .errors import DocumentOpenError, EmptyInputError, InvalidConfigurationError, require_positive
from .estimator import DocumentFingerprint, column_minima, resemblance, resemblance_from_minima
from .murmur import MASK64, hash64
from .shingler import iter_shingles
from .tokenizer import Tokenizer

logger = logging.getLogger(__name__)

DocumentSource = Union[Tokenizer, Callable[[], IO]]


def new_seed(rng: Optional[random.Random] = None) -> int:
    """Fresh 64-bit fingerprint seed, one per comparison (or per averaging run)."""
    return (rng or random).getrandbits(64)


def consecutive_seeds(seed: int, runs: int) -> List[int]:
    """Reproducible per-run seeds derived from one user-supplied seed."""
    require_positive("runs", runs)
    return [(seed + i) & MASK64 for i in range(runs)]


def fingerprint_document(tokens: Iterable[str], shingle_length: int, seed: int,
                         name: Optional[str] = None) -> DocumentFingerprint:
    """
    Hash every shingle of `tokens` under `seed`, in document order.
    Raises EmptyInputError when the document has fewer tokens than `shingle_length`.
    """
    require_positive("shingle_length", shingle_length)
    seed &= MASK64
    values = [hash64(shingle, seed) for shingle in iter_shingles(tokens, shingle_length)]
    if not values:
        label = f"`{name}`" if name else "document"
        raise EmptyInputError(
            f"{label} has too few words to compare (need at least {shingle_length})"
        )
    logger.debug("fingerprinted %s: %d shingles", name or "document", len(values))
    return DocumentFingerprint(
        values=np.array(values, dtype=np.uint64),
        seed=seed,
        shingle_length=shingle_length,
        name=name,
    )


def fingerprint_text(text: str, shingle_length: int, seed: int,
                     name: Optional[str] = None) -> DocumentFingerprint:
    return fingerprint_document(Tokenizer.from_text(text), shingle_length, seed, name=name)


@contextmanager
def _open_tokens(source: DocumentSource) -> Iterator[Tokenizer]:
    if isinstance(source, Tokenizer):
        source.reset()
        yield source
        return
    try:
        stream = source()
    except DocumentOpenError:
        raise
    except OSError as e:
        raise DocumentOpenError(str(e)) from e
    try:
        yield Tokenizer(stream)
    finally:
        stream.close()


def _fingerprint_source(source: DocumentSource, settings: SimilaritySettings, seed: int,
                        name: Optional[str]) -> DocumentFingerprint:
    with _open_tokens(source) as tokens:
        return fingerprint_document(tokens, settings.shingle_length, seed, name=name)


# --------------------------
# Result types
# --------------------------

@dataclass
class ComparisonResult:
    similarity: float
    matches: int
    permutations: int
    seed: int
    shingles_1: int
    shingles_2: int
    name_1: Optional[str] = None
    name_2: Optional[str] = None

    def to_dict(self) -> Dict:
        return {
            "name_1": self.name_1,
            "name_2": self.name_2,
            "similarity": self.similarity,
            "matches": self.matches,
            "permutations": self.permutations,
            "seed": self.seed,
            "shingles_1": self.shingles_1,
            "shingles_2": self.shingles_2,
        }


@dataclass
class AveragedResult:
    runs: List[ComparisonResult] = field(default_factory=list)
    name_1: Optional[str] = None
    name_2: Optional[str] = None

    @property
    def scores(self) -> List[float]:
        return [run.similarity for run in self.runs]

    @property
    def mean(self) -> float:
        return sum(self.scores) / len(self.runs)

    def to_dict(self) -> Dict:
        return {
            "name_1": self.name_1,
            "name_2": self.name_2,
            "mean": self.mean,
            "scores": self.scores,
            "seeds": [run.seed for run in self.runs],
        }


@dataclass
class RankedMatch:
    name: str
    similarity: Optional[float] = None
    matches: Optional[int] = None
    error: Optional[str] = None

    def to_dict(self) -> Dict:
        return {
            "name": self.name,
            "similarity": self.similarity,
            "matches": self.matches,
            "error": self.error,
        }


# --------------------------
# Comparisons
# --------------------------

def compare_documents(source_1: DocumentSource, source_2: DocumentSource,
                      settings: Optional[SimilaritySettings] = None,
                      seed: Optional[int] = None,
                      name_1: Optional[str] = None,
                      name_2: Optional[str] = None) -> ComparisonResult:
    """
    One MinHash comparison. Both documents are fingerprinted under the same
    seed (drawn here unless given) before any permutation work starts.
    """
    settings = (settings or SimilaritySettings()).validate()
    seed = new_seed() if seed is None else seed & MASK64

    first = _fingerprint_source(source_1, settings, seed, name_1)
    second = _fingerprint_source(source_2, settings, seed, name_2)
    result = resemblance(first, second, settings.permutations, settings.chunk_rows)

    return ComparisonResult(
        similarity=result.similarity,
        matches=result.matches,
        permutations=result.permutations,
        seed=seed,
        shingles_1=len(first),
        shingles_2=len(second),
        name_1=name_1,
        name_2=name_2,
    )


def average_comparison(source_1: DocumentSource, source_2: DocumentSource,
                       settings: Optional[SimilaritySettings] = None,
                       seeds: Optional[Sequence[int]] = None,
                       rng: Optional[random.Random] = None,
                       name_1: Optional[str] = None,
                       name_2: Optional[str] = None) -> AveragedResult:
    """
    Repeat compare_documents `settings.runs` times, each run under a fresh seed,
    and collect the per-run scores. Explicit `seeds` override both `runs` and `rng`.
    """
    settings = (settings or SimilaritySettings()).validate()
    if seeds is None:
        seeds = [new_seed(rng) for _ in range(settings.runs)]
    elif not seeds:
        raise InvalidConfigurationError("no seeds given for an averaged comparison")

    averaged = AveragedResult(name_1=name_1, name_2=name_2)
    for index, seed in enumerate(seeds, start=1):
        run = compare_documents(source_1, source_2, settings, seed=seed,
                                name_1=name_1, name_2=name_2)
        logger.debug("run %d/%d: %.4f (seed=%d)", index, len(seeds), run.similarity, run.seed)
        averaged.runs.append(run)
    return averaged


def compare_against(query: DocumentSource, candidates: Mapping[str, DocumentSource],
                    settings: Optional[SimilaritySettings] = None,
                    seed: Optional[int] = None,
                    query_name: Optional[str] = None,
                    sort: bool = True) -> List[RankedMatch]:
    """
    Compare one document with every candidate under a single seed.

    The query's column minima are computed once; each candidate is fingerprinted
    on its own. A candidate that is empty or unreadable is reported with an
    `error` instead of aborting the batch. With `sort`, matches are ordered by
    similarity (highest first) and failures go last.
    """
    settings = (settings or SimilaritySettings()).validate()
    seed = new_seed() if seed is None else seed & MASK64

    query_fp = _fingerprint_source(query, settings, seed, query_name)
    query_minima = column_minima(query_fp, settings.permutations, settings.chunk_rows)

    results = []
    total = len(candidates)
    for index, (name, source) in enumerate(candidates.items(), start=1):
        logger.info("Comparing files (%d/%d): %s", index, total, name)
        try:
            candidate_fp = _fingerprint_source(source, settings, seed, name)
        except (EmptyInputError, DocumentOpenError) as e:
            logger.warning("Skipping %s: %s", name, e)
            results.append(RankedMatch(name=name, error=str(e)))
            continue
        candidate_minima = column_minima(candidate_fp, settings.permutations, settings.chunk_rows)
        result = resemblance_from_minima(query_minima, candidate_minima)
        results.append(RankedMatch(name=name, similarity=result.similarity, matches=result.matches))

    if sort:
        results.sort(key=lambda r: (r.similarity is None, -(r.similarity or 0.0)))
    return results
