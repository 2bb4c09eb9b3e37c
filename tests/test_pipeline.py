# tests/test_pipeline.py
import io
import random
import statistics

import numpy as np
import pytest

from shinglesim.similarity_search.configs import SimilaritySettings
from shinglesim.similarity_search.errors import (
    DocumentOpenError,
    EmptyInputError,
    InvalidConfigurationError,
)
from shinglesim.similarity_search.murmur import hash64
from shinglesim.similarity_search.pipeline import (
    average_comparison,
    compare_against,
    compare_documents,
    consecutive_seeds,
    fingerprint_document,
    fingerprint_text,
    new_seed,
)
from shinglesim.similarity_search.tokenizer import Tokenizer

SMALL = SimilaritySettings(shingle_length=2, permutations=256, runs=3)

ESSAY = "Shingles turn a document into overlapping word pairs that can be hashed."
REWORDED = "Shingles turn any document into overlapping word pairs which can be hashed."


def _opener(text):
    return lambda: io.StringIO(text)


def test_fingerprints_follow_shingle_order():
    fp = fingerprint_document(Tokenizer.from_text("the quick brown fox"), 2, seed=42)
    assert fp.values.dtype == np.uint64
    assert [int(v) for v in fp.values] == [
        hash64(b"thequick", 42), hash64(b"quickbrown", 42), hash64(b"brownfox", 42)
    ]
    assert int(fp.values[0]) == 0x648E19F4FB569001
    assert fp.seed == 42
    assert fp.shingle_length == 2


def test_duplicate_shingles_are_retained():
    fp = fingerprint_text("a b a b a", 2, seed=1)
    assert len(fp) == 4
    assert fp.values[0] == fp.values[2]


def test_single_word_document_is_empty_input():
    with pytest.raises(EmptyInputError):
        fingerprint_text("hello", 2, seed=1)
    with pytest.raises(EmptyInputError):
        fingerprint_text("!!! ...", 1, seed=1)


def test_invalid_shingle_length():
    with pytest.raises(InvalidConfigurationError):
        fingerprint_text("one two three", 0, seed=1)


def test_new_seed_is_64_bit():
    rng = random.Random(7)
    seeds = [new_seed(rng) for _ in range(20)]
    assert all(0 <= s < 2 ** 64 for s in seeds)
    assert len(set(seeds)) == 20


def test_compare_documents_is_deterministic_for_a_seed():
    first = compare_documents(Tokenizer.from_text(ESSAY), Tokenizer.from_text(REWORDED), SMALL, seed=99)
    second = compare_documents(_opener(ESSAY), _opener(REWORDED), SMALL, seed=99)
    assert first.similarity == second.similarity
    assert first.matches == second.matches
    assert first.seed == 99
    assert first.permutations == 256
    assert first.shingles_1 == 11
    assert first.shingles_2 == 11


def test_compare_documents_draws_a_seed_when_missing():
    result = compare_documents(_opener(ESSAY), _opener(ESSAY), SMALL)
    assert result.similarity == 1.0
    assert 0 <= result.seed < 2 ** 64


def test_tokenizer_sources_are_reset_between_uses():
    tokens = Tokenizer.from_text(ESSAY)
    list(tokens)
    result = compare_documents(tokens, Tokenizer.from_text(ESSAY), SMALL, seed=1)
    assert result.similarity == 1.0


def test_unreadable_source():
    def broken():
        raise FileNotFoundError("gone.txt")

    with pytest.raises(DocumentOpenError):
        compare_documents(broken, _opener(ESSAY), SMALL, seed=1)


def test_invalid_settings_are_rejected():
    with pytest.raises(InvalidConfigurationError):
        compare_documents(_opener(ESSAY), _opener(ESSAY), SimilaritySettings(permutations=0), seed=1)
    with pytest.raises(InvalidConfigurationError):
        average_comparison(_opener(ESSAY), _opener(ESSAY), SimilaritySettings(runs=0))


def test_average_uses_a_fresh_seed_per_run():
    averaged = average_comparison(_opener(ESSAY), _opener(REWORDED), SMALL, rng=random.Random(3))
    assert len(averaged.runs) == 3
    assert len({run.seed for run in averaged.runs}) == 3
    assert averaged.mean == pytest.approx(sum(averaged.scores) / 3)

    again = average_comparison(_opener(ESSAY), _opener(REWORDED), SMALL, rng=random.Random(3))
    assert again.scores == averaged.scores


def test_average_with_explicit_seeds():
    seeds = consecutive_seeds(10, 4)
    assert seeds == [10, 11, 12, 13]
    averaged = average_comparison(_opener(ESSAY), _opener(REWORDED), SMALL, seeds=seeds)
    assert [run.seed for run in averaged.runs] == seeds
    single = compare_documents(_opener(ESSAY), _opener(REWORDED), SMALL, seed=12)
    assert averaged.scores[2] == single.similarity


def test_compare_against_ranks_and_reports_failures():
    candidates = {
        "copy.txt": _opener(ESSAY),
        "reworded.txt": _opener(REWORDED),
        "other.txt": _opener("Completely unrelated words about gardening tomatoes in summer."),
        "empty.txt": _opener("short"),
    }
    matches = compare_against(_opener(ESSAY), candidates, SMALL, seed=4)
    assert [m.name for m in matches] == ["copy.txt", "reworded.txt", "other.txt", "empty.txt"]
    assert matches[0].similarity == 1.0
    assert matches[2].similarity == 0.0
    assert matches[3].similarity is None
    assert matches[3].error


def test_compare_against_reports_unreadable_candidates():
    def vanished():
        raise FileNotFoundError("vanished.txt")

    candidates = {
        "vanished.txt": vanished,
        "reworded.txt": _opener(REWORDED),
        "copy.txt": _opener(ESSAY),
    }
    matches = compare_against(_opener(ESSAY), candidates, SMALL, seed=4)
    assert [m.name for m in matches] == ["copy.txt", "reworded.txt", "vanished.txt"]
    assert matches[0].similarity == 1.0
    assert 0.0 < matches[1].similarity < 1.0
    assert matches[2].similarity is None
    assert matches[2].matches is None
    assert "vanished.txt" in matches[2].error


def test_compare_against_agrees_with_pairwise_comparison():
    candidates = {"reworded.txt": _opener(REWORDED)}
    batch = compare_against(_opener(ESSAY), candidates, SMALL, seed=17)
    pair = compare_documents(_opener(ESSAY), _opener(REWORDED), SMALL, seed=17)
    assert batch[0].similarity == pair.similarity


def test_compare_against_keeps_order_without_sort():
    candidates = {"b.txt": _opener("zebra yak xylophone walrus"), "a.txt": _opener(ESSAY)}
    matches = compare_against(_opener(ESSAY), candidates, SMALL, seed=2, sort=False)
    assert [m.name for m in matches] == ["b.txt", "a.txt"]


def test_empty_query_fails_the_batch():
    with pytest.raises(EmptyInputError):
        compare_against(_opener("alone"), {"a.txt": _opener(ESSAY)}, SMALL, seed=2)


# --------------------------
# Statistical behaviour
# --------------------------

def _overlapping_documents():
    # 60 distinct words each, sharing w30..w59: 29 shared shingles out of 89
    doc_a = " ".join(f"w{i}" for i in range(0, 60))
    doc_b = " ".join(f"w{i}" for i in range(30, 90))
    return doc_a, doc_b, 29 / 89


def _estimates(permutations, seeds):
    doc_a, doc_b, _ = _overlapping_documents()
    settings = SimilaritySettings(shingle_length=2, permutations=permutations)
    averaged = average_comparison(_opener(doc_a), _opener(doc_b), settings, seeds=seeds)
    return averaged


def test_variance_shrinks_with_more_permutations():
    seeds = list(range(1000, 1030))
    coarse = _estimates(16, seeds).scores
    fine = _estimates(1024, seeds).scores
    assert statistics.pvariance(fine) < statistics.pvariance(coarse)


def test_mean_of_runs_tracks_true_jaccard():
    _, _, jaccard = _overlapping_documents()
    averaged = _estimates(1024, list(range(500, 520)))
    worst_single = max(abs(score - jaccard) for score in averaged.scores)
    assert abs(averaged.mean - jaccard) <= worst_single
    assert averaged.mean == pytest.approx(jaccard, abs=0.03)
