# tests/test_cli.py
import json

import pytest

from shinglesim.cli import EXIT_INVALID, EXIT_OK, EXIT_UNREADABLE, main

ESSAY = "Shingles turn a document into overlapping word pairs that can be hashed."
REWORDED = "Shingles turn any document into overlapping word pairs which can be hashed."


@pytest.fixture
def db(tmp_path):
    root = tmp_path / "db"
    root.mkdir()
    (root / "essay.txt").write_text(ESSAY, encoding="utf-8")
    (root / "reworded.txt").write_text(REWORDED, encoding="utf-8")
    (root / "garden.txt").write_text("Tomatoes grow best in warm sunny summer gardens.", encoding="utf-8")
    (root / "tiny.txt").write_text("hi", encoding="utf-8")
    (root / "init.txt").write_text("essay.txt\nreworded.txt\ngarden.txt\n", encoding="utf-8")
    return root


def _run(db, *args):
    return main(["--db-dir", str(db), "--listing", str(db / "init.txt"), "--permutations", "128", *args])


def test_list(db, capsys):
    assert _run(db, "--json", "list") == EXIT_OK
    assert json.loads(capsys.readouterr().out) == {"documents": ["essay.txt", "reworded.txt", "garden.txt"]}


def test_compare_prints_report(db, capsys):
    assert _run(db, "--seed", "5", "compare", "essay.txt", "reworded.txt") == EXIT_OK
    out = capsys.readouterr().out
    assert "Similarity" in out
    assert "128.0" in out


def test_compare_json_is_reproducible(db, capsys):
    _run(db, "--seed", "5", "--json", "compare", "essay.txt", "reworded.txt")
    first = json.loads(capsys.readouterr().out)
    _run(db, "--seed", "5", "--json", "compare", "essay.txt", "reworded.txt")
    second = json.loads(capsys.readouterr().out)
    assert first == second
    assert first["seed"] == 5
    assert 0.0 < first["similarity"] < 1.0


def test_compare_rejects_same_file(db, capsys):
    assert _run(db, "compare", "essay.txt", "essay.txt") == EXIT_INVALID
    assert "two different files" in capsys.readouterr().err


def test_compare_rejects_same_file_under_another_name(db, capsys):
    assert _run(db, "compare", "essay.txt", str(db / "essay.txt")) == EXIT_INVALID
    assert "two different files" in capsys.readouterr().err


def test_average_rejects_same_file_under_another_name(db):
    assert _run(db, "average", str(db / "essay.txt"), "essay.txt", "--runs", "2") == EXIT_INVALID


def test_compare_missing_file(db, capsys):
    assert _run(db, "compare", "essay.txt", "nope.txt") == EXIT_UNREADABLE
    assert "Couldn't open" in capsys.readouterr().err


def test_compare_too_short_document(db):
    assert _run(db, "compare", "essay.txt", "tiny.txt") == EXIT_INVALID


def test_invalid_permutations(db):
    code = main(["--db-dir", str(db), "--permutations", "0", "compare", "essay.txt", "reworded.txt"])
    assert code == EXIT_INVALID


def test_average(db, capsys):
    assert _run(db, "--seed", "9", "--json", "average", "essay.txt", "reworded.txt", "--runs", "3") == EXIT_OK
    payload = json.loads(capsys.readouterr().out)
    assert payload["seeds"] == [9, 10, 11]
    assert len(payload["scores"]) == 3
    assert payload["mean"] == pytest.approx(sum(payload["scores"]) / 3)


def test_average_text_report(db, capsys):
    assert _run(db, "average", "essay.txt", "reworded.txt", "--runs", "2") == EXIT_OK
    lines = capsys.readouterr().out.splitlines()
    assert lines[0].startswith("* Run 1: ")
    assert lines[-1].startswith("Average of all 2 rounds: ")


def test_rank_draws_bars_for_other_documents(db, capsys):
    assert _run(db, "--seed", "1", "rank", "essay.txt") == EXIT_OK
    lines = capsys.readouterr().out.splitlines()
    assert [line.split()[1] for line in lines] == ["reworded.txt", "garden.txt"]
    assert lines[1].endswith("[          ]    (0/10)")


def test_rank_unknown_document(db):
    assert _run(db, "rank", "ghost.txt") == EXIT_UNREADABLE


def test_rank_with_query_given_as_path_skips_itself(db, capsys):
    assert _run(db, "--seed", "1", "--json", "rank", str(db / "essay.txt")) == EXIT_OK
    payload = json.loads(capsys.readouterr().out)
    assert [m["name"] for m in payload["matches"]] == ["reworded.txt", "garden.txt"]
