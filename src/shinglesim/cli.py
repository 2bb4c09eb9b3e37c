# src/shinglesim/cli.py
import argparse
import json
import logging
import sys

from .ingestion import DocumentDatabase
from .logging_config import setup_logging
from .similarity_search import configs
from .similarity_search.configs import SimilaritySettings
from .similarity_search.errors import DocumentOpenError, EmptyInputError, InvalidConfigurationError
from .similarity_search.pipeline import (
    average_comparison,
    compare_against,
    compare_documents,
    consecutive_seeds,
)
from .similarity_search.report import format_ranking, format_resemblance, format_runs

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_UNREADABLE = 1
EXIT_INVALID = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser("shinglesim", description="Estimate document similarity with word shingles and MinHash")
    parser.add_argument("--db-dir", default=configs.DB_DIR, help="Directory holding the documents")
    parser.add_argument("--listing", default=configs.DB_LISTING, help="File listing the database documents, one per line")
    parser.add_argument("--shingle-length", type=int, default=configs.SHINGLE_LENGTH, help="Words per shingle")
    parser.add_argument("--permutations", type=int, default=configs.PERMUTATIONS, help="Number of simulated hash functions")
    parser.add_argument("--seed", type=int, default=None, help="Fingerprint seed (random when omitted)")
    parser.add_argument("--json", action="store_true", help="Print results as JSON")
    parser.add_argument("--debug", action="store_true", default=None, help="Enable debug logging")

    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("list", help="List the documents in the database")

    p_compare = sub.add_parser("compare", help="Compare two documents")
    p_compare.add_argument("file_1")
    p_compare.add_argument("file_2")

    p_average = sub.add_parser("average", help="Compare two documents several times and average the results")
    p_average.add_argument("file_1")
    p_average.add_argument("file_2")
    p_average.add_argument("--runs", type=int, default=configs.RUNS, help="Number of runs to average")

    p_rank = sub.add_parser("rank", help="Compare a document against every other document in the database")
    p_rank.add_argument("file")
    p_rank.add_argument("--width", type=int, default=configs.BAR_WIDTH, help="Bar chart width")
    return parser


def _settings(args) -> SimilaritySettings:
    return SimilaritySettings(
        shingle_length=args.shingle_length,
        permutations=args.permutations,
        runs=getattr(args, "runs", configs.RUNS),
    ).validate()


def _require_different(db, args):
    # resolving both first makes a missing second file fail before any fingerprinting
    db.resolve(args.file_1)
    db.resolve(args.file_2)
    if db.same_document(args.file_1, args.file_2):
        raise InvalidConfigurationError("Please enter two different files.")


def _run_list(db, args):
    names = db.names()
    if args.json:
        print(json.dumps({"documents": names}, indent=2))
    else:
        print("Files available to check:")
        for name in names:
            print(f"* {name}")


def _run_compare(db, args):
    _require_different(db, args)
    result = compare_documents(
        db.opener(args.file_1), db.opener(args.file_2), _settings(args),
        seed=args.seed, name_1=args.file_1, name_2=args.file_2,
    )
    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
    else:
        print(format_resemblance(result))


def _run_average(db, args):
    _require_different(db, args)
    settings = _settings(args)
    seeds = consecutive_seeds(args.seed, settings.runs) if args.seed is not None else None
    averaged = average_comparison(
        db.opener(args.file_1), db.opener(args.file_2), settings,
        seeds=seeds, name_1=args.file_1, name_2=args.file_2,
    )
    if args.json:
        print(json.dumps(averaged.to_dict(), indent=2))
    else:
        print(format_runs(averaged))


def _run_rank(db, args):
    settings = _settings(args)
    # resolve the query first so a typo fails before any comparison
    db.resolve(args.file)
    matches = compare_against(
        db.opener(args.file), db.openers(db.others(args.file)), settings,
        seed=args.seed, query_name=args.file, sort=False,
    )
    if args.json:
        print(json.dumps({"file": args.file, "matches": [m.to_dict() for m in matches]}, indent=2))
    else:
        print(format_ranking(matches, width=args.width))


COMMANDS = {
    "list": _run_list,
    "compare": _run_compare,
    "average": _run_average,
    "rank": _run_rank,
}


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.debug)

    db = DocumentDatabase(args.db_dir, args.listing)
    logger.debug("running %s against %s", args.command, db.root)
    try:
        COMMANDS[args.command](db, args)
    except (InvalidConfigurationError, EmptyInputError) as e:
        print(str(e), file=sys.stderr)
        return EXIT_INVALID
    except DocumentOpenError as e:
        print(str(e), file=sys.stderr)
        return EXIT_UNREADABLE
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
