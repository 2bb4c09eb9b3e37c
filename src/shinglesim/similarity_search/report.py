# src/shinglesim/similarity_search/report.py
"""
Plain-text renderings of comparison results for the terminal.
"""

from typing import List

from . import configs
from .pipeline import AveragedResult, ComparisonResult, RankedMatch

NAME_COLUMN = 15


def format_resemblance(result: ComparisonResult) -> str:
    """The 'matching minimums / # calculated minimums' fraction report."""
    matched = float(result.matches)
    lines = [
        "Result:",
        f"                            matching minimums         {matched:.1f}             ",
        f"           Similarity =   ---------------------  =  -------  = {result.similarity:.2f}  ",
        f"                          # calculated minimums       {float(result.permutations):.1f}             ",
    ]
    return "\n".join(lines)


def format_runs(averaged: AveragedResult) -> str:
    lines = [f"* Run {i}: {score:.2f}" for i, score in enumerate(averaged.scores, start=1)]
    lines.append(f"Average of all {len(averaged.runs)} rounds: {averaged.mean:.2f}")
    return "\n".join(lines)


def format_bar(name: str, similarity: float, width: int = configs.BAR_WIDTH) -> str:
    """
    One row of the ranking chart:  File: essay2.txt     [###       ]    (3/10)
    """
    percent = int(similarity * 100)
    filled = min(width, percent * width // 100)
    padding = " " * max(0, NAME_COLUMN - len(name))
    bar = "#" * filled + " " * (width - filled)
    return f"File: {name}{padding}[{bar}]    ({filled}/{width})"


def format_ranking(matches: List[RankedMatch], width: int = configs.BAR_WIDTH) -> str:
    rows = []
    for match in matches:
        if match.error is not None:
            padding = " " * max(0, NAME_COLUMN - len(match.name))
            rows.append(f"File: {match.name}{padding}(skipped: {match.error})")
        else:
            rows.append(format_bar(match.name, match.similarity, width))
    return "\n".join(rows)
