"""Summarise Spider autoplay attempt logs per difficulty."""
from __future__ import annotations

import argparse
import json
import logging
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Iterable, Sequence

import numpy as np
import pandas as pd

LOGGER = logging.getLogger("summary")

REQUIRED_COLUMNS = {"result", "difficulty"}
NUMERIC_COLUMNS = ("moves", "deals", "completed_sets", "score", "duration_ms")


class SummaryError(RuntimeError):
    """Raised when an attempt log cannot be summarised."""


@dataclass(frozen=True)
class DifficultySummary:
    """Aggregate statistics for the attempts played at one difficulty."""

    difficulty: str
    games: int
    wins: int
    win_rate: float | None
    average_moves: float | None
    median_moves: float | None
    average_completed_sets: float | None
    average_score: float | None
    longest_win_streak: int


def load_frame(path: Path) -> pd.DataFrame:
    suffix = path.suffix.lower()
    if suffix == ".csv":
        frame = pd.read_csv(path)
    elif suffix == ".parquet":
        frame = pd.read_parquet(path)
    else:
        raise SummaryError(f"{path}: Unsupported file extension")

    missing = REQUIRED_COLUMNS - set(frame.columns)
    if missing:
        raise SummaryError(f"{path}: Missing required columns: {', '.join(sorted(missing))}")

    frame["result"] = frame["result"].fillna("").astype(str).str.strip().str.lower()
    frame["difficulty"] = frame["difficulty"].fillna("unknown").astype(str).str.strip().str.lower()
    for column in NUMERIC_COLUMNS:
        if column in frame:
            frame[column] = pd.to_numeric(frame[column], errors="coerce")
    return frame


def filter_frame(
    frame: pd.DataFrame,
    include_results: Sequence[str] | None = None,
    exclude_results: Sequence[str] | None = None,
) -> pd.DataFrame:
    """Return the rows of *frame* passing the result inclusion/exclusion lists."""

    mask = np.ones(len(frame), dtype=bool)
    if include_results:
        include_set = {value.strip().lower() for value in include_results}
        mask &= frame["result"].isin(include_set).to_numpy()
    if exclude_results:
        exclude_set = {value.strip().lower() for value in exclude_results}
        mask &= ~frame["result"].isin(exclude_set).to_numpy()
    return frame[mask]


def longest_streak(results: Iterable[str], value: str = "win") -> int:
    longest = 0
    current = 0
    for result in results:
        if result == value:
            current += 1
            longest = max(longest, current)
        else:
            current = 0
    return longest


def _mean(frame: pd.DataFrame, column: str) -> float | None:
    if column not in frame:
        return None
    values = frame[column].dropna()
    return float(values.mean()) if not values.empty else None


def _median(frame: pd.DataFrame, column: str) -> float | None:
    if column not in frame:
        return None
    values = frame[column].dropna()
    return float(np.median(values)) if not values.empty else None


def summarise_frame(frame: pd.DataFrame) -> list[DifficultySummary]:
    summaries: list[DifficultySummary] = []
    for difficulty, group in frame.groupby("difficulty", sort=True):
        games = int(group.shape[0])
        wins = int(group["result"].eq("win").sum())
        summaries.append(
            DifficultySummary(
                difficulty=str(difficulty),
                games=games,
                wins=wins,
                win_rate=wins / games if games else None,
                average_moves=_mean(group, "moves"),
                median_moves=_median(group, "moves"),
                average_completed_sets=_mean(group, "completed_sets"),
                average_score=_mean(group, "score"),
                longest_win_streak=longest_streak(group["result"]),
            )
        )
    return summaries


def format_summary(path: Path, summaries: Sequence[DifficultySummary]) -> str:
    total = sum(summary.games for summary in summaries)
    lines = [f"{path}: {total} games"]
    for summary in summaries:
        lines.append(f"  {summary.difficulty}: {summary.games} games, {summary.wins} wins")
        if summary.win_rate is not None:
            lines.append(f"    win rate: {summary.win_rate * 100:.1f}%")
        if summary.average_moves is not None:
            lines.append(
                f"    moves: mean={summary.average_moves:.1f} median={summary.median_moves:.1f}"
            )
        if summary.average_completed_sets is not None:
            lines.append(f"    completed sets: mean={summary.average_completed_sets:.2f}")
        if summary.average_score is not None:
            lines.append(f"    score: mean={summary.average_score:.1f}")
        lines.append(f"    longest win streak: {summary.longest_win_streak}")
    return "\n".join(lines)


def run(
    paths: Iterable[str],
    *,
    include_results: Sequence[str] | None = None,
    exclude_results: Sequence[str] | None = None,
) -> list[tuple[Path, list[DifficultySummary]]]:
    results: list[tuple[Path, list[DifficultySummary]]] = []
    for raw_path in paths:
        path = Path(raw_path)
        frame = filter_frame(load_frame(path), include_results, exclude_results)
        if frame.empty:
            LOGGER.info("%s: no attempts left after filtering", path)
        results.append((path, summarise_frame(frame)))
    return results


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Summarise Spider autoplay attempt logs exported as CSV or Parquet.",
    )
    parser.add_argument(
        "paths",
        nargs="+",
        help="Paths to attempt logs. Use shell globs to summarise multiple files at once.",
    )
    parser.add_argument(
        "--include-result",
        dest="include_results",
        action="append",
        default=None,
        help="Only include attempts whose result matches the given value. Can be repeated.",
    )
    parser.add_argument(
        "--exclude-result",
        dest="exclude_results",
        action="append",
        default=None,
        help="Ignore attempts whose result matches the given value. Can be repeated.",
    )
    parser.add_argument(
        "--json",
        dest="as_json",
        action="store_true",
        help="Emit the summary as JSON instead of formatted text.",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    try:
        summaries = run(
            args.paths,
            include_results=args.include_results,
            exclude_results=args.exclude_results,
        )
    except SummaryError as exc:
        parser.error(str(exc))

    if args.as_json:
        payload = [
            {"path": str(path), "difficulties": [asdict(summary) for summary in items]}
            for path, items in summaries
        ]
        print(json.dumps(payload, indent=2))
    else:
        for path, items in summaries:
            print(format_summary(path, items))

    return 0


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    raise SystemExit(main())
