#!/usr/bin/env python3
"""Greedy Spider autoplay used to benchmark deals and the hint engine."""

from __future__ import annotations

import argparse
import logging
import random
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, List, Optional, Sequence

import pandas as pd

from spider.cards import Card
from spider.game import SpiderGame
from spider.hints import FlipHint, MoveHint

LOGGER = logging.getLogger("solver")

RESULT_COLUMNS = [
    "tag",
    "result",
    "timestamp_utc",
    "seed",
    "difficulty",
    "moves",
    "deals",
    "completed_sets",
    "score",
    "duration_ms",
]


class SimulationError(RuntimeError):
    """Raised when autoplay results cannot be written."""


class SpiderSolver:
    """Play a game by always following the hint engine's suggestion."""

    def __init__(
        self,
        *,
        difficulty: str = "advanced",
        shuffle_seed: int = 0,
        deck: Optional[Iterable[Card]] = None,
    ) -> None:
        self.shuffle_seed = shuffle_seed & 0xFFFFFFFF
        self.game = SpiderGame(difficulty, seed=self.shuffle_seed, deck=deck)
        self.difficulty = self.game.profile.name
        self.moves = 0
        self.deals = 0
        self.reveals = 0
        self._seen: set = set()

    @property
    def board(self):
        return self.game.board

    # ------------------------------------------------------------------
    # Single steps
    # ------------------------------------------------------------------
    def try_hint_move(self) -> bool:
        hint = self.game.compute_hint()
        if isinstance(hint, FlipHint):
            result = self.game.reveal_card(hint.pile_index, hint.card_index)
            if result.applied:
                self.reveals += 1
            return result.applied
        if not isinstance(hint, MoveHint):
            return False

        result = self.game.apply_move(hint.source, hint.start_index, hint.target)
        if not result.applied:
            return False
        key = self.board.layout_key()
        if key in self._seen:
            # The greedy choice only shuffled a run back to a known layout.
            self.game.undo()
            return False
        self._seen.add(key)
        self.moves += 1
        return True

    def try_deal(self) -> bool:
        result = self.game.deal_from_stock()
        if not result.applied:
            LOGGER.debug("Cannot deal: %s", result.reason)
            return False
        self.deals += 1
        self._seen.add(self.board.layout_key())
        return True

    # ------------------------------------------------------------------
    # Game loop
    # ------------------------------------------------------------------
    def play(self, *, max_steps: int = 2000) -> dict:
        self._seen.add(self.board.layout_key())
        steps = 0
        while steps < max_steps and not self.board.won:
            steps += 1
            if self.try_hint_move():
                continue
            if self.try_deal():
                continue
            break
        return {
            "won": self.board.won,
            "moves": self.moves,
            "deals": self.deals,
            "reveals": self.reveals,
            "completed_sets": self.board.completed_sets,
            "score": self.board.score,
            "stock_remaining": len(self.board.stock),
            "seed": self.shuffle_seed,
            "difficulty": self.difficulty,
            "steps": steps,
        }


def build_record(result: dict, *, tag: str, duration_ms: int) -> dict:
    return {
        "tag": tag,
        "result": "win" if result["won"] else "loss",
        "timestamp_utc": datetime.now(timezone.utc).isoformat(),
        "seed": str(result["seed"]),
        "difficulty": result["difficulty"],
        "moves": result["moves"],
        "deals": result["deals"],
        "completed_sets": result["completed_sets"],
        "score": result["score"],
        "duration_ms": duration_ms,
    }


def write_records(records: Sequence[dict], path: Path) -> None:
    """Append *records* to the CSV or Parquet log at *path*."""

    frame = pd.DataFrame(list(records), columns=RESULT_COLUMNS)
    suffix = path.suffix.lower()
    path.parent.mkdir(parents=True, exist_ok=True)
    if suffix == ".csv":
        if path.exists():
            frame = pd.concat([pd.read_csv(path), frame], ignore_index=True)
        frame.to_csv(path, index=False)
    elif suffix == ".parquet":
        if path.exists():
            frame = pd.concat([pd.read_parquet(path), frame], ignore_index=True)
        frame.to_parquet(path, index=False)
    else:
        raise SimulationError(f"{path}: Unsupported file extension")


def parse_arguments(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--seed",
        type=int,
        help="Seed for the first shuffle. Subsequent games advance the RNG deterministically.",
    )
    parser.add_argument(
        "--games",
        type=int,
        default=1,
        help="Number of games to simulate (default: 1).",
    )
    parser.add_argument(
        "--difficulty",
        default="advanced",
        help="beginner, intermediate or advanced (default: advanced).",
    )
    parser.add_argument(
        "--max-steps",
        type=int,
        default=2000,
        help="Fail-safe iteration cap to avoid infinite loops (default: 2000).",
    )
    parser.add_argument(
        "--output",
        help="Append one row per game to this CSV or Parquet attempt log.",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress per-game output and only print the summary line.",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    return parser.parse_args(argv)


def run_cli(argv: Sequence[str] | None = None) -> int:
    args = parse_arguments(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    master_seed = args.seed if args.seed is not None else random.randrange(0, 2**32)
    master_rng = random.Random(master_seed)

    wins = 0
    total_moves = 0
    total_sets = 0
    records: List[dict] = []

    for game_index in range(args.games):
        if game_index == 0 and args.seed is not None:
            seed = args.seed & 0xFFFFFFFF
        else:
            seed = master_rng.randrange(0, 2**32)

        started = time.perf_counter()
        solver = SpiderSolver(difficulty=args.difficulty, shuffle_seed=seed)
        result = solver.play(max_steps=args.max_steps)
        duration_ms = int((time.perf_counter() - started) * 1000)

        total_moves += result["moves"]
        total_sets += result["completed_sets"]
        if result["won"]:
            wins += 1
        records.append(build_record(result, tag=f"game-{game_index + 1}", duration_ms=duration_ms))

        if not args.quiet:
            status = "win" if result["won"] else "loss"
            print(
                f"Game {game_index + 1}: seed={seed} difficulty={result['difficulty']} "
                f"moves={result['moves']} deals={result['deals']} "
                f"sets={result['completed_sets']} score={result['score']} status={status}"
            )

    if args.output:
        try:
            write_records(records, Path(args.output))
        except SimulationError as exc:
            LOGGER.error("%s", exc)
            return 1

    win_rate = (wins / args.games) * 100 if args.games else 0.0
    average_moves = total_moves / args.games if args.games else 0.0
    average_sets = total_sets / args.games if args.games else 0.0

    print(
        "Summary: "
        f"games={args.games} wins={wins} ({win_rate:.1f}%) "
        f"avg_moves={average_moves:.1f} avg_sets={average_sets:.1f}"
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(run_cli())
