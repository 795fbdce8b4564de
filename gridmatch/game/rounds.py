"""
rounds.py - Round (level) configuration for a match

A Round fixes the board geometry, the win length and the AI opponent of one
difficulty level. Rounds are loaded once, either from a JSON file or from the
built-in defaults.
"""

import json
import os
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

import filelock

from gridmatch.debug import debug
from gridmatch.utils import DEFAULT_ROWS, DEFAULT_COLUMNS, DEFAULT_MIN_WIN_LENGTH


@dataclass(frozen=True)
class Round:
    index: int
    ai_name: str
    image_ref: str = ""
    rows: int = DEFAULT_ROWS
    columns: int = DEFAULT_COLUMNS
    min_win_length: int = DEFAULT_MIN_WIN_LENGTH

    def __post_init__(self):
        if self.index < 0:
            raise ValueError(f"Round index must not be negative, got {self.index}")
        if self.rows < 1 or self.columns < 1:
            raise ValueError(f"Round {self.index}: invalid size {self.rows}x{self.columns}")
        if not 1 <= self.min_win_length <= max(self.rows, self.columns):
            raise ValueError(
                f"Round {self.index}: win length {self.min_win_length} does not fit "
                f"a {self.rows}x{self.columns} board")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Round":
        """
        Build a Round from a JSON record.

        Both camelCase (``aiName``, ``imageRef``, ``minWinLength``) and
        snake_case keys are accepted.
        """
        def pick(*keys, default=None):
            for key in keys:
                if key in data:
                    return data[key]
            return default

        if pick("aiName", "ai_name") is None:
            raise ValueError(f"Round record has no AI name: {data!r}")
        try:
            return cls(
                index=int(pick("index")),
                ai_name=str(pick("aiName", "ai_name")),
                image_ref=str(pick("imageRef", "image_ref", default="")),
                rows=int(pick("rows", default=DEFAULT_ROWS)),
                columns=int(pick("columns", default=DEFAULT_COLUMNS)),
                min_win_length=int(pick("minWinLength", "min_win_length",
                                        default=DEFAULT_MIN_WIN_LENGTH)),
            )
        except TypeError as e:
            raise ValueError(f"Incomplete round record {data!r}") from e

    def to_dict(self) -> Dict[str, Any]:
        return {
            "index": self.index,
            "aiName": self.ai_name,
            "imageRef": self.image_ref,
            "rows": self.rows,
            "columns": self.columns,
            "minWinLength": self.min_win_length,
        }


DEFAULT_ROUNDS = (
    Round(index=0, ai_name="Pip", image_ref="ai/pip.png", rows=5, columns=6, min_win_length=4),
    Round(index=1, ai_name="Marlo", image_ref="ai/marlo.png", rows=6, columns=7, min_win_length=4),
    Round(index=2, ai_name="Vesta", image_ref="ai/vesta.png", rows=7, columns=9, min_win_length=5),
)


def check_round_sequence(rounds: Sequence[Round]) -> List[Round]:
    """
    Order rounds by index and make sure the indices run 0..n-1.

    Raises:
        ValueError: if the list is empty or indices have gaps or duplicates
    """
    ordered = sorted(rounds, key=lambda r: r.index)
    if not ordered:
        raise ValueError("At least one round is required")
    indices = [r.index for r in ordered]
    if indices != list(range(len(ordered))):
        raise ValueError(f"Round indices must be 0..{len(ordered) - 1}, got {indices}")
    return ordered


def read_rounds_file(file_path: str) -> List[Dict[str, Any]]:
    """
    Read a JSON round list while holding the file's lock.

    Args:
        file_path: Path to the JSON file

    Returns:
        The raw list of round records
    """
    if not os.path.exists(file_path):
        raise FileNotFoundError(f"Round file not found: {file_path}")

    with filelock.FileLock(f"{file_path}.lock"):
        with open(file_path, 'r') as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as e:
                debug.error(f"Error decoding JSON from {file_path}: {e}", "rounds")
                raise ValueError(f"Malformed round file {file_path}") from e

    if isinstance(data, dict):
        data = data.get("rounds", [])
    if not isinstance(data, list):
        raise ValueError(f"Round file {file_path} must hold a list of rounds")
    return data


def load_rounds(file_path: Optional[str] = None) -> List[Round]:
    """
    Load the ordered round list.

    Args:
        file_path: JSON file with round records, or None for the built-in levels

    Returns:
        Rounds ordered by index
    """
    if file_path is None:
        debug.debug("Using built-in rounds", "rounds")
        return list(DEFAULT_ROUNDS)

    records = read_rounds_file(file_path)
    rounds = check_round_sequence([Round.from_dict(record) for record in records])
    debug.info(f"Loaded {len(rounds)} rounds from {file_path}", "rounds")
    return rounds
