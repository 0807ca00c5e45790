# horse_flappy/game/storage.py
from __future__ import annotations
from pathlib import Path
from typing import Optional, Union

from .config import BEST_FILE_DEFAULT, BEST_KEY


def _parse_best(text: str) -> int:
    """Pull the best score out of a `key=value` sidecar; anything odd reads as 0."""
    raw = None
    for line in text.splitlines():
        if "=" in line:
            k, v = line.split("=", 1)
            if k.strip() == BEST_KEY:
                raw = v.strip()
        elif line.strip():
            raw = line.strip()
    if raw is None:
        return 0
    try:
        value = int(float(raw))
    except (ValueError, OverflowError):
        return 0
    return value if value > 0 else 0


class BestScoreStore:
    """
    Single best-score integer on disk. Never raises: a missing or broken
    file loads as 0, a failed write is skipped, and the stored value only
    ever goes up.
    """
    def __init__(self, path: Optional[Union[str, Path]] = None):
        self.path = Path(path if path is not None else BEST_FILE_DEFAULT).expanduser()
        self._best: Optional[int] = None

    def load_best(self) -> int:
        try:
            text = self.path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError):
            self._best = 0
            return 0
        self._best = _parse_best(text)
        return self._best

    def save_best(self, score: int):
        if score < 0:
            return
        if self._best is None:
            self.load_best()
        if score <= self._best:
            return
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(f"{BEST_KEY}={int(score)}\n", encoding="utf-8")
        except OSError:
            return
        self._best = int(score)


class MemoryStore:
    """In-process store (headless env, tests)."""
    def __init__(self, best: int = 0):
        self.best = max(0, int(best))
        self.saves = 0

    def load_best(self) -> int:
        return self.best

    def save_best(self, score: int):
        self.saves += 1
        if score > self.best:
            self.best = int(score)
