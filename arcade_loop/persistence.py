"""
Best Score Storage
===================
A single persisted integer per game. Reads fall back to zero and
writes are best-effort: storage trouble never interrupts a run.
"""

import json
import logging
import os
from pathlib import Path
from typing import Union

logger = logging.getLogger(__name__)

DEFAULT_BEST_FILE = Path.home() / '.arcade_loop' / 'best_scores.json'


class MemoryBestScoreStore:
    """Keeps the best score in memory only."""

    def __init__(self, value: int = 0):
        self.value = value
        self.saves = 0

    def load(self) -> int:
        return self.value

    def save(self, value: int) -> None:
        self.value = value
        self.saves += 1


class JsonBestScoreStore:
    """
    Best scores in a small JSON object, one key per game.

    Several games can share one file; saving rewrites only this
    store's key and keeps the others.
    """

    def __init__(self, path: Union[str, os.PathLike], key: str = 'bestScore'):
        self.path = Path(path)
        self.key = key

    def _read_all(self) -> dict:
        with self.path.open('r', encoding='utf-8') as fh:
            data = json.load(fh)
        if not isinstance(data, dict):
            raise ValueError(f'expected a JSON object in {self.path}')
        return data

    def load(self) -> int:
        """Stored best score, or 0 when missing or unreadable."""
        if not self.path.exists():
            return 0
        try:
            value = int(self._read_all().get(self.key, 0))
        except (OSError, ValueError, TypeError) as exc:
            logger.warning('Could not read best score from %s: %s', self.path, exc)
            return 0
        return max(0, value)

    def save(self, value: int) -> None:
        """Write the best score; failures are logged and ignored."""
        try:
            try:
                data = self._read_all()
            except (OSError, ValueError):
                data = {}
            data[self.key] = int(value)
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path = self.path.with_suffix(self.path.suffix + '.tmp')
            with tmp_path.open('w', encoding='utf-8') as fh:
                json.dump(data, fh, indent=2, sort_keys=True)
            os.replace(tmp_path, self.path)
        except OSError as exc:
            logger.warning('Could not save best score to %s: %s', self.path, exc)
            return
        logger.info('Saved best score %d to %s [%s]', value, self.path, self.key)
