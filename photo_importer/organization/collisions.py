import logging
from itertools import count, islice
from pathlib import Path
from typing import Iterator, Set

from .. import config
from ..exceptions import CollisionError


def candidate_names(path: Path) -> Iterator[Path]:
    """Lazily yields name_1.ext, name_2.ext, ... next to ``path``."""
    stem, ext = path.stem, path.suffix
    for counter in count(1):
        yield path.with_name(config.COLLISION_PATTERN.format(stem=stem, counter=counter, ext=ext))


class CollisionResolver:
    """
    Finds a free file name for an intended destination.

    A name is taken if it exists on disk or was already handed out by this
    resolver (so two files in one run never share a destination, even in
    dry-run mode where nothing is written).
    """

    def __init__(self, max_attempts: int = config.MAX_COLLISION_ATTEMPTS):
        self.max_attempts = max_attempts
        self._claimed: Set[Path] = set()

    def is_taken(self, path: Path) -> bool:
        return path in self._claimed or path.exists()

    def resolve(self, intended: Path) -> Path:
        if not self.is_taken(intended):
            self._claimed.add(intended)
            return intended

        for candidate in islice(candidate_names(intended), self.max_attempts):
            if not self.is_taken(candidate):
                logging.warning(
                    f"WARNING: Target file already exists [{intended}]. Generated new file name: [{candidate}]."
                )
                self._claimed.add(candidate)
                return candidate

        raise CollisionError(f"No free file name for {intended} after {self.max_attempts} attempts")
