import os
import enum
import logging
from pathlib import Path
from typing import Iterator, Set, Optional, Tuple

from ..models import SourceFileDescriptor
from .hasher import FileHasher


class Classification(enum.Enum):
    ELIGIBLE = "eligible"
    IGNORED = "ignored"


def classify(path: Path, extension: str) -> Classification:
    """Case-insensitive suffix match against a normalized extension ('.jpg')."""
    if str(path).lower().endswith(extension):
        return Classification.ELIGIBLE
    return Classification.IGNORED


def traversal_skip_dirs(source_root: Path, target_root: Path, skip_dirs: Optional[Set[Path]] = None) -> Set[Path]:
    """The target root is excluded whenever it lies inside the source tree."""
    skips = set(skip_dirs or ())
    if target_root == source_root or source_root in target_root.parents:
        skips.add(target_root)
    return skips


class SourceScanner:
    def __init__(self, hasher: Optional[FileHasher] = None):
        self.hasher = hasher or FileHasher()

    def describe(self, path: Path) -> SourceFileDescriptor:
        """
        Builds the descriptor for a candidate file. No side effects.

        Raises:
            FileAccessError: propagated from the hasher.
        """
        fp = self.hasher.fingerprint(path)
        return SourceFileDescriptor(
            source_path=path,
            content_hash=fp.hash,
            original_length=fp.length,
        )

    def iter_files(self,
                   root: Path,
                   skip_dirs: Optional[Set[Path]] = None,
                   follow_symlinks: bool = False) -> Iterator[Path]:
        """
        Depth-first walker using os.scandir.

        A directory that cannot be listed is logged and its subtree skipped;
        the walk itself never aborts.
        """
        skip_dirs = skip_dirs or set()
        visited: Set[Tuple[int, int]] = set()
        stack = [root]
        while stack:
            current = stack.pop()
            if skip_dirs and any(sd == current or sd in current.parents for sd in skip_dirs):
                logging.debug(f"Skipping excluded directory: {current}")
                continue

            if follow_symlinks:
                # Symlinked directories may point back up the tree
                try:
                    st = current.stat()
                except OSError as e:
                    logging.error(f"ERROR: Cannot visit [{current}]: {e}")
                    continue
                key = (st.st_dev, st.st_ino)
                if key in visited:
                    logging.warning(f"Directory already visited (symlink loop?): {current}")
                    continue
                visited.add(key)

            try:
                with os.scandir(current) as it:
                    entries = list(it)
            except OSError as e:
                logging.error(f"ERROR: Cannot visit [{current}]: {e}")
                continue

            # Sort for stable traversal order
            entries.sort(key=lambda e: e.name.lower())

            dirs = []
            files = []
            for e in entries:
                try:
                    if e.is_dir(follow_symlinks=follow_symlinks):
                        dirs.append(Path(e.path))
                    elif e.is_file(follow_symlinks=follow_symlinks):
                        files.append(Path(e.path))
                    else:
                        # Symlinks (when not followed), sockets, fifos, devices
                        logging.debug(f"Skipping non-regular entry [{e.path}].")
                except OSError as err:
                    logging.error(f"ERROR: Cannot visit [{e.path}]: {err}")

            # Push dirs to stack (reversed so we process A before Z)
            for d in reversed(dirs):
                stack.append(d)

            for f in files:
                yield f
