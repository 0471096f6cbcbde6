import shutil
import logging
from pathlib import Path

from ..exceptions import FileAccessError, VerificationError
from ..models import SourceFileDescriptor
from ..scanning.hasher import FileHasher


class FileCopier:
    def __init__(self, hasher: FileHasher):
        self.hasher = hasher

    def copy(self, src: Path, dest: Path):
        """
        Copies bytes and timestamps (shutil.copy2) into a new file.
        Never overwrites an existing target.
        """
        logging.info(f"Copying file from [{src}] to [{dest}]")
        try:
            dest.parent.mkdir(parents=True, exist_ok=True)
            if dest.exists():
                raise FileAccessError(f"Refusing to overwrite existing target {dest}")
            shutil.copy2(str(src), str(dest))
        except OSError as e:
            raise FileAccessError(f"Copy {src} -> {dest} failed: {e}") from e

    def verify(self, dest: Path, descriptor: SourceFileDescriptor):
        """
        Re-reads the copy and compares length, then hash, with the source
        descriptor. A mismatching copy is left in place.
        """
        try:
            length = dest.stat().st_size
        except OSError as e:
            raise FileAccessError(f"Cannot stat copied file {dest}: {e}") from e

        if length != descriptor.original_length:
            raise VerificationError(
                "length",
                f"error during copying file from: [{descriptor.source_path}] to [{dest}]. File length difference.",
            )
        if self.hasher.fingerprint(dest).hash != descriptor.content_hash:
            raise VerificationError(
                "hash",
                f"error during copying file from: [{descriptor.source_path}] to [{dest}]. File content hash difference.",
            )
