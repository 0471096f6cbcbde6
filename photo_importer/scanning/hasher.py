import hashlib
from pathlib import Path

from .. import config
from ..exceptions import FileAccessError
from ..models import Fingerprint


class FileHasher:
    def __init__(self, chunk_size: int = config.HASH_CHUNK_SIZE):
        self.chunk_size = chunk_size

    def fingerprint(self, path: Path) -> Fingerprint:
        """
        Computes SHA-256 and byte length of the file in a single read pass.

        Only the content bytes feed the hash, so renamed/retimed copies of
        the same data produce the same fingerprint.

        Raises:
            FileAccessError: the file could not be opened or read to the end.
        """
        h = hashlib.sha256()
        length = 0
        try:
            with open(path, 'rb') as f:
                while chunk := f.read(self.chunk_size):
                    h.update(chunk)
                    length += len(chunk)
        except OSError as e:
            raise FileAccessError(f"Cannot read {path}: {e}") from e
        return Fingerprint(hash=h.hexdigest(), length=length)
