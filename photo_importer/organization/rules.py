import logging
from datetime import datetime
from typing import Optional

from .. import config
from ..metadata.extract import MetadataExtractor
from ..models import SourceFileDescriptor, Placement


class PlacementPolicy:
    """
    Maps a described file to (subfolder, file_name) inside the target tree.

    Subfolders are date buckets (``2021/2021-03``). The date comes from
    capture metadata, then from the file's mtime (if ``use_file_dates``),
    and files with neither land in the ``undated`` bucket. The file name is
    kept as-is; collisions are handled later.
    """

    def __init__(self,
                 extractor: Optional[MetadataExtractor] = None,
                 use_file_dates: bool = True):
        self.extractor = extractor or MetadataExtractor()
        self.use_file_dates = use_file_dates

    def placement_for(self, descriptor: SourceFileDescriptor) -> Placement:
        dt = self.capture_datetime(descriptor)
        if dt is None:
            subfolder = config.UNDATED_FOLDER
        else:
            subfolder = config.FOLDER_PATTERN.format(year=dt.year, month=dt.month)
        return Placement(subfolder=subfolder, file_name=descriptor.file_name)

    def capture_datetime(self, descriptor: SourceFileDescriptor) -> Optional[datetime]:
        dt = self.extractor.get_capture_datetime(descriptor.source_path)
        if dt is not None or not self.use_file_dates:
            return dt
        try:
            return datetime.fromtimestamp(descriptor.source_path.stat().st_mtime)
        except OSError as e:
            logging.debug(f"No file date for {descriptor.source_path}: {e}")
            return None
