import logging
from pathlib import Path
from datetime import datetime
from typing import Optional

import exifread
from pymediainfo import MediaInfo

from .. import config
from ..exceptions import MetadataExtractionError


class MetadataExtractor:
    """
    Extracts the capture date used for placement.

    Strategies:
      - Images: Uses 'exifread' (fast, Python-native).
      - Video: Uses 'pymediainfo' General track dates.
    """

    def get_capture_datetime(self, path: Path) -> Optional[datetime]:
        """Returns None when the file carries no usable date."""
        try:
            if path.suffix.lower() in config.VIDEO_EXTS:
                return self.get_video_datetime(path)
            return self.get_image_datetime(path)
        except MetadataExtractionError as e:
            logging.debug(f"No capture date for {path}: {e}")
            return None

    def get_image_datetime(self, path: Path) -> Optional[datetime]:
        try:
            with path.open('rb') as f:
                # details=False speeds up processing significantly
                tags = exifread.process_file(f, details=False)
        except Exception as e:
            raise MetadataExtractionError(f"ExifRead failed for {path}: {e}") from e
        return self._parse_exif_date(tags)

    def get_video_datetime(self, path: Path) -> Optional[datetime]:
        try:
            mi = MediaInfo.parse(str(path))
        except Exception as e:
            raise MetadataExtractionError(f"MediaInfo failed for {path}: {e}") from e

        for track in mi.tracks:
            if track.track_type != "General":
                continue
            # Different cameras write to different tags
            for field in ("recorded_date", "encoded_date", "tagged_date"):
                val = getattr(track, field, None)
                if val:
                    dt = self._parse_flexible_date(val)
                    if dt:
                        return dt
        return None

    def _parse_exif_date(self, tags) -> Optional[datetime]:
        for tag in config.DATE_TAGS:
            if tag in tags:
                try:
                    # EXIF format is usually "YYYY:MM:DD HH:MM:SS"
                    dt_str = str(tags[tag]).replace(':', '-', 2)
                    return datetime.strptime(dt_str, "%Y-%m-%d %H:%M:%S")
                except ValueError:
                    continue
        return None

    def _parse_flexible_date(self, dt_str: str) -> Optional[datetime]:
        """
        Handles ISO and EXIF style strings, with or without a UTC marker.
        Returns a naive datetime object.
        """
        if not dt_str:
            return None

        clean = dt_str.replace("UTC", "").strip()

        try:
            return datetime.fromisoformat(clean)
        except ValueError:
            pass

        try:
            clean_exif = clean.replace(":", "-", 2)
            # strptime cannot handle sub-second precision here
            if "." in clean_exif:
                clean_exif = clean_exif.split(".")[0]
            return datetime.strptime(clean_exif, "%Y-%m-%d %H:%M:%S")
        except ValueError:
            return None
