import logging
from pathlib import Path
from typing import Dict

import exifread

from .. import config


class MetadataReader:
    """
    Reads back the EXIF currently stored in a file.

    Uses 'exifread' (fast, Python-native) so that what gets reported is an
    independent read of the file, not the writer's own view of it.
    """

    def read_tags(self, path: Path) -> Dict[str, str]:
        """
        Returns printable tag values keyed by exifread name,
        e.g. {'Image Make': 'Canon', 'EXIF ISOSpeedRatings': '400'}.
        """
        try:
            with path.open('rb') as f:
                # details=False skips MakerNotes and speeds things up
                tags = exifread.process_file(f, details=False)
        except Exception as e:
            logging.warning(f"ExifRead failed for {path}: {e}")
            return {}

        return {
            name: str(value).strip()
            for name, value in tags.items()
            if name not in config.SKIP_READ_TAGS
        }
