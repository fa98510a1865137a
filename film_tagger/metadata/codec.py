import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Tuple

import piexif

from .. import config
from ..exceptions import CodecError

_INTEGER_TYPES = {piexif.TYPES.Byte, piexif.TYPES.Short, piexif.TYPES.Long,
                  piexif.TYPES.SShort, piexif.TYPES.SLong}
_RATIONAL_TYPES = {piexif.TYPES.Rational, piexif.TYPES.SRational}

# EXIF type -> (min, max) of the stored integer (numerator for rationals)
_NUMERIC_RANGES = {
    piexif.TYPES.Byte: (0, 2**8 - 1),
    piexif.TYPES.Short: (0, 2**16 - 1),
    piexif.TYPES.Long: (0, 2**32 - 1),
    piexif.TYPES.SShort: (-2**15, 2**15 - 1),
    piexif.TYPES.SLong: (-2**31, 2**31 - 1),
    piexif.TYPES.Rational: (0, 2**32 - 1),
    piexif.TYPES.SRational: (-2**31, 2**31 - 1),
}


@dataclass
class MetadataHandle:
    """In-memory EXIF of one file, as the piexif dict."""
    path: Path
    exif: Dict[str, Any] = field(default_factory=dict)


class PiexifCodec:
    """
    EXIF codec backed by 'piexif'.

    Tags are addressed by exiv2-style names (Exif.<Group>.<Name>). Writing
    is supported for containers piexif can insert into (JPEG, WebP); other
    formats fail on save with CodecError.
    """

    def open(self, path: Path) -> MetadataHandle:
        try:
            exif = piexif.load(str(path))
        except Exception as e:
            raise CodecError(f"Cannot read metadata from {path}: {e}") from e
        return MetadataHandle(path=path, exif=exif)

    def clear_all(self, handle: MetadataHandle):
        handle.exif = {ifd: {} for ifd in config.IFD_GROUPS.values()}
        handle.exif["thumbnail"] = None

    def set_string(self, handle: MetadataHandle, tag_name: str, value: str):
        ifd, tag_id, tag_type = self._resolve(tag_name)
        if tag_type != piexif.TYPES.Ascii:
            raise CodecError(f"{tag_name} does not hold a string value")
        # ASCII tags hold UTF-8 bytes
        handle.exif.setdefault(ifd, {})[tag_id] = value.encode("utf-8")

    def set_numeric(self, handle: MetadataHandle, tag_name: str, value: int):
        """
        Stores value in the tag's declared EXIF type.

        Values the type cannot represent (e.g. ISOSpeedRatings is an unsigned
        SHORT) raise CodecError here, before anything is written.
        """
        ifd, tag_id, tag_type = self._resolve(tag_name)
        low, high = _NUMERIC_RANGES.get(tag_type, (None, None))
        if low is not None and not low <= int(value) <= high:
            raise CodecError(f"{tag_name} cannot store {value} (range {low}..{high})")

        if tag_type in _INTEGER_TYPES:
            coerced: Any = int(value)
        elif tag_type in _RATIONAL_TYPES:
            coerced = (int(value), 1)
        else:
            raise CodecError(f"{tag_name} does not hold a numeric value")
        handle.exif.setdefault(ifd, {})[tag_id] = coerced

    def save(self, handle: MetadataHandle, path: Path):
        """Writes the handle's EXIF into the image at path (in place)."""
        try:
            exif_bytes = piexif.dump(handle.exif)
            piexif.insert(exif_bytes, str(path))
        except Exception as e:
            raise CodecError(f"Cannot write metadata to {path}: {e}") from e
        logging.debug(f"Wrote {len(exif_bytes)} bytes of EXIF to {path}")

    def _resolve(self, tag_name: str) -> Tuple[str, int, int]:
        """Maps 'Exif.Photo.LensMake' to (piexif IFD, tag id, EXIF type)."""
        parts = tag_name.split('.')
        if len(parts) != 3 or parts[0] != 'Exif' or parts[1] not in config.IFD_GROUPS:
            raise CodecError(f"Unknown tag {tag_name}")

        ifd = config.IFD_GROUPS[parts[1]]
        for tag_id, info in piexif.TAGS[ifd].items():
            if info["name"] == parts[2]:
                return ifd, tag_id, info["type"]
        raise CodecError(f"Unknown tag {tag_name}")
