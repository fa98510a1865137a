import os
import re
from datetime import datetime
from pathlib import Path
from typing import Optional

from .. import config
from ..exceptions import TimestampUnavailable
from ..models import DerivedTagSet, FileFacts, MakerModelPair, MutationRequest

_FIRST_WHITESPACE = re.compile(r"\s")


def split_maker_model(value: str) -> MakerModelPair:
    """
    Splits "Canon AE-1" into ("Canon", "AE-1") on the first whitespace.

    A value without whitespace yields ("", "") rather than guessing which
    half it belongs to.
    """
    parts = _FIRST_WHITESPACE.split(value, maxsplit=1)
    if len(parts) != 2:
        return MakerModelPair("", "")
    return MakerModelPair(parts[0], parts[1])


def format_timestamp(dt: datetime) -> str:
    try:
        return dt.strftime(config.TIMESTAMP_FORMAT)
    except (ValueError, OverflowError) as e:
        raise TimestampUnavailable(f"Cannot format timestamp {dt!r}: {e}") from e


def file_creation_time(path: Path) -> datetime:
    """
    Returns the file's creation time in the local clock (naive datetime).

    Uses st_birthtime where the platform reports it. On Windows st_ctime is
    the creation time. On Linux the birth time is only reachable through
    os.statx (Python 3.15+); older interpreters have no creation time to read.
    """
    try:
        st = path.stat()
    except OSError as e:
        raise TimestampUnavailable(f"Cannot stat {path}: {e}") from e

    ts: Optional[float] = getattr(st, "st_birthtime", None)
    if ts is None and os.name == "nt":
        ts = st.st_ctime
    if ts is None:
        ts = _statx_birthtime(path)
    if ts is None:
        raise TimestampUnavailable(f"Filesystem does not report a creation time for {path}")

    try:
        return datetime.fromtimestamp(ts)
    except (ValueError, OverflowError, OSError) as e:
        raise TimestampUnavailable(f"Invalid creation time {ts!r} for {path}: {e}") from e


def _statx_birthtime(path: Path) -> Optional[float]:
    statx = getattr(os, "statx", None)
    mask = getattr(os, "STATX_BTIME", None)
    if statx is None or mask is None:
        return None

    try:
        result = statx(path, mask)
    except OSError as e:
        raise TimestampUnavailable(f"Cannot statx {path}: {e}") from e

    # The filesystem may not record a birth time even when asked for one
    if not getattr(result, "stx_mask", mask) & mask:
        return None
    return getattr(result, "stx_birthtime", None)


def read_file_facts(path: Path, with_timestamp: bool = False) -> FileFacts:
    created = file_creation_time(path) if with_timestamp else None
    return FileFacts(path=path, created=created)


def derive(request: MutationRequest, facts: FileFacts) -> DerivedTagSet:
    """
    Computes the tag writes for one file.

    Each request field maps onto its own tags (see config.FIELD_TAGS), so
    the resulting writes are independent of each other. The clear flag is
    not a write; the mutator handles it before any tag is set.
    """
    tags = DerivedTagSet()

    if request.description is not None:
        tags.add(config.TAG_DESCRIPTION, request.description)

    if request.iso is not None:
        tags.add(config.TAG_ISO, int(request.iso))

    if request.camera is not None:
        make, model = split_maker_model(request.camera)
        tags.add(config.TAG_MAKE, make)
        tags.add(config.TAG_MODEL, model)

    if request.lens is not None:
        make, model = split_maker_model(request.lens)
        tags.add(config.TAG_LENS_MAKE, make)
        tags.add(config.TAG_LENS_MODEL, model)

    if request.focal_length is not None:
        tags.add(config.TAG_FOCAL_LENGTH, int(request.focal_length))

    if request.artist is not None:
        tags.add(config.TAG_ARTIST, request.artist)

    if request.timestamp:
        if facts.created is None:
            raise TimestampUnavailable(f"No creation time available for {facts.path}")
        stamp = format_timestamp(facts.created)
        tags.add(config.TAG_DATETIME_ORIGINAL, stamp)
        tags.add(config.TAG_DATETIME_DIGITIZED, stamp)

    return tags
