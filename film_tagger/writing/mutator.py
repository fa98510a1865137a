import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import Optional

from .. import config
from ..exceptions import FileOperationError, InvalidPathError
from ..metadata.codec import PiexifCodec
from ..models import DerivedTagSet


class AtomicFileMutator:
    """
    Applies a tag set to one file, all or nothing.

    The new content is built in a staging file next to the target and then
    renamed over it. The rename stays on one filesystem, so readers see
    either the old file or the new one. The original is never opened for
    writing. On success the path points to a new inode.
    """

    def __init__(self, codec: Optional[PiexifCodec] = None):
        self.codec = codec or PiexifCodec()

    def mutate(self, path: Path, clear: bool, tags: DerivedTagSet):
        path = Path(path)
        if not path.name:
            raise InvalidPathError(f"Cannot determine the directory of {str(path)!r}")
        directory = path.parent

        # 1-3. Edit the metadata in memory
        handle = self.codec.open(path)
        if clear:
            self.codec.clear_all(handle)
        for write in tags:
            if write.is_numeric:
                self.codec.set_numeric(handle, write.name, write.value)
            else:
                self.codec.set_string(handle, write.name, write.value)

        # 4. Staging file in the target's own directory
        staging = self._create_staging(directory, path.name)

        committed = False
        try:
            # 5. Working copy of the current bytes
            try:
                shutil.copyfile(path, staging)
                shutil.copymode(path, staging)
            except OSError as e:
                raise FileOperationError(f"Cannot copy {path} to {staging}: {e}") from e

            # 6. Persist the edited metadata into the copy
            self.codec.save(handle, staging)

            # 7. Promote
            try:
                os.replace(staging, path)
            except OSError as e:
                raise FileOperationError(f"Cannot replace {path} with {staging}: {e}") from e
            committed = True
        finally:
            if not committed:
                self._discard(staging)

        logging.debug(f"Updated {len(tags)} tags in {path} (clear={clear})")

    def _create_staging(self, directory: Path, name: str) -> Path:
        try:
            fd, staging = tempfile.mkstemp(
                prefix=f".{name}.",
                suffix=config.STAGING_SUFFIX,
                dir=directory,
            )
        except OSError as e:
            raise FileOperationError(f"Cannot create staging file in {directory}: {e}") from e
        os.close(fd)
        return Path(staging)

    def _discard(self, staging: Path):
        try:
            staging.unlink(missing_ok=True)
        except OSError as e:
            logging.warning(f"Failed to remove staging file {staging}: {e}")
