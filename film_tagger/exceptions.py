"""
Custom exception hierarchy for the film tagger.

Input errors are raised before any file is touched. Derivation, codec and
file operation errors abort a single file's mutation and leave that file
unchanged. BatchError wraps the first per-file failure of a run.
"""
from pathlib import Path
from typing import List, Optional


class FilmTaggerError(Exception):
    """Base exception for all film tagger errors."""
    pass


class InputError(FilmTaggerError):
    """Raised when a run is rejected before touching any file."""
    pass


class NoInputFiles(InputError):
    """Raised when the file list is empty."""

    def __init__(self, message: str = "No files were provided"):
        super().__init__(message)


class NoOperationRequested(InputError):
    """Raised when no flag for modifying the metadata was provided."""

    def __init__(self, message: str = "No flags for modifying the metadata were provided"):
        super().__init__(message)


class DerivationError(FilmTaggerError):
    """Raised when tag values cannot be derived for a file."""
    pass


class TimestampUnavailable(DerivationError):
    """Raised when a file's creation time cannot be read or formatted."""
    pass


class CodecError(FilmTaggerError):
    """Raised when metadata cannot be read, modified or saved."""
    pass


class FileOperationError(FilmTaggerError):
    """Raised when creating, copying or renaming the staging file fails."""
    pass


class InvalidPathError(FilmTaggerError):
    """Raised when a target path has no usable parent directory."""
    pass


class DuplicateTagError(ValueError):
    """Raised when a tag set would receive the same tag name twice."""
    pass


class BatchError(FilmTaggerError):
    """
    Terminal failure of a batch run.

    Carries the first failing path and its cause, plus the files that were
    mutated and the files that were never started.
    """

    def __init__(self,
                 path: Path,
                 cause: BaseException,
                 succeeded: Optional[List[Path]] = None,
                 skipped: Optional[List[Path]] = None):
        super().__init__(f"{path}: {cause}")
        self.path = path
        self.cause = cause
        self.succeeded = succeeded or []
        self.skipped = skipped or []
