import logging
import os
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Iterable, Optional, Tuple

from tqdm import tqdm

from . import config
from .exceptions import BatchError, NoInputFiles, NoOperationRequested
from .metadata.codec import PiexifCodec
from .metadata.derive import derive, read_file_facts
from .models import BatchSummary, MutationRequest
from .writing.mutator import AtomicFileMutator


class FilmTaggerApp:
    def __init__(self,
                 codec: Optional[PiexifCodec] = None,
                 max_workers: Optional[int] = config.DEFAULT_MAX_WORKERS,
                 show_progress: bool = True):
        if max_workers is None:
            max_workers = os.cpu_count() or 1
        if max_workers < 1:
            raise ValueError(f"max_workers must be at least 1, got {max_workers}")

        self.mutator = AtomicFileMutator(codec)
        self.max_workers = max_workers
        self.show_progress = show_progress

    def run(self,
            paths: Iterable[Path],
            request: MutationRequest,
            dry_run: bool = False) -> BatchSummary:
        """
        Applies the request to every file on a thread pool.

        Fail-fast: once a file fails, files that have not started yet are
        skipped, while files already in progress finish normally. The first
        observed failure is raised as BatchError after the pool drains.

        Args:
            dry_run: Derive and log the tags without touching any file
        """
        paths = [Path(p) for p in paths]
        if not paths:
            raise NoInputFiles()
        if not request.has_operation():
            raise NoOperationRequested()

        logging.info(f"Tagging {len(paths)} files with {self.max_workers} workers (DryRun={dry_run})")

        stop = threading.Event()
        summary = BatchSummary()
        first_failure: Optional[Tuple[Path, Exception]] = None

        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            future_to_path = {
                executor.submit(self._process_file, path, request, dry_run, stop): path
                for path in paths
            }

            for future in tqdm(as_completed(future_to_path),
                               total=len(future_to_path),
                               desc="Tagging",
                               disable=not self.show_progress):
                path = future_to_path[future]
                if future.cancelled():
                    summary.skipped.append(path)
                    continue

                try:
                    started = future.result()
                except Exception as e:
                    logging.error(f"Failed to tag {path}: {e}")
                    if first_failure is None:
                        first_failure = (path, e)
                        stop.set()
                        cancelled = sum(f.cancel() for f in future_to_path)
                        logging.warning(f"Stopping after failure; {cancelled} pending files will not be processed.")
                    continue

                if started:
                    summary.succeeded.append(path)
                else:
                    summary.skipped.append(path)

        if first_failure is not None:
            path, cause = first_failure
            raise BatchError(path, cause, summary.succeeded, summary.skipped) from cause

        logging.info(f"Tagging complete. Processed {len(summary.succeeded)} files.")
        return summary

    def _process_file(self,
                      path: Path,
                      request: MutationRequest,
                      dry_run: bool,
                      stop: threading.Event) -> bool:
        """Returns False if the batch was stopped before this file began."""
        # Only checked here; a started file always runs to completion.
        if stop.is_set():
            return False

        facts = read_file_facts(path, with_timestamp=request.timestamp)
        tags = derive(request, facts)

        if dry_run:
            logging.info(f"[DRY RUN] {path}: clear={request.clear} {tags.as_dict()}")
            return True

        logging.debug(f"{path}: {tags.as_dict()}")
        self.mutator.mutate(path, request.clear, tags)
        return True
