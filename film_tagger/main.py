import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from .core import FilmTaggerApp
from .exceptions import BatchError, InputError
from .metadata.extract import MetadataReader
from .models import MutationRequest

def setup_logging(verbose: bool, log_file: Optional[Path] = None):
    """Sets up logging to the console and, optionally, a file."""
    log_level = logging.DEBUG if verbose else logging.INFO

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding='utf-8'))

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(message)s",
        handlers=handlers,
        force=True,
    )

    # Silence chatty libraries
    logging.getLogger("exifread").setLevel(logging.ERROR)
    logging.getLogger("PIL").setLevel(logging.WARNING)

def parse_args(argv=None):
    p = argparse.ArgumentParser(
        description="A tool for tagging Exif metadata to scanned images from film rolls."
    )

    p.add_argument("files", type=Path, nargs="*", help="Files to apply metadata to")

    p.add_argument("-f", "--film", help="Set the film stock used")
    p.add_argument("-i", "--iso", type=int, help="Set the ISO film speed used")
    p.add_argument("-c", "--camera",
                   help="Set the camera used. The first word is the maker, the rest is the model")
    p.add_argument("-l", "--lens",
                   help="Set the lens used. The first word is the maker, the rest is the model")
    p.add_argument("-F", "--focal-length", type=int, help="Set the focal length in mm")
    p.add_argument("-a", "--artist", help="Set the artist")
    p.add_argument("--clear", action="store_true",
                   help="Clear all metadata from the image before applying new metadata")
    p.add_argument("-t", "--timestamp", action="store_true",
                   help="Set DateTimeOriginal/DateTimeDigitized from the file creation time. "
                        "Needs a filesystem and Python that report birth time "
                        "(macOS, BSD, Windows; Linux only with Python 3.15+ os.statx)")

    p.add_argument("-w", "--workers", type=int, default=None,
                   help="Number of parallel workers (default: one per CPU)")
    p.add_argument("-n", "--dry-run", action="store_true", help="Show the tags without modifying files")
    p.add_argument("--show", action="store_true", help="Print the current Exif tags of each file and exit")
    p.add_argument("--no-progress", action="store_true", help="Disable the progress bar")
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    p.add_argument("--log-file", type=Path, default=None, help="Also write the log to this file")

    return p.parse_args(argv)

def build_request(args) -> MutationRequest:
    return MutationRequest(
        description=args.film,
        iso=args.iso,
        camera=args.camera,
        lens=args.lens,
        focal_length=args.focal_length,
        artist=args.artist,
        clear=args.clear,
        timestamp=args.timestamp,
    )

def show_tags(files) -> int:
    reader = MetadataReader()
    for path in files:
        print(f"== {path}")
        for name, value in sorted(reader.read_tags(path).items()):
            print(f"{name}: {value}")
    return 0

def main(argv=None) -> int:
    args = parse_args(argv)
    setup_logging(args.verbose, args.log_file)

    if args.show:
        if not args.files:
            logging.error("No files were provided")
            return 1
        return show_tags(args.files)

    request = build_request(args)

    try:
        app = FilmTaggerApp(max_workers=args.workers, show_progress=not args.no_progress)
        app.run(args.files, request, dry_run=args.dry_run)
    except InputError as e:
        logging.error(str(e))
        return 1
    except BatchError as e:
        logging.error(f"Failed to tag {e.path}: {e.cause}")
        if e.succeeded:
            logging.info(f"{len(e.succeeded)} files were tagged before the failure.")
        return 1
    except ValueError as e:
        logging.error(str(e))
        return 1
    except KeyboardInterrupt:
        logging.warning("Operation cancelled by user.")
        return 1

    return 0

if __name__ == "__main__":
    sys.exit(main())
