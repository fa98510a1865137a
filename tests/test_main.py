import logging
import pytest
import piexif

from film_tagger.main import build_request, main, parse_args
from film_tagger.models import MutationRequest


@pytest.fixture(autouse=True)
def reset_logging():
    """Drops the console/file handlers main() attaches to the root logger."""
    root = logging.getLogger()
    level = root.level
    yield
    for handler in list(root.handlers):
        if type(handler) in (logging.StreamHandler, logging.FileHandler):
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)


def test_build_request_maps_flags(tmp_path):
    args = parse_args([
        str(tmp_path / "a.jpg"),
        "-f", "Kodak Gold 200", "-i", "200", "-c", "Pentax K1000",
        "-l", "SMC Pentax-M", "-F", "50", "-a", "Jane Doe", "--clear", "-t",
    ])
    assert build_request(args) == MutationRequest(
        description="Kodak Gold 200",
        iso=200,
        camera="Pentax K1000",
        lens="SMC Pentax-M",
        focal_length=50,
        artist="Jane Doe",
        clear=True,
        timestamp=True,
    )


def test_no_files_exits_nonzero():
    assert main(["-i", "400", "--no-progress"]) == 1


def test_no_operation_exits_nonzero(make_jpeg):
    assert main([str(make_jpeg()), "--no-progress"]) == 1


def test_successful_run_exits_zero(make_jpeg):
    paths = [make_jpeg("a.jpg"), make_jpeg("b.jpg")]

    code = main([*map(str, paths), "-i", "400", "-c", "Canon AE-1", "--no-progress", "-w", "2"])

    assert code == 0
    for path in paths:
        exif = piexif.load(str(path))
        assert exif["0th"][piexif.ImageIFD.Make] == b"Canon"
        assert exif["Exif"][piexif.ExifIFD.ISOSpeedRatings] == 400


def test_failed_file_exits_nonzero_and_names_path(make_jpeg, make_png, capsys):
    bad = make_png()
    good = make_jpeg()

    code = main([str(good), str(bad), "-i", "400", "--no-progress"])

    assert code == 1
    assert f"[ERROR] Failed to tag {bad}" in capsys.readouterr().out


def test_invalid_worker_count_exits_nonzero(make_jpeg):
    assert main([str(make_jpeg()), "-i", "400", "-w", "0", "--no-progress"]) == 1


def test_show_prints_current_tags(make_jpeg, scanner_exif, capsys):
    path = make_jpeg(exif=scanner_exif)

    assert main(["--show", str(path)]) == 0

    out = capsys.readouterr().out
    assert f"== {path}" in out
    assert "Image Make: Epson" in out


def test_log_file(make_jpeg, tmp_path):
    log_file = tmp_path / "logs" / "tagger.log"

    assert main([str(make_jpeg()), "-i", "400", "--no-progress", "--log-file", str(log_file)]) == 0

    assert "Tagging complete" in log_file.read_text(encoding="utf-8")


def test_show_without_files_exits_nonzero(capsys):
    assert main(["--show"]) == 1
    assert "No files were provided" in capsys.readouterr().out


def test_repeated_runs_do_not_duplicate_handlers(make_jpeg, tmp_path):
    log_file = tmp_path / "tagger.log"
    path = make_jpeg()

    for _ in range(3):
        assert main([str(path), "-i", "400", "--no-progress", "--log-file", str(log_file)]) == 0

    root = logging.getLogger()
    assert sum(type(h) is logging.FileHandler for h in root.handlers) == 1
    assert sum(type(h) is logging.StreamHandler for h in root.handlers) == 1
    assert log_file.read_text(encoding="utf-8").count("Tagging complete") == 3
