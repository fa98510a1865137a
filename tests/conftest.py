import pytest
import piexif
from PIL import Image

from film_tagger.metadata.codec import PiexifCodec


@pytest.fixture
def make_jpeg(tmp_path):
    """Returns a factory that writes a small JPEG, optionally with EXIF."""
    def _make(name="scan.jpg", exif=None):
        path = tmp_path / name
        with Image.new("RGB", (16, 16), color="gray") as im:
            if exif:
                im.save(path, "JPEG", exif=piexif.dump(exif))
            else:
                im.save(path, "JPEG")
        return path
    return _make


@pytest.fixture
def scanner_exif():
    """EXIF as a film scanner might leave it."""
    return {
        "0th": {
            piexif.ImageIFD.Make: b"Epson",
            piexif.ImageIFD.Software: b"EpsonScan 2",
        },
        "Exif": {
            piexif.ExifIFD.ISOSpeedRatings: 100,
        },
    }


@pytest.fixture
def make_png(tmp_path):
    def _make(name="scan.png"):
        path = tmp_path / name
        with Image.new("RGB", (16, 16), color="gray") as im:
            im.save(path, "PNG")
        return path
    return _make


@pytest.fixture
def codec():
    return PiexifCodec()
