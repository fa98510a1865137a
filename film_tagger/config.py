"""
Configuration constants for the film tagger.
"""

# --- Tag Names ---
# exiv2-style identifiers, the same namespace the tag is documented under.
TAG_DESCRIPTION = 'Exif.Image.ImageDescription'
TAG_MAKE = 'Exif.Image.Make'
TAG_MODEL = 'Exif.Image.Model'
TAG_ARTIST = 'Exif.Image.Artist'
TAG_ISO = 'Exif.Photo.ISOSpeedRatings'
TAG_LENS_MAKE = 'Exif.Photo.LensMake'
TAG_LENS_MODEL = 'Exif.Photo.LensModel'
TAG_FOCAL_LENGTH = 'Exif.Photo.FocalLength'
TAG_DATETIME_ORIGINAL = 'Exif.Photo.DateTimeOriginal'
TAG_DATETIME_DIGITIZED = 'Exif.Photo.DateTimeDigitized'

# Request field -> tag names it writes. No tag appears under two fields.
FIELD_TAGS = {
    'description': (TAG_DESCRIPTION,),
    'iso': (TAG_ISO,),
    'camera': (TAG_MAKE, TAG_MODEL),
    'lens': (TAG_LENS_MAKE, TAG_LENS_MODEL),
    'focal_length': (TAG_FOCAL_LENGTH,),
    'artist': (TAG_ARTIST,),
    'timestamp': (TAG_DATETIME_ORIGINAL, TAG_DATETIME_DIGITIZED),
}

# exiv2 group -> piexif IFD key
IFD_GROUPS = {
    'Image': '0th',
    'Photo': 'Exif',
    'GPSInfo': 'GPS',
    'Iop': 'Interop',
    'Thumbnail': '1st',
}

# --- Timestamps ---
# Written to both DateTimeOriginal and DateTimeDigitized so that sorting by
# capture time follows scan order rather than mtime.
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

# --- Staging ---
# Staging files are hidden siblings of the target: ".<name>.<random>.tmp"
STAGING_SUFFIX = ".tmp"

# --- Workers ---
# None = one worker per available CPU
DEFAULT_MAX_WORKERS = None

# --- Read-back ---
# exifread keys that are binary blobs, not worth printing
SKIP_READ_TAGS = {'JPEGThumbnail', 'TIFFThumbnail', 'EXIF MakerNote'}
