"""
Configuration constants for the photo importer.
"""

# --- Import Filter ---
DEFAULT_EXTENSION = '.jpg'

# --- Metadata Parsing ---
DATE_TAGS = [
    'EXIF DateTimeOriginal',
    'EXIF DateTimeDigitized',
    'Image DateTime',
]

# Files with these extensions are probed with MediaInfo instead of EXIF
VIDEO_EXTS = {'.mp4', '.mov', '.m4v', '.avi', '.mts', '.m2ts', '.3gp', '.mpg', '.mpeg', '.tod'}

# --- Hashing ---
HASH_CHUNK_SIZE = 64 * 1024  # 64 KB chunks for reading

# --- Placement ---
FOLDER_PATTERN = "{year}/{year}-{month:02d}"
# Bucket for files without any usable date
UNDATED_FOLDER = "undated"

# --- Collisions ---
COLLISION_PATTERN = "{stem}_{counter}{ext}"
MAX_COLLISION_ATTEMPTS = 10_000

# --- Target Root Layout ---
STORE_FILENAME = "imported_files.db"
LOG_FILENAME = "importer.log"


def normalize_extension(ext: str) -> str:
    """'JPG', 'jpg' and '.jpg' all become '.jpg'."""
    clean = (ext or "").strip().lower()
    if not clean or clean == ".":
        raise ValueError("An import extension is required (e.g. '.jpg').")
    if not clean.startswith("."):
        clean = "." + clean
    return clean
