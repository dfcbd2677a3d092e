"""
Configuration constants for the date organizer.
"""

# --- File Type Definitions ---
RAW_EXTS = {'.cr2', '.cr3', '.nef', '.arw', '.orf', '.rw2', '.dng', '.raf', '.pef', '.srw'}
JPEG_EXTS = {'.jpg', '.jpeg', '.jpe', '.png', '.webp'}
HEIC_EXTS = {'.heic', '.heif'}
TIFF_EXTS = {'.tif', '.tiff'}
VIDEO_EXTS = {'.mp4', '.mov', '.m4v', '.avi', '.mts', '.m2ts', '.3gp', '.mpg', '.mpeg', '.mkv'}

# Default allow-list when nothing is configured
MEDIA_EXTS = frozenset(RAW_EXTS | JPEG_EXTS | HEIC_EXTS | TIFF_EXTS | VIDEO_EXTS)

# Formats exifread can open
EXIF_EXTS = frozenset(RAW_EXTS | JPEG_EXTS | HEIC_EXTS | TIFF_EXTS)

# --- Metadata Parsing ---
DATE_TAG = 'EXIF DateTimeOriginal'
EXIF_DATE_FORMAT = "%Y:%m:%d %H:%M:%S"

# MediaInfo General-track fields, in priority order
VIDEO_DATE_FIELDS = ['recorded_date', 'encoded_date', 'tagged_date']

# --- Organization ---
FOLDER_PATTERN = "{year:04d}/{year:04d}-{month:02d}-{day:02d}"

# --- Throttling ---
# Pause after every N moves so slow (network/removable) storage can keep up
THROTTLE_EVERY = 5
THROTTLE_SECONDS = 0.1

# --- Environment ---
ENV_SOURCE = "PICTURES_FOLDER"
ENV_DESTINATION = "DESTINATION_FOLDER"
ENV_EXTENSIONS = "ALLOWED_EXTENSIONS"
ENV_DRY_RUN = "DRY_RUN"
ENV_VIDEO_METADATA = "VIDEO_METADATA"

TRUTHY = {'1', 'true', 'yes', 'on'}
