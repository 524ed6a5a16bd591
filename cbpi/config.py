"""Global configuration: thresholds, limits, settings."""

from pathlib import Path

# Version stamped on every persisted analysis
ALGORITHM_VERSION = "1.0.0"

# Default location of the analysis database
DEFAULT_DB_PATH = Path("data") / "analyses.db"

# Safety exits (IT-008): minimum stair/exit width in metres
MIN_EXIT_WIDTH_M = 1.2

# Extinguishers (IT-021): maximum travel distance between units in metres
MAX_EXTINGUISHER_DISTANCE_M = 25

# Emergency lighting (IT-018): minimum autonomy in hours
MIN_LIGHTING_AUTONOMY_H = 1

# Upload limits
MAX_UPLOAD_BYTES = 10 * 1024 * 1024
MIN_BINARY_UPLOAD_BYTES = 1024
SUPPORTED_EXTENSIONS = (".pdf", ".docx", ".txt")
BINARY_EXTENSIONS = (".pdf", ".docx")

# Extracted text shorter than this is rejected before analysis
MIN_TEXT_LENGTH = 100

# Analysis cache lifetime in seconds
CACHE_TTL_SECONDS = 300

# Number of entries returned by store analytics
TOP_ISSUES_LIMIT = 5
