"""
Constants and configuration defaults for batch conversion.

This module contains the accepted video file extensions, folder and log file
naming conventions, display labels used when metadata is missing, and job
status codes. Environment overrides are read from a `.env` file when present.
"""

from dotenv import load_dotenv

load_dotenv()

# Folder name constants (relative to the base directory)
INPUT_FOLDER = "input"
OUTPUT_FOLDER = "output"

# Log file name, one per UTC calendar day
LOG_FILE_PREFIX = "process_"
LOG_FILE_SUFFIX = ".log"
LOG_DATE_FORMAT = "%Y_%m_%d"

# Environment variable names
ENV_BASE_DIR = "BATCHCONV_BASE_DIR"
ENV_TIMEOUT = "BATCHCONV_TIMEOUT"

# Accepted video file extensions (audio-only containers are never candidates)
VIDEO_EXTENSIONS = frozenset({".mp4", ".mkv", ".avi", ".mov", ".flv", ".wmv"})

# Display labels
LABEL_NOT_APPLICABLE = "N/A"
LABEL_UNKNOWN = "unknown"
LABEL_ZERO_BYTES = "0 Bytes"

# Processing status codes
STATUS_OK = "OK"
STATUS_FAIL = "FAIL"
STATUS_SKIP = "SKIP"
