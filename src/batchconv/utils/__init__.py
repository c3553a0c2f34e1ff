"""
A module providing constants, configuration, formatting helpers, and logging
for batch conversion runs.

This module includes the accepted video extensions and folder conventions,
utility functions for system operations such as command execution, file and
formatting helpers, and a run logger that mirrors messages to the console and
a dated log file.
"""

from .constants import (
    ENV_BASE_DIR,
    ENV_TIMEOUT,
    INPUT_FOLDER,
    LABEL_NOT_APPLICABLE,
    LABEL_UNKNOWN,
    LABEL_ZERO_BYTES,
    OUTPUT_FOLDER,
    STATUS_FAIL,
    STATUS_OK,
    STATUS_SKIP,
    VIDEO_EXTENSIONS,
)

__all__ = [
    "ENV_BASE_DIR",
    "ENV_TIMEOUT",
    "INPUT_FOLDER",
    "OUTPUT_FOLDER",
    "VIDEO_EXTENSIONS",
    "LABEL_NOT_APPLICABLE",
    "LABEL_UNKNOWN",
    "LABEL_ZERO_BYTES",
    "STATUS_OK",
    "STATUS_FAIL",
    "STATUS_SKIP",
]
