"""
Human-readable formatting for file sizes, bitrates, and size deltas.

All helpers accept the loosely typed values ffprobe reports (ints, numeric
strings, "N/A" or None) and never raise on missing data.
"""
import math
from typing import Optional, Union

from batchconv.utils.constants import LABEL_NOT_APPLICABLE, LABEL_UNKNOWN, LABEL_ZERO_BYTES

_SIZE_UNITS = ["Bytes", "KB", "MB", "GB", "TB"]

Number = Union[int, float, str, None]


def to_number(value: Number) -> Optional[float]:
    """Coerce an ffprobe field to a finite float, or None if it is missing or not numeric."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def format_bytes(size: Number) -> str:
    """
    Format a byte count using binary (1024) units.

    Zero, missing, or non-numeric sizes all render as "0 Bytes".
    Examples: 512 -> "512 Bytes", 1536 -> "1.50 KB".
    """
    number = to_number(size)
    if not number or number < 0:
        return LABEL_ZERO_BYTES

    index = 0
    while number >= 1024 and index < len(_SIZE_UNITS) - 1:
        number /= 1024
        index += 1
    if index == 0:
        return f"{int(number)} {_SIZE_UNITS[0]}"
    return f"{number:.2f} {_SIZE_UNITS[index]}"


def format_bitrate(bitrate: Number) -> str:
    """Format bits per second as kb/s, e.g. 128000 -> "128 kb/s"; missing values render as "unknown"."""
    number = to_number(bitrate)
    if number is None:
        return LABEL_UNKNOWN
    return f"{number / 1000:.0f} kb/s"


def format_stream(codec: Optional[str], bitrate: Number) -> str:
    """Render a stream as "<codec> @ <bitrate>", or "N/A" when the stream is absent."""
    if codec is None:
        return LABEL_NOT_APPLICABLE
    return f"{codec} @ {format_bitrate(bitrate)}"


def size_change_percent(source_size: Number, target_size: Number) -> Optional[float]:
    """
    Return (target - source) / source * 100, or None when it cannot be computed.

    A zero or unknown source size, or an unknown target size, yields None
    rather than a division error, NaN or infinity.
    """
    source = to_number(source_size)
    target = to_number(target_size)
    if not source or target is None:
        return None
    return (target - source) / source * 100


def format_percent(percent: Optional[float]) -> str:
    if percent is None:
        return LABEL_UNKNOWN
    return f"{percent:.2f}%"
