from datetime import datetime, timezone
from pathlib import Path

from batchconv.utils.constants import LOG_DATE_FORMAT, LOG_FILE_PREFIX, LOG_FILE_SUFFIX


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def iso_timestamp(moment: datetime) -> str:
    """Render a timestamp as ISO 8601 UTC with millisecond precision, e.g. 2024-05-01T12:00:00.000Z."""
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def log_file_for(base_dir: Path, moment: datetime) -> Path:
    date_str = moment.astimezone(timezone.utc).strftime(LOG_DATE_FORMAT)
    return base_dir / f"{LOG_FILE_PREFIX}{date_str}{LOG_FILE_SUFFIX}"


def elapsed_seconds(start: datetime, end: datetime) -> float:
    return (end - start).total_seconds()
