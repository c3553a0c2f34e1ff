"""Video conversion functionality for batch preset runs.

This package provides two levels of functionality:
- core: Low-level FFmpeg utilities (FileStats, probing, command building, conversion)
- batch: High-level sequential orchestration (job records, run summary, BatchConverter)
"""

from .core import (
    ConversionError,
    FileStats,
    ProbeError,
    TargetProbeError,
    build_ffmpeg_cmd,
    probe_file_stats,
    transcode_video,
)
from .batch import (
    BatchConverter,
    ConversionJob,
    JobOutcome,
    RunSummary,
)

__all__ = [
    # File stats
    "FileStats",
    "probe_file_stats",
    # Transcoding
    "build_ffmpeg_cmd",
    "transcode_video",
    # Orchestration
    "BatchConverter",
    "ConversionJob",
    "JobOutcome",
    "RunSummary",
    # Errors
    "ProbeError",
    "TargetProbeError",
    "ConversionError",
]
