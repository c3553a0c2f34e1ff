"""
A batch video conversion module built around named ffmpeg presets.

This module scans an input folder for video files, converts each one with a
named preset by invoking ffmpeg, and records progress, timing, and
before/after file statistics (via ffprobe) to the console and to a dated log
file.

The module is organized into several categories:
- Transcoding: preset registry, ffprobe metadata probing, ffmpeg invocation,
  and the sequential batch orchestrator.
- Utilities: constants, configuration, run logging, formatting helpers, and
  filesystem/system helpers.
"""

__version__ = "1.0.0"


class BatchConvError(Exception):
    """Base exception for batch conversion errors."""

    pass


__all__ = ["__version__", "BatchConvError"]
