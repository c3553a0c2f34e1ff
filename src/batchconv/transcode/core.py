"""
Functions to gather file statistics with ffprobe and run ffmpeg conversions.

This module extracts container and stream details (size, duration, first video
and audio stream codec/bitrate) from a media file, builds ffmpeg command lines
from a preset's output arguments, and runs ffmpeg with start/progress callbacks
so the caller can report live progress while blocking until the conversion
finishes.
"""
import json
import shlex
import subprocess
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional, Sequence

from batchconv import BatchConvError
from batchconv.utils import system_util
from batchconv.utils.format_util import to_number


class ProbeError(BatchConvError):
    """Raised when ffprobe cannot read or parse a file."""

    def __init__(self, path: Path, message: str):
        super().__init__(f"ffprobe error for {path}: {message}")
        self.path = path
        self.message = message


class TargetProbeError(ProbeError):
    """Raised when a freshly converted output file cannot be probed."""

    pass


class ConversionError(BatchConvError):
    """Raised when ffmpeg reports a failure while converting a file."""

    def __init__(self, path: Path, message: str):
        super().__init__(message)
        self.path = path
        self.message = message


@dataclass
class FileStats:
    """
    Normalized ffprobe result.

    A codec of None means the file has no stream of that type; a bitrate of
    None on an existing stream means the container does not report it.
    """
    size: Optional[int] = None
    duration: Optional[float] = None
    video_codec: Optional[str] = None
    video_bitrate: Optional[int] = None
    audio_codec: Optional[str] = None
    audio_bitrate: Optional[int] = None

    @property
    def has_video(self) -> bool:
        return self.video_codec is not None

    @property
    def has_audio(self) -> bool:
        return self.audio_codec is not None


def _to_int(value) -> Optional[int]:
    number = to_number(value)
    return int(number) if number is not None else None


def _first_stream(streams: List[dict], codec_type: str) -> Optional[dict]:
    for s in streams:
        if s.get("codec_type") == codec_type:
            return s
    return None


def parse_ffprobe_output(data: dict) -> FileStats:
    """Build FileStats from `ffprobe -show_format -show_streams` JSON."""
    fmt = data.get("format") or {}
    streams = data.get("streams") or []
    video = _first_stream(streams, "video")
    audio = _first_stream(streams, "audio")

    return FileStats(
        size=_to_int(fmt.get("size")),
        duration=to_number(fmt.get("duration")),
        video_codec=(video.get("codec_name") or "unknown") if video else None,
        video_bitrate=_to_int(video.get("bit_rate")) if video else None,
        audio_codec=(audio.get("codec_name") or "unknown") if audio else None,
        audio_bitrate=_to_int(audio.get("bit_rate")) if audio else None,
    )


def probe_file_stats(path: Path) -> FileStats:
    """Probe a media file for size, duration, and first video/audio stream details."""
    cmd = [
        "ffprobe", "-v", "error",
        "-print_format", "json",
        "-show_format",
        "-show_streams",
        str(path)
    ]
    try:
        code, out, err = system_util.run_cmd(cmd)
    except OSError as e:
        raise ProbeError(path, str(e)) from e
    if code != 0:
        raise ProbeError(path, err.strip() or f"exit code {code}")
    try:
        data = json.loads(out)
    except ValueError as e:
        raise ProbeError(path, f"invalid ffprobe output: {e}") from e
    if not isinstance(data, dict):
        raise ProbeError(path, "invalid ffprobe output")
    return parse_ffprobe_output(data)


def build_ffmpeg_cmd(src: Path, dst: Path, args: Sequence[str]) -> List[str]:
    """Build the ffmpeg command: input, preset output arguments, output (overwritten)."""
    return [
        "ffmpeg",
        "-hide_banner",
        "-nostdin",
        "-y",
        "-loglevel", "error",
        "-progress", "pipe:1",
        "-nostats",
        "-i", str(src),
        *args,
        str(dst),
    ]


def parse_progress_seconds(line: str) -> Optional[float]:
    """
    Extract the encoded position in seconds from one `-progress` line.

    Handles out_time_us / out_time_ms (both microseconds) and out_time (HH:MM:SS.micro).
    """
    key, sep, value = line.strip().partition("=")
    if not sep or value in ("", "N/A"):
        return None
    try:
        if key in ("out_time_us", "out_time_ms"):
            return int(value) / 1_000_000
        if key == "out_time":
            parts = value.split(":")
            if len(parts) != 3:
                return None
            return float(parts[0]) * 3600 + float(parts[1]) * 60 + float(parts[2])
    except ValueError:
        return None
    return None


def transcode_video(src: Path, dst: Path, args: Sequence[str],
                    duration: Optional[float] = None,
                    on_start: Optional[Callable[[str], None]] = None,
                    on_progress: Optional[Callable[[float], None]] = None,
                    timeout: Optional[float] = None) -> None:
    """
    Convert `src` into `dst` with ffmpeg, blocking until ffmpeg exits.

    Args:
        src: Source video file path
        dst: Destination file path (overwritten if it exists)
        args: Preset output arguments placed between input and output
        duration: Source duration in seconds, needed to report percentages
        on_start: Called once with the shell-quoted command line
        on_progress: Called with percent complete (0-100) as ffmpeg reports progress
        timeout: Kill ffmpeg after this many seconds (None waits forever)

    Raises:
        ConversionError: ffmpeg could not be started, exited non-zero, or timed out
    """
    cmd = build_ffmpeg_cmd(src, dst, args)
    try:
        process = subprocess.Popen(
            cmd,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True
        )
    except OSError as e:
        raise ConversionError(src, f"could not start ffmpeg: {e}") from e

    if on_start:
        on_start(shlex.join(cmd))

    # Drain stderr separately so a chatty ffmpeg cannot block the progress pipe
    stderr_output: List[str] = []
    stderr_reader = threading.Thread(target=lambda: stderr_output.extend(process.stderr), daemon=True)
    stderr_reader.start()

    timed_out = threading.Event()

    def _kill():
        timed_out.set()
        process.kill()

    timer = threading.Timer(timeout, _kill) if timeout else None
    if timer:
        timer.daemon = True
        timer.start()

    try:
        for line in process.stdout:
            if not on_progress or not duration:
                continue
            seconds = parse_progress_seconds(line)
            if seconds is not None:
                on_progress(min(100.0, max(0.0, seconds / duration * 100)))
        code = process.wait()
    finally:
        if timer:
            timer.cancel()
        stderr_reader.join()

    if code == 0:
        return
    if timed_out.is_set():
        raise ConversionError(src, f"ffmpeg timed out after {timeout:g} seconds")
    stderr_text = "".join(stderr_output).strip()
    raise ConversionError(src, stderr_text or f"ffmpeg exit code {code}")
