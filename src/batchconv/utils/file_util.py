"""
Filesystem helpers for the conversion run.

This module creates the input/output folders, lists conversion candidates by
extension, and derives output paths from the active preset's extension.
"""
from pathlib import Path
from typing import List

from batchconv import BatchConvError
from batchconv.utils.constants import VIDEO_EXTENSIONS


class DirectoryError(BatchConvError):
    """Raised when the input or output folder cannot be created or listed."""

    def __init__(self, path: Path, message: str):
        super().__init__(f"{path}: {message}")
        self.path = path


def ensure_directories(*directories: Path) -> None:
    """Create each directory (and parents) if missing."""
    for directory in directories:
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise DirectoryError(directory, e.strerror or str(e)) from e


def is_video_file(name: str) -> bool:
    return Path(name).suffix.lower() in VIDEO_EXTENSIONS


def list_video_files(root: Path) -> List[Path]:
    """
    Return the video files directly inside `root`, sorted by name.

    Only regular files whose lowercased extension is a known video extension
    are returned; subfolders are not searched.
    """
    try:
        entries = sorted(root.iterdir(), key=lambda p: p.name)
    except OSError as e:
        raise DirectoryError(root, e.strerror or str(e)) from e
    return [p for p in entries if p.is_file() and is_video_file(p.name)]


def output_path_for(src: Path, out_root: Path, output_extension: str) -> Path:
    """Output path is the source stem plus the preset's extension, regardless of the source extension."""
    return out_root / f"{src.stem}{output_extension}"
