"""
Provides thread-safe console output and the per-run log file.

Console lines are routed through tqdm so an active progress bar is redrawn
below them instead of being overwritten. The run log mirrors every message to
the console verbatim and appends it, prefixed with an ISO 8601 UTC timestamp,
to a dated log file.
"""
import sys
import threading
from datetime import datetime
from pathlib import Path
from typing import Callable

from tqdm import tqdm

from batchconv import BatchConvError
from batchconv.utils.time_util import iso_timestamp, utc_now

_print_lock = threading.Lock()


class LogWriteError(BatchConvError):
    """Raised when a line cannot be appended to the run log file."""

    def __init__(self, log_file: Path, message: str):
        super().__init__(f"failed to write to log file {log_file}: {message}")
        self.log_file = log_file


def printable(text: str, file=None) -> str:
    """Re-encode text so the target stream can always write it (undecodable file names, narrow consoles)."""
    encoding = getattr(file or sys.stdout, "encoding", None) or "utf-8"
    return text.encode(encoding, "backslashreplace").decode(encoding, "replace")


def _write_line(text: str, file=None) -> None:
    try:
        tqdm.write(text, file=file)
    except Exception:
        print(printable(text, file), file=file, flush=True)


def safe_print(*args, **kwargs) -> None:
    """Thread-safe print function."""
    with _print_lock:
        print(*args, **kwargs, flush=True)


class RunLogger:
    """Console + append-only file logger for one conversion run."""

    def __init__(self, log_file: Path, clock: Callable[[], datetime] = utc_now):
        self.log_file = Path(log_file)
        self._clock = clock
        self._file_lock = threading.Lock()
        self._write_error_reported = False

    def log(self, message: str) -> None:
        """
        Write a message to the console and append it to the log file.

        A failing append never interrupts the run: the first LogWriteError is
        reported on stderr and later ones are dropped.
        """
        with _print_lock:
            _write_line(message)
        try:
            self._append(f"{iso_timestamp(self._clock())}: {message}\n")
        except LogWriteError as e:
            self._report_write_error(e)

    def console(self, message: str) -> None:
        """Write a message to the console only."""
        with _print_lock:
            _write_line(message)

    def _append(self, line: str) -> None:
        with self._file_lock:
            try:
                with self.log_file.open("a", encoding="utf-8", errors="backslashreplace") as fh:
                    fh.write(line)
            except (OSError, UnicodeError) as e:
                raise LogWriteError(self.log_file, str(e)) from e

    def _report_write_error(self, error: LogWriteError) -> None:
        if self._write_error_reported:
            return
        self._write_error_reported = True
        safe_print(f"CRITICAL: {error}", file=sys.stderr)
