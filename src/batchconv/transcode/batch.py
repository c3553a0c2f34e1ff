"""
This module provides the sequential batch conversion run.

The converter resolves the requested preset, prepares the input/output folders,
discovers candidate video files and processes them one at a time: probe the
source, convert with ffmpeg, time the conversion, probe the result, and log
each step. Per-file failures are recorded and the run moves on to the next
file; only an unknown preset or an unusable folder aborts the run.
"""
import sys
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Callable, List, Optional

from tqdm import tqdm

from batchconv.presets import Preset, UnknownPresetError
from batchconv.utils import STATUS_FAIL, STATUS_OK, STATUS_SKIP, file_util, time_util
from batchconv.utils.config import Config
from batchconv.utils.file_util import DirectoryError
from batchconv.utils.format_util import format_bytes, format_percent, format_stream, size_change_percent
from batchconv.utils.logger import RunLogger, printable
from . import core
from .core import ConversionError, FileStats, ProbeError, TargetProbeError


class JobOutcome(Enum):
    PENDING = "pending"
    SUCCESS = "success"
    PROBE_FAILED = "probe_failed"
    CONVERSION_FAILED = "conversion_failed"

    @property
    def status(self) -> str:
        if self is JobOutcome.SUCCESS:
            return STATUS_OK
        if self is JobOutcome.PROBE_FAILED:
            return STATUS_SKIP
        return STATUS_FAIL


@dataclass
class ConversionJob:
    """One candidate file and everything learned about it during the run."""
    source_name: str
    input_path: Path
    output_path: Path
    outcome: JobOutcome = JobOutcome.PENDING
    source_stats: Optional[FileStats] = None
    target_stats: Optional[FileStats] = None
    started_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None
    error: Optional[str] = None

    @property
    def elapsed_seconds(self) -> Optional[float]:
        if self.started_at is None or self.finished_at is None:
            return None
        return time_util.elapsed_seconds(self.started_at, self.finished_at)

    @property
    def succeeded(self) -> bool:
        return self.outcome is JobOutcome.SUCCESS

    @property
    def failed(self) -> bool:
        return self.outcome in (JobOutcome.PROBE_FAILED, JobOutcome.CONVERSION_FAILED)


@dataclass
class RunSummary:
    preset_name: str
    log_file: Path
    jobs: List[ConversionJob] = field(default_factory=list)
    aborted: Optional[str] = None

    @property
    def success_count(self) -> int:
        return sum(1 for j in self.jobs if j.succeeded)

    @property
    def failed_count(self) -> int:
        return sum(1 for j in self.jobs if j.failed)

    @property
    def total(self) -> int:
        return len(self.jobs)


Prober = Callable[[Path], FileStats]
Transcoder = Callable[..., None]


class BatchConverter:
    """Sequential conversion of every video file in the input folder with one preset."""

    def __init__(self, config: Config, logger: Optional[RunLogger] = None,
                 prober: Prober = core.probe_file_stats,
                 transcoder: Transcoder = core.transcode_video,
                 clock: Callable[[], datetime] = time_util.utc_now,
                 show_progress: bool = True):
        """
        Args:
            config: Folders, log file, preset registry and timeout for the run
            logger: Run logger (defaults to one writing to config.log_file)
            prober: Returns FileStats for a path, raising ProbeError
            transcoder: Converts one file, raising ConversionError (see core.transcode_video)
            clock: Source of start/end timestamps
            show_progress: Draw a tqdm progress bar while ffmpeg runs
        """
        self.config = config
        self.logger = logger or RunLogger(config.log_file)
        self.prober = prober
        self.transcoder = transcoder
        self.clock = clock
        self.show_progress = show_progress

    def run(self, preset_name: str) -> RunSummary:
        """Run the whole batch and return the per-file outcomes."""
        summary = RunSummary(preset_name=preset_name, log_file=self.config.log_file)
        log = self.logger.log

        try:
            preset = self.config.presets.require(preset_name)
        except UnknownPresetError as e:
            log(f'❌ Error: Preset "{e.name}" not found.')
            log(f"Available presets: {', '.join(e.available)}")
            summary.aborted = str(e)
            return summary

        log(f"🚀 Starting conversion session with preset: {preset.name}")

        try:
            file_util.ensure_directories(self.config.input_dir, self.config.output_dir)
            files = file_util.list_video_files(self.config.input_dir)
        except DirectoryError as e:
            log(f"❌ Critical error reading/creating directories: {e}")
            summary.aborted = str(e)
            return summary

        if not files:
            log(f"🟡 No video files found in {self.config.input_dir} folder.")
            return summary

        log(f"Found {len(files)} video files. Starting sequential processing...")

        for index, src in enumerate(files, start=1):
            job = ConversionJob(
                source_name=src.name,
                input_path=src,
                output_path=file_util.output_path_for(src, self.config.output_dir, preset.output_extension),
            )
            summary.jobs.append(job)

            log(f"\n--- [{index}/{len(files)}] Starting processing: {job.source_name} ---")
            outcome = self.process_file(job, preset)

            if outcome is JobOutcome.PROBE_FAILED:
                log(f"--- Skipping file: {job.source_name} ---")
                continue
            if outcome is JobOutcome.CONVERSION_FAILED:
                log(f"  ❌ [{job.source_name}]: FAILED. Error: {job.error}")
            elif outcome is JobOutcome.SUCCESS:
                self._report_target(job)
            log(f"--- Finished: {job.source_name} ---")

        self._log_summary(summary)
        return summary

    def process_file(self, job: ConversionJob, preset: Preset) -> JobOutcome:
        """
        Probe the source and convert it, recording the outcome on the job.

        Returns PROBE_FAILED without touching ffmpeg when the source cannot be
        probed, CONVERSION_FAILED when ffmpeg fails, SUCCESS otherwise.
        """
        log = self.logger.log

        try:
            job.source_stats = self.prober(job.input_path)
        except ProbeError as e:
            job.error = e.message
            job.outcome = JobOutcome.PROBE_FAILED
            log(f"❌ Error getting stats (ffprobe) for {job.source_name}: {e.message}")
            return job.outcome

        self._log_stats("Source Stats", job.source_stats)

        job.started_at = self.clock()
        log(f"  Start Time: {time_util.iso_timestamp(job.started_at)}")

        progress_bar = None

        def on_start(command: str) -> None:
            self.logger.console(f"[{job.source_name}] FFmpeg command: {command}")

        def on_progress(percent: float) -> None:
            nonlocal progress_bar
            if not self.show_progress:
                return
            if progress_bar is None:
                desc = printable(f"[{job.source_name}] ⏳ Processing", sys.stderr)
                progress_bar = tqdm(total=100, desc=desc, unit="%",
                                    leave=False, bar_format="{desc}: {percentage:3.2f}% complete|{bar}| {elapsed}")
            progress_bar.n = round(percent, 2)
            progress_bar.refresh()

        try:
            self.transcoder(
                job.input_path,
                job.output_path,
                preset.args,
                duration=job.source_stats.duration,
                on_start=on_start,
                on_progress=on_progress,
                timeout=self.config.timeout,
            )
            job.outcome = JobOutcome.SUCCESS
        except ConversionError as e:
            job.error = e.message
            job.outcome = JobOutcome.CONVERSION_FAILED
        finally:
            if progress_bar is not None:
                progress_bar.close()
            job.finished_at = self.clock()

        log(f"  End Time: {time_util.iso_timestamp(job.finished_at)}")
        log(f"  Duration: {job.elapsed_seconds:.2f} seconds")
        return job.outcome

    def probe_target(self, job: ConversionJob) -> FileStats:
        try:
            return self.prober(job.output_path)
        except ProbeError as e:
            raise TargetProbeError(job.output_path, e.message) from e

    def _report_target(self, job: ConversionJob) -> None:
        """Log target stats and size change; a failed probe here never changes the job outcome."""
        log = self.logger.log
        try:
            job.target_stats = self.probe_target(job)
        except TargetProbeError as e:
            log(f"  ⚠️ [{job.source_name}]: SUCCESS, but failed to get target stats: {e.message}")
            return

        self._log_stats("Target Stats", job.target_stats)
        source_size = job.source_stats.size if job.source_stats else None
        change = size_change_percent(source_size, job.target_stats.size)
        log(f"    Size Change: {format_percent(change)} "
            f"(from {format_bytes(source_size)} to {format_bytes(job.target_stats.size)})")
        log(f"  ✅ [{job.source_name}]: SUCCESS -> {job.output_path.name}")

    def _log_stats(self, title: str, stats: FileStats) -> None:
        log = self.logger.log
        log(f"  {title}:")
        log(f"    File Size: {format_bytes(stats.size)}")
        log(f"    Video: {format_stream(stats.video_codec, stats.video_bitrate)}")
        log(f"    Audio: {format_stream(stats.audio_codec, stats.audio_bitrate)}")

    def _log_summary(self, summary: RunSummary) -> None:
        log = self.logger.log
        log("\n--- 🏁 Conversion session finished ---")
        for job in summary.jobs:
            if job.succeeded:
                log(f"[{job.outcome.status}] {job.source_name} -> {job.output_path.name}")
            else:
                log(f"[{job.outcome.status}] {job.source_name}")
        log(f"Successful: {summary.success_count}")
        log(f"Failed / Skipped: {summary.failed_count}")
        log(f"All logs saved to: {summary.log_file}")
