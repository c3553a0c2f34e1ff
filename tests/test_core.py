"""Tests for ffprobe parsing and ffmpeg invocation."""

import io
import json
import threading
import time
from pathlib import Path

import pytest

from batchconv.transcode import core


def _ffprobe_json(streams, size="5000000", duration="10.0"):
    return json.dumps({"format": {"size": size, "duration": duration}, "streams": streams})


def test_probe_file_stats_picks_first_streams(monkeypatch):
    calls = []

    def fake_run_cmd(cmd):
        calls.append(cmd)
        return 0, _ffprobe_json([
            {"codec_type": "audio", "codec_name": "aac", "bit_rate": "128000"},
            {"codec_type": "video", "codec_name": "h264", "bit_rate": "2000000"},
            {"codec_type": "video", "codec_name": "mjpeg"},
            {"codec_type": "audio", "codec_name": "mp3", "bit_rate": "320000"},
        ]), ""

    monkeypatch.setattr(core.system_util, "run_cmd", fake_run_cmd)
    stats = core.probe_file_stats(Path("clip.mp4"))

    assert calls[0][0] == "ffprobe"
    assert calls[0][-1] == "clip.mp4"
    assert stats == core.FileStats(
        size=5_000_000,
        duration=10.0,
        video_codec="h264",
        video_bitrate=2_000_000,
        audio_codec="aac",
        audio_bitrate=128_000,
    )


def test_probe_missing_streams_and_bitrates(monkeypatch):
    monkeypatch.setattr(core.system_util, "run_cmd", lambda cmd: (0, _ffprobe_json(
        [{"codec_type": "audio", "codec_name": "mp3", "bit_rate": "N/A"}], duration="N/A"), ""))

    stats = core.probe_file_stats(Path("song.mp3"))

    assert not stats.has_video
    assert stats.video_bitrate is None
    assert stats.has_audio
    assert stats.audio_codec == "mp3"
    assert stats.audio_bitrate is None
    assert stats.duration is None


def test_probe_failure_carries_stderr(monkeypatch):
    monkeypatch.setattr(core.system_util, "run_cmd",
                        lambda cmd: (1, "", "broken.mkv: Invalid data found when processing input\n"))

    with pytest.raises(core.ProbeError) as excinfo:
        core.probe_file_stats(Path("broken.mkv"))
    assert excinfo.value.message == "broken.mkv: Invalid data found when processing input"
    assert excinfo.value.path == Path("broken.mkv")


def test_probe_invalid_json(monkeypatch):
    monkeypatch.setattr(core.system_util, "run_cmd", lambda cmd: (0, "not json", ""))
    with pytest.raises(core.ProbeError):
        core.probe_file_stats(Path("x.mp4"))


def test_probe_missing_binary(monkeypatch):
    def fake_run_cmd(cmd):
        raise FileNotFoundError(2, "No such file or directory", "ffprobe")

    monkeypatch.setattr(core.system_util, "run_cmd", fake_run_cmd)
    with pytest.raises(core.ProbeError):
        core.probe_file_stats(Path("x.mp4"))


def test_build_ffmpeg_cmd_places_preset_args_between_input_and_output():
    args = ("-vn", "-c:a", "libmp3lame", "-q:a", "2")
    cmd = core.build_ffmpeg_cmd(Path("input/clip.mp4"), Path("output/clip.mp3"), args)

    assert cmd[0] == "ffmpeg"
    assert "-y" in cmd
    i = cmd.index("-i")
    assert cmd[i + 1] == str(Path("input/clip.mp4"))
    assert tuple(cmd[i + 2:i + 7]) == args
    assert cmd[-1] == str(Path("output/clip.mp3"))


@pytest.mark.parametrize("line, expected", [
    ("out_time_us=2500000\n", 2.5),
    ("out_time_ms=1000000\n", 1.0),
    ("out_time=00:01:02.500000\n", 62.5),
    ("out_time=N/A\n", None),
    ("frame=10\n", None),
    ("progress=end\n", None),
])
def test_parse_progress_seconds(line, expected):
    assert core.parse_progress_seconds(line) == expected


class FakePopen:
    """Stands in for subprocess.Popen with canned stdout/stderr."""

    def __init__(self, stdout_text="", stderr_text="", returncode=0):
        self.stdout_text = stdout_text
        self.stderr_text = stderr_text
        self.returncode = returncode
        self.cmd = None
        self.killed = False

    def __call__(self, cmd, stdout, stderr, text):
        self.cmd = cmd
        self.stdout = io.StringIO(self.stdout_text)
        self.stderr = io.StringIO(self.stderr_text)
        return self

    def wait(self):
        return self.returncode

    def kill(self):
        self.killed = True


def test_transcode_video_reports_start_and_progress(monkeypatch):
    fake = FakePopen(stdout_text="out_time_us=5000000\nout_time_us=10000000\nprogress=end\n")
    monkeypatch.setattr(core.subprocess, "Popen", fake)
    started, progress = [], []

    core.transcode_video(Path("a.mp4"), Path("b.mp4"), ("-c:v", "libx264"), duration=10.0,
                         on_start=started.append, on_progress=progress.append)

    assert len(started) == 1
    assert started[0].startswith("ffmpeg ")
    assert "libx264" in started[0]
    assert progress == [50.0, 100.0]
    assert fake.cmd[-1] == "b.mp4"


def test_transcode_video_without_duration_skips_progress(monkeypatch):
    monkeypatch.setattr(core.subprocess, "Popen", FakePopen(stdout_text="out_time_us=5000000\n"))
    progress = []

    core.transcode_video(Path("a.mp4"), Path("b.mp4"), (), duration=None, on_progress=progress.append)

    assert progress == []


def test_transcode_video_failure_raises_with_stderr(monkeypatch):
    monkeypatch.setattr(core.subprocess, "Popen",
                        FakePopen(stderr_text="Unknown encoder 'libxvid'\n", returncode=1))

    with pytest.raises(core.ConversionError) as excinfo:
        core.transcode_video(Path("a.mp4"), Path("b.avi"), ("-c:v", "libxvid"))
    assert excinfo.value.message == "Unknown encoder 'libxvid'"


def test_transcode_video_failure_without_stderr(monkeypatch):
    monkeypatch.setattr(core.subprocess, "Popen", FakePopen(returncode=69))

    with pytest.raises(core.ConversionError, match="exit code 69"):
        core.transcode_video(Path("a.mp4"), Path("b.mp4"), ())


def test_transcode_video_missing_ffmpeg(monkeypatch):
    def fake_popen(*args, **kwargs):
        raise FileNotFoundError(2, "No such file or directory", "ffmpeg")

    monkeypatch.setattr(core.subprocess, "Popen", fake_popen)
    with pytest.raises(core.ConversionError, match="could not start ffmpeg"):
        core.transcode_video(Path("a.mp4"), Path("b.mp4"), ())


class HangingPopen(FakePopen):
    """A process whose stdout stays open until it is killed."""

    def __call__(self, cmd, stdout, stderr, text):
        self.cmd = cmd
        self._killed = threading.Event()
        self.stdout = self._lines()
        self.stderr = io.StringIO("")
        return self

    def _lines(self):
        yield "out_time_us=1000000\n"
        self._killed.wait(5)

    def wait(self):
        return -9 if self.killed else 0

    def kill(self):
        self.killed = True
        self._killed.set()


def test_transcode_video_timeout_kills_ffmpeg(monkeypatch):
    fake = HangingPopen()
    monkeypatch.setattr(core.subprocess, "Popen", fake)

    with pytest.raises(core.ConversionError, match="timed out after 0.1 seconds"):
        core.transcode_video(Path("a.mp4"), Path("b.mp4"), (), timeout=0.1)
    assert fake.killed


class SlowExitPopen(FakePopen):
    """Exits successfully, but only after the timeout has already fired."""

    def wait(self):
        time.sleep(0.3)
        return 0


def test_transcode_video_success_wins_over_late_timeout(monkeypatch):
    fake = SlowExitPopen()
    monkeypatch.setattr(core.subprocess, "Popen", fake)

    core.transcode_video(Path("a.mp4"), Path("b.mp4"), (), timeout=0.05)

    assert fake.killed
