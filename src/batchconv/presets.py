"""
Named conversion presets.

A preset bundles the ffmpeg output arguments for one kind of conversion with
the extension of the file it produces. Presets are plain data: adding one is
an edit to DEFAULT_PRESETS, not a runtime operation.
"""
from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from batchconv import BatchConvError


class UnknownPresetError(BatchConvError):
    """Raised when a preset name is not in the registry."""

    def __init__(self, name: str, available: List[str]):
        super().__init__(f'Preset "{name}" not found. Available presets: {", ".join(available)}')
        self.name = name
        self.available = available


@dataclass(frozen=True)
class Preset:
    name: str
    args: Tuple[str, ...]
    output_extension: str


class PresetRegistry:
    """Read-only, insertion-ordered mapping of preset name to Preset."""

    def __init__(self, presets: Iterable[Preset]):
        self._presets: Dict[str, Preset] = {}
        for preset in presets:
            if preset.name in self._presets:
                raise ValueError(f"Duplicate preset name: {preset.name}")
            self._presets[preset.name] = preset

    def lookup(self, name: str) -> Optional[Preset]:
        return self._presets.get(name)

    def require(self, name: str) -> Preset:
        preset = self.lookup(name)
        if preset is None:
            raise UnknownPresetError(name, self.names())
        return preset

    def names(self) -> List[str]:
        return list(self._presets)

    def __contains__(self, name: object) -> bool:
        return name in self._presets

    def __iter__(self) -> Iterator[Preset]:
        return iter(self._presets.values())

    def __len__(self) -> int:
        return len(self._presets)


DEFAULT_PRESETS = PresetRegistry([
    # Half resolution, H.264 + AAC
    Preset(
        name="conv0_5",
        args=(
            "-vf", "scale=iw*0.5:ih*0.5",
            "-c:v", "libx264",
            "-crf", "28",
            "-c:a", "aac",
            "-b:a", "128k",
        ),
        output_extension=".mp4",
    ),
    # Quarter resolution, Xvid + MP3 (packed into AVI)
    Preset(
        name="conv0_25s",
        args=(
            "-vf", "scale=iw*0.25:ih*0.25",
            "-c:v", "libxvid",
            "-q:v", "5",
            "-c:a", "libmp3lame",
            "-b:a", "128k",
        ),
        output_extension=".avi",
    ),
    # 256 px high (width keeps aspect, even), Xvid + MP3 with doubled volume
    Preset(
        name="conv256s",
        args=(
            "-vf", "scale=-2:256",
            "-af", "volume=2.0",
            "-c:v", "libxvid",
            "-q:v", "5",
            "-c:a", "libmp3lame",
            "-b:a", "192k",
        ),
        output_extension=".avi",
    ),
    # Web playback: H.264 + AAC with the moov atom up front
    Preset(
        name="web_h264",
        args=(
            "-c:v", "libx264",
            "-crf", "23",
            "-preset", "medium",
            "-c:a", "aac",
            "-b:a", "160k",
            "-movflags", "+faststart",
        ),
        output_extension=".mp4",
    ),
    Preset(
        name="extract_audio",
        args=(
            "-vn",
            "-c:a", "libmp3lame",
            "-q:a", "2",
        ),
        output_extension=".mp3",
    ),
])
