"""Run configuration resolved once per process."""
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from batchconv.presets import DEFAULT_PRESETS, PresetRegistry
from batchconv.utils.constants import ENV_BASE_DIR, ENV_TIMEOUT, INPUT_FOLDER, OUTPUT_FOLDER
from batchconv.utils.time_util import log_file_for, utc_now


def _parse_timeout(raw: Optional[str]) -> Optional[float]:
    """Seconds as float; unset, empty, zero, negative or invalid values disable the timeout."""
    if not raw:
        return None
    try:
        value = float(raw)
    except ValueError:
        return None
    return value if value > 0 else None


@dataclass(frozen=True)
class Config:
    input_dir: Path
    output_dir: Path
    log_file: Path
    presets: PresetRegistry = DEFAULT_PRESETS
    timeout: Optional[float] = None

    @classmethod
    def for_base_dir(cls, base_dir: Path, presets: PresetRegistry = DEFAULT_PRESETS,
                     timeout: Optional[float] = None) -> "Config":
        """Build the standard layout (input/, output/, process_YYYY_MM_DD.log) under `base_dir`."""
        base_dir = Path(base_dir)
        return cls(
            input_dir=base_dir / INPUT_FOLDER,
            output_dir=base_dir / OUTPUT_FOLDER,
            log_file=log_file_for(base_dir, utc_now()),
            presets=presets,
            timeout=timeout,
        )

    @classmethod
    def from_env(cls, base_dir: Optional[Path] = None) -> "Config":
        """
        Resolve configuration from the environment (and a `.env` file, if any).

        BATCHCONV_BASE_DIR overrides the base directory (default: current directory).
        BATCHCONV_TIMEOUT sets a per-file ffmpeg timeout in seconds.
        """
        if base_dir is None:
            base_dir = Path(os.getenv(ENV_BASE_DIR) or ".")
        return cls.for_base_dir(
            Path(base_dir).expanduser().resolve(),
            timeout=_parse_timeout(os.getenv(ENV_TIMEOUT)),
        )
