#!/usr/bin/env python3
"""
Command line entry point: convert every video in ./input with one named preset.

Usage: batchconv <preset>
"""
import argparse
import sys
from typing import List, Optional

from batchconv import __version__
from batchconv.presets import DEFAULT_PRESETS
from batchconv.transcode import BatchConverter
from batchconv.utils.config import Config
from batchconv.utils.system_util import REQUIRED_BINARIES, which_or_die


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="batchconv",
        description="Batch convert the video files in ./input into ./output with a named ffmpeg preset.",
        epilog=f"Available presets: {', '.join(DEFAULT_PRESETS.names())}. Example: batchconv web_h264",
    )
    parser.add_argument("preset", nargs="?", help="Name of the preset to apply")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def print_usage(parser: argparse.ArgumentParser) -> None:
    print("Please provide a preset name.")
    print(f"Usage: {parser.prog} web_h264")
    print(f"Available presets: {', '.join(DEFAULT_PRESETS.names())}")


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.preset:
        print_usage(parser)
        return 2

    config = Config.from_env()
    # Unknown presets are reported by the converter itself
    if args.preset in config.presets:
        for binary in REQUIRED_BINARIES:
            which_or_die(binary)

    BatchConverter(config).run(args.preset)
    return 0


if __name__ == "__main__":
    sys.exit(main())
