#!/usr/bin/env python3
"""Convenience launcher: python convert.py <preset> (requires `pip install -e .`)."""
import sys

from batchconv.cli import main

if __name__ == "__main__":
    sys.exit(main())
