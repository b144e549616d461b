#!/usr/bin/env python
"""
Run the referral network viewer from a source checkout.

Usage:
    python run.py [--clients clients.json] [--settings settings.json] [--debug]

Unhandled exceptions are appended to crash_log.txt next to this script.
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent / "src"))

CRASH_LOG = Path(__file__).parent / "crash_log.txt"


if __name__ == "__main__":
    from referral_app.__main__ import main

    main(sys.argv[1:] + ["--crash-log", str(CRASH_LOG)])
