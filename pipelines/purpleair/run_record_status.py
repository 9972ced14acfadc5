"""Pipeline for recording the current PurpleAir reading.

Intended to be triggered by an external scheduler (cron or a systemd timer);
each invocation performs one fetch-normalize-write cycle and exits.

Usage:
    python pipelines/purpleair/run_record_status.py record-status [--dry-run] [--verbose]
"""

from __future__ import annotations

import sys
from pathlib import Path

# Add src directory to Python path
ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT / "src"))

from purpleair.cli import app


if __name__ == "__main__":
    app()
