"""
log_setup.py
Logging configuration: console + `logs/run.log`, set up once per process.
"""

from __future__ import annotations

import logging
from pathlib import Path

_configured = False


def configure_logging(log_dir: Path, debug: bool = False) -> None:
    """
    Configure root logging for the application.

    - Creates the log directory if missing
    - Streams logs to both stdout and `run.log`
    - Uses DEBUG level if `debug=True`, otherwise INFO

    Streamlit re-executes the script on every interaction, so repeat calls
    are ignored.
    """
    global _configured
    if _configured:
        return

    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / "run.log"

    level = logging.DEBUG if debug else logging.INFO
    fmt = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

    logging.basicConfig(
        level=level,
        format=fmt,
        handlers=[
            logging.StreamHandler(),
            logging.FileHandler(log_file, mode="a", encoding="utf-8"),
        ],
    )
    _configured = True
