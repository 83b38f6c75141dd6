"""Logging utilities.

We use Python's standard `logging` module with a plain structured format.
Module loggers are named `c4_filter.<area>`.

- Console always gets a handler.
- With `log_dir`, logs also go to `<log_dir>/<run_id>.log`.
"""

from __future__ import annotations
import logging
import os
from typing import Optional

FORMAT = "%(asctime)s %(levelname)s %(name)s | %(message)s"
DATEFMT = "%Y-%m-%dT%H:%M:%S"

def setup_logging(run_id: str = "run", log_dir: Optional[str] = None, level: int = logging.INFO) -> Optional[str]:
    """
    Setup logging configuration.

    Args:
        run_id: Run identifier, used as the log file name
        log_dir: Directory for the run log file (None = console only)
        level: Root log level

    Returns:
        Path of the log file, if one was created.
    """
    root = logging.getLogger()
    root.setLevel(level)
    fmt = logging.Formatter(fmt=FORMAT, datefmt=DATEFMT)

    ch = logging.StreamHandler()
    ch.setFormatter(fmt)
    root.addHandler(ch)

    if log_dir is None:
        return None
    os.makedirs(log_dir, exist_ok=True)
    log_path = os.path.join(log_dir, f"{run_id}.log")
    fh = logging.FileHandler(log_path, encoding="utf-8")
    fh.setFormatter(fmt)
    root.addHandler(fh)
    return log_path
