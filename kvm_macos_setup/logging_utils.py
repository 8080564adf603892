from __future__ import annotations

import logging
import os
from pathlib import Path

DEFAULT_LOG_PATH = "/var/log/kvm-macos-setup.log"
FALLBACK_LOG_NAME = "kvm-macos-setup.log"

_FORMAT = logging.Formatter(
    fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%S%z",
)


def _open_log(log_path: str) -> logging.FileHandler:
    try:
        Path(log_path).parent.mkdir(parents=True, exist_ok=True)
        return logging.FileHandler(log_path)
    except OSError:
        return logging.FileHandler(str(Path.cwd() / FALLBACK_LOG_NAME))


def _file_handler(root: logging.Logger) -> logging.FileHandler | None:
    for h in root.handlers:
        if isinstance(h, logging.FileHandler):
            return h
    return None


def configure_logging(log_path: str = DEFAULT_LOG_PATH, *, console_level: int = logging.INFO) -> str:
    """Send everything (including CMD/STDOUT/STDERR debug records) to the log
    file and INFO and above to the terminal.

    A second call reuses the file handler already installed. Returns the path
    actually written, which is a file in the working directory when
    ``log_path`` cannot be opened.
    """

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)

    existing = _file_handler(root)
    if existing is not None:
        return existing.baseFilename

    file_handler = _open_log(log_path)
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(_FORMAT)
    root.addHandler(file_handler)

    console = logging.StreamHandler()
    console.setLevel(console_level)
    console.setFormatter(_FORMAT)
    root.addHandler(console)

    actual = file_handler.baseFilename
    if actual != os.path.abspath(log_path):
        logging.getLogger(__name__).warning("Cannot write %s; logging to %s", log_path, actual)
    return actual
