# src/taskflow/logging_setup.py

from __future__ import annotations

import logging
import sys
from pathlib import Path


class _ConsoleNoiseFilter(logging.Filter):
    """
    Keep the console readable while the REPL is waiting on input().

    - taskflow.* passes, except the background poller below WARNING
    - werkzeug request lines and urllib3 connection chatter only at ERROR+
    - everything else (py.warnings included) at WARNING+
    """

    QUIET_UNTIL_ERROR = ("werkzeug", "urllib3")

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name

        if name.startswith("taskflow."):
            if name.startswith("taskflow.tasks.notifications"):
                return record.levelno >= logging.WARNING
            return True

        if name.split(".", 1)[0] in self.QUIET_UNTIL_ERROR:
            return record.levelno >= logging.ERROR

        return record.levelno >= logging.WARNING


def _level(value: str | int) -> int:
    if isinstance(value, int):
        return value
    return getattr(logging, str(value).strip().upper(), logging.INFO)


def setup_logging(
    *,
    log_dir: str | Path = ".local/taskflow",
    console_level: str | int = logging.INFO,
    file_level: str | int = logging.DEBUG,
) -> Path:
    """
    Console handler (filtered, for the REPL) plus a full debug log at
    <log_dir>/taskflow.log. Levels may be given as names ("INFO") or ints.

    Replaces any handlers already on the root logger; returns the log file path.
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / "taskflow.log"

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    for h in list(root.handlers):
        root.removeHandler(h)

    # threadName tells the REPL apart from the taskflow-notify poller.
    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s [%(threadName)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    ch = logging.StreamHandler(sys.stderr)
    ch.setLevel(_level(console_level))
    ch.setFormatter(fmt)
    ch.addFilter(_ConsoleNoiseFilter())
    root.addHandler(ch)

    fh = logging.FileHandler(str(log_file), encoding="utf-8")
    fh.setLevel(_level(file_level))
    fh.setFormatter(fmt)
    root.addHandler(fh)

    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.captureWarnings(True)
    return log_file
