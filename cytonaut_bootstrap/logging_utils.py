from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import IO, Optional

OK = 25
logging.addLevelName(OK, "OK")

CYAN = "\033[0;36m"
GREEN = "\033[0;32m"
YELLOW = "\033[1;33m"
RED = "\033[0;31m"
NC = "\033[0m"

_TAGS = {
    logging.DEBUG: ("[DEBUG]", ""),
    logging.INFO: ("[INFO]", CYAN),
    OK: ("[OK]", GREEN),
    logging.WARNING: ("[WARN]", YELLOW),
    logging.ERROR: ("[FAIL]", RED),
    logging.CRITICAL: ("[FAIL]", RED),
}


def ok(logger: logging.Logger, msg: str, *args) -> None:
    logger.log(OK, msg, *args)


def use_color(stream: Optional[IO[str]] = None, *, no_color: bool = False) -> bool:
    if no_color or os.environ.get("NO_COLOR"):
        return False
    stream = stream or sys.stdout
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())


class StatusFormatter(logging.Formatter):
    """Render records as ``[TAG]  message`` with an optional colored tag."""

    def __init__(self, *, color: bool = True) -> None:
        super().__init__("%(message)s")
        self.color = color

    def format(self, record: logging.LogRecord) -> str:
        msg = super().format(record)
        tag, color = _TAGS.get(record.levelno, (f"[{record.levelname}]", ""))
        pad = " " * max(1, 8 - len(tag))
        if self.color and color:
            return f"{color}{tag}{NC}{pad}{msg}"
        return f"{tag}{pad}{msg}"


def configure_logging(
    log_path: Optional[str] = None,
    level: int = logging.INFO,
    *,
    color: bool = True,
    stream: Optional[IO[str]] = None,
) -> Optional[str]:
    """Configure logging.

    Console output always goes to stdout as status lines. When ``log_path`` is
    given, every record (including DEBUG command output) is also written there
    with timestamps. If that path is not writable we fall back to a file in the
    working directory.

    Returns the actual file path being used, if any.
    """

    root = logging.getLogger()
    root.setLevel(logging.DEBUG if log_path else level)

    # Avoid duplicate handlers if configure_logging() is called multiple times.
    for h in list(getattr(root, "_cytonaut_handlers", [])):
        root.removeHandler(h)
        h.close()

    handlers: list[logging.Handler] = []

    console = logging.StreamHandler(stream or sys.stdout)
    console.setLevel(level)
    console.setFormatter(StatusFormatter(color=color))
    handlers.append(console)

    chosen_path: Optional[str] = None
    if log_path:
        fmt = logging.Formatter(
            fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S%z",
        )
        try:
            Path(os.path.dirname(log_path) or ".").mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_path, encoding="utf-8")
            chosen_path = log_path
        except OSError:
            # Fall back to a writable location.
            fallback = str(Path.cwd() / "cytonaut-bootstrap.log")
            file_handler = logging.FileHandler(fallback, encoding="utf-8")
            chosen_path = fallback
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(fmt)
        handlers.append(file_handler)

    for h in handlers:
        root.addHandler(h)
    setattr(root, "_cytonaut_handlers", handlers)

    if chosen_path:
        logging.getLogger(__name__).debug(
            "Logging initialized (requested=%s, actual=%s)", log_path, chosen_path
        )
    return chosen_path
