from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.markup import escape

from .settings import DEFAULT_LOG_PATH

SUCCESS = 25
logging.addLevelName(SUCCESS, "SUCCESS")

_PREFIXES = (
    (logging.ERROR, "[X]", "bold red"),
    (logging.WARNING, "[!]", "bold yellow"),
    (SUCCESS, "[OK]", "bold green"),
    (logging.INFO, "[*]", "bold blue"),
)


def success(logger: logging.Logger, msg: str, *args) -> None:
    logger.log(SUCCESS, msg, *args)


def prefix_for(levelno: int) -> str:
    for level, label, style in _PREFIXES:
        if levelno >= level:
            return f"[{style}]{escape(label)}[/]"
    return ""


class ConsoleHandler(logging.Handler):
    """Render records as the short severity-coded lines users see on the terminal."""

    def __init__(self, console: Optional[Console] = None, err_console: Optional[Console] = None) -> None:
        super().__init__(level=logging.INFO)
        self.console = console or Console(highlight=False)
        self.err_console = err_console or Console(stderr=True, highlight=False)

    def emit(self, record: logging.LogRecord) -> None:
        try:
            # Raw command lines belong in the log file only.
            if record.getMessage().startswith(("CMD ", "SPAWN ")):
                return
            target = self.err_console if record.levelno >= logging.ERROR else self.console
            target.print(f"{prefix_for(record.levelno)} {escape(record.getMessage())}")
        except Exception:
            self.handleError(record)


def configure_logging(
    log_path: str = DEFAULT_LOG_PATH,
    level: int = logging.DEBUG,
    also_console: bool = True,
) -> str:
    """Configure logging.

    The file log gets everything (including each command run); the console
    only gets the prefixed progress lines.

    If log_path is not writable (e.g. running without sudo), fall back to a
    file in the working directory.

    Returns the actual file path being used.
    """

    logger = logging.getLogger()
    logger.setLevel(level)

    if getattr(logger, "_vbox_setup_configured", False):
        return getattr(logger, "_vbox_setup_log_path", log_path)

    handlers: list[logging.Handler] = []

    fmt = logging.Formatter(
        fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S%z",
    )

    try:
        Path(os.path.dirname(log_path) or ".").mkdir(parents=True, exist_ok=True)
        file_handler: logging.Handler = logging.FileHandler(log_path)
        chosen_path = log_path
    except OSError:
        chosen_path = str(Path.cwd() / "vbox-guest-setup.log")
        file_handler = logging.FileHandler(chosen_path)
    file_handler.setFormatter(fmt)
    handlers.append(file_handler)

    if also_console:
        handlers.append(ConsoleHandler())

    for h in handlers:
        logger.addHandler(h)

    setattr(logger, "_vbox_setup_configured", True)
    setattr(logger, "_vbox_setup_log_path", chosen_path)

    logging.getLogger(__name__).debug(
        "Logging initialized (requested=%s, actual=%s)", log_path, chosen_path
    )
    return chosen_path
