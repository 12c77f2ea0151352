# price_comparator/config/logging_config.py

"""Logging for price_comparator runs.

Every CLI invocation writes a full DEBUG trace to its own file under
``logs/`` (``run_<YYYYmmdd>_<HHMMSS>.log``).  The terminal only shows
warnings, rendered by Rich on stderr so JSON on stdout stays parseable;
``verbose`` lowers the terminal threshold to INFO.
"""

import logging
from datetime import datetime
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

from price_comparator.config.settings import Settings

PROJECT_LOGGER = "price_comparator"

_FILE_FORMAT = (
    "%(asctime)s | %(levelname)-8s | %(threadName)s | %(name)s | "
    "%(module)s:%(lineno)d | %(message)s"
)
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _run_log_path(directory: Path) -> Path:
    """Timestamped file name for the current run."""
    stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    return directory / f"run_{stamp}.log"


def setup_logging(logs_dir: Path | None = None, verbose: bool = False) -> Path:
    """Attach the run-file and terminal handlers to the project logger.

    Calling it again in the same process is a no-op apart from
    returning a fresh path; handlers are never stacked.

    Returns:
        The :class:`~pathlib.Path` of this run's log file.
    """
    directory = logs_dir or Settings.LOGS_DIR
    directory.mkdir(parents=True, exist_ok=True)
    log_file = _run_log_path(directory)

    project = logging.getLogger(PROJECT_LOGGER)
    project.setLevel(logging.DEBUG)
    if project.handlers:
        return log_file

    to_file = logging.FileHandler(log_file, encoding="utf-8")
    to_file.setLevel(logging.DEBUG)
    to_file.setFormatter(logging.Formatter(_FILE_FORMAT, datefmt=_DATE_FORMAT))
    project.addHandler(to_file)

    to_terminal = RichHandler(
        console=Console(stderr=True),
        level=logging.INFO if verbose else logging.WARNING,
        show_path=False,
        rich_tracebacks=True,
    )
    to_terminal.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
    project.addHandler(to_terminal)

    project.info("Logging to %s", log_file)
    return log_file
