"""Logging setup for the docbrief CLI.

``setup_logging`` is called once from ``cli.main()`` to configure the
``"docbrief"`` package logger.  Every other module takes a child logger via
``logging.getLogger(__name__)`` so records propagate here.
"""

import logging
import sys
from pathlib import Path

_FMT = "%(asctime)s  %(levelname)-7s %(name)s: %(message)s"
_DATE = "%H:%M:%S"


def setup_logging(verbose: bool = False, log_file: Path | None = None) -> None:
    """Configure the ``docbrief`` logger for a CLI session.

    Args:
        verbose:  DEBUG level when True (prompt sizes, parse diagnostics),
                  INFO otherwise.
        log_file: Optional path for an additional ``FileHandler``.  Missing
                  parent directories are created.

    Existing handlers are removed first, so repeated calls do not stack
    handlers.
    """
    logger = logging.getLogger("docbrief")
    logger.handlers.clear()
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    logger.propagate = False

    fmt = logging.Formatter(_FMT, datefmt=_DATE)

    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(fmt)
    logger.addHandler(console)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setFormatter(fmt)
        logger.addHandler(fh)
