"""Root logger setup for the clientele CLI."""

from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(*, level: int = logging.INFO, force: bool = False) -> None:
    """Send log records to stderr so stdout carries only the customers JSON.

    ``force=True`` replaces handlers installed earlier, e.g. by a test runner.
    """

    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt="%H:%M:%S", force=force)
