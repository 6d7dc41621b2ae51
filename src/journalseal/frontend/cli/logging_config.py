"""Lightweight logging setup for the TUI."""

import logging
import sys


def configure_logging(level: int = logging.INFO) -> None:
    # Configure root logger once; stderr keeps log lines out of the TUI's stdout.
    logging.basicConfig(
        level=level,
        format="[%(asctime)s] %(levelname)s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )
    # urllib3 logs every connection at DEBUG
    logging.getLogger("urllib3").setLevel(max(level, logging.INFO))
