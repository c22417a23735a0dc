"""
Logging setup for scripts driving the timeline engine.

Format: timestamp | level | logger | event
"""

import logging
import sys


def setup_logging(verbose: bool = False) -> None:
    """Configure root logger with standard format"""
    level = logging.DEBUG if verbose else logging.INFO

    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)-12s │ %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        stream=sys.stderr,
        force=True,
    )
