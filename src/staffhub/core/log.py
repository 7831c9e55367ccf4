from __future__ import annotations

import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging once for the process.

    Flask's own logger propagates to root, so a single stream handler is enough.
    """

    resolved = logging.getLevelName(str(level).upper())
    if not isinstance(resolved, int):
        resolved = logging.INFO

    logging.basicConfig(stream=sys.stderr, level=resolved, format=LOG_FORMAT)
    logging.getLogger("pymongo").setLevel(max(resolved, logging.WARNING))
