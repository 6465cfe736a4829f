from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


# PUBLIC_INTERFACE
def configure_logging(level: str = "INFO") -> None:
    """
    Configure root logging for the application.

    Safe to call more than once; the level of the ``postfeed`` logger is
    updated on every call while handlers are only installed by the first.
    """
    logging.basicConfig(level=logging.WARNING, format=LOG_FORMAT)
    logging.getLogger("postfeed").setLevel(getattr(logging, level.upper(), logging.INFO))
