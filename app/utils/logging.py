# app/utils/logging.py
import logging
import sys

from app.utils.settings import LOG_LEVEL

_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s - %(message)s"
_configured = False


def _configure_root() -> None:
    """Jeden handler na loggerze "app", moduly dziedzicza po nim."""
    global _configured
    if _configured:
        return

    root = logging.getLogger("app")
    root.setLevel(LOG_LEVEL)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(_FORMAT))
    root.addHandler(handler)

    _configured = True


def get_logger(name: str) -> logging.Logger:
    _configure_root()
    return logging.getLogger(name)
