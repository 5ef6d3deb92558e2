# autoradio/logging_utils.py
"""
Logging setup. Entry points call configure_logging() once at startup;
library modules just use logging.getLogger(__name__).
"""

import logging
import os
import sys

_HANDLER_TAG = "_autoradio_handler"
_FORMAT = "%(asctime)s | %(levelname)-5s | %(name)s | %(message)s"

_configured = False


def configure_logging(level: str = "INFO", force: bool = False, env_override: bool = True) -> None:
    """
    Install a single stderr handler on the root logger.
    Later calls are ignored unless force=True. LOG_LEVEL overrides `level`
    unless env_override=False (an explicit --log-level).
    """
    global _configured
    if _configured and not force:
        return

    if env_override:
        level = os.getenv("LOG_LEVEL", level)
    level = level.upper()
    root = logging.getLogger()

    # drop our previous handler so force=True doesn't stack them
    for h in list(root.handlers):
        if getattr(h, _HANDLER_TAG, False):
            root.removeHandler(h)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(_FORMAT))
    setattr(handler, _HANDLER_TAG, True)
    root.addHandler(handler)
    root.setLevel(getattr(logging, level, logging.INFO))

    # requests/urllib3 are noisy at DEBUG
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    _configured = True
