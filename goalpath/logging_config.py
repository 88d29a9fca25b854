import logging
import os
import sys
from typing import Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: Optional[str] = None) -> None:
    """Route goalpath logs to stdout; level from the argument or GOALPATH_LOG_LEVEL."""
    level_name = (level or os.environ.get("GOALPATH_LOG_LEVEL", "INFO")).upper()
    log_level = getattr(logging, level_name, logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    package_logger = logging.getLogger("goalpath")
    package_logger.setLevel(log_level)
    if not any(getattr(h, "_goalpath", False) for h in package_logger.handlers):
        handler._goalpath = True  # type: ignore[attr-defined]
        package_logger.addHandler(handler)
