"""
Logging configuration
"""

import logging
from typing import Optional

from review_gate.config.settings import get_settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: Optional[str] = None) -> None:
    """Configure root logging with the level from settings unless one is given"""
    logging.basicConfig(
        level=(level or get_settings().log_level).upper(),
        format=LOG_FORMAT,
    )
