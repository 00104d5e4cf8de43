"""
Centralized logging configuration for the weather dashboard.

Import this module early in entry points (run_server.py, dashboard.py)
so the proxy and the dashboard log with the same format.
"""

import logging
import sys
from typing import Union

from weather_dashboard.config.settings import settings


def setup_logging(level: Union[int, str, None] = None) -> None:
    """
    Configure the root logger for the application.

    Parameters
    ----------
    level : int or str, optional
        Logging level. Defaults to ``settings.LOG_LEVEL``.
    """
    if level is None:
        level = settings.LOG_LEVEL
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    # uvicorn installs its own handlers; keep its access log quieter than ours
    logging.getLogger("uvicorn.access").setLevel(max(level, logging.WARNING))


# Configure on import for convenience
setup_logging()
