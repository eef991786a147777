"""Console logging for the storefront client."""

import logging
from typing import Optional

from rich.logging import RichHandler

from storefront.common.config.settings import settings

# Loggers that chatter at INFO for every catalog request
NOISY_LOGGERS = ("requests", "urllib3", "asyncio")


def setup_logging(level: Optional[str] = None) -> RichHandler:
    """
    Routes all storefront logging through one rich console handler.

    The level comes from LOG_LEVEL unless given explicitly; unknown names fall back
    to INFO. Calling this again replaces the handler instead of stacking another one.
    """
    log_level = getattr(logging, (level or settings.LOG_LEVEL).upper(), logging.INFO)

    # Product names and descriptions can contain square brackets, so rich markup stays off
    console_handler = RichHandler(
        show_time=True,
        show_level=True,
        show_path=False,
        markup=False,
        rich_tracebacks=True,
        tracebacks_suppress=[logging],
    )

    root_logger = logging.getLogger()
    root_logger.handlers = [console_handler]
    root_logger.setLevel(log_level)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(log_level, logging.WARNING))

    return console_handler
