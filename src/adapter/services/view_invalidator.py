import logging
from typing import Iterable

from src.app.services.view_invalidator import IViewInvalidator

logger = logging.getLogger(__name__)


class LoggingViewInvalidator(IViewInvalidator):
    """Reports stale view keys to the log; holds no state between calls"""

    async def invalidate(self, views: Iterable[str]) -> None:
        views = list(views)
        if views:
            logger.debug("Invalidated views: %s", ", ".join(views))
