# hfc/electrons/logger.py
import logging
from typing import Awaitable, Callable

from hfc.electrons.base import BaseElectron
from hfc.nucleus.protocol import InboundFrame
from hfc.nucleus.registry import Connection

logger = logging.getLogger(__name__)


class LoggerElectron(BaseElectron):
    """
    A simple electron that logs key information about each incoming frame.
    """

    async def process(
        self,
        frame: InboundFrame,
        connection: Connection,
        next_electron: Callable[[], Awaitable[None]],
    ) -> None:
        logger.debug(
            f"[LoggerElectron] Processing '{frame.event}' "
            f"from {getattr(connection, 'remote_address', None)}"
        )
        await next_electron()
