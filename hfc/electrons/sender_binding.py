# hfc/electrons/sender_binding.py
import logging
from typing import Awaitable, Callable

from hfc.electrons.base import BaseElectron
from hfc.nucleus.protocol import InboundFrame, SendMessageFrame
from hfc.nucleus.registry import Connection, PresenceRegistry

logger = logging.getLogger(__name__)


class SenderBindingElectron(BaseElectron):
    """
    Flags messages whose senderId was never registered from the connection
    that sent them.

    The real-time channel is unauthenticated, so the frame is still passed on.
    """
    def __init__(self, registry: PresenceRegistry):
        self._registry = registry

    async def process(
        self,
        frame: InboundFrame,
        connection: Connection,
        next_electron: Callable[[], Awaitable[None]],
    ) -> None:
        if isinstance(frame, SendMessageFrame):
            sender_id = frame.data.sender_id
            if sender_id not in self._registry.user_ids_for(connection):
                logger.warning(
                    f"[SenderBinding] Connection {getattr(connection, 'remote_address', None)} "
                    f"sent a message as unregistered sender '{sender_id}'."
                )

        await next_electron()
