# hfc/nucleus/router.py
import logging
from typing import Optional

from websockets.exceptions import ConnectionClosed

from hfc.nucleus.protocol import DeliveryFrame
from hfc.nucleus.registry import Connection, PresenceRegistry

logger = logging.getLogger(__name__)


class MessageRouter:
    """
    Delivers chat messages to the recipient's live connection.

    Delivery is best-effort and at-most-once: offline recipients and failed
    writes are logged and dropped, and the sender is never told either way.
    """
    def __init__(self, registry: PresenceRegistry):
        self._registry = registry

    async def route(
        self,
        sender_id: str,
        receiver_id: str,
        message_text: str,
        origin: Optional[Connection] = None,
    ) -> bool:
        """
        Routes one message to `receiver_id`.

        Returns True when a frame was handed to the receiver's transport.
        """
        target = self._registry.lookup(receiver_id)

        if target is None:
            logger.info(f"No active connection for '{receiver_id}'. Message from '{sender_id}' dropped.")
            return False

        if origin is not None and target is origin:
            # Messages are never echoed back to the connection that sent them.
            logger.debug(f"Receiver '{receiver_id}' is on the sending connection. Not echoed.")
            return False

        frame = DeliveryFrame.build(sender_id, message_text)
        try:
            await target.send(frame.to_json())
        except ConnectionClosed as e:
            logger.warning(f"Connection for '{receiver_id}' closed during delivery: {e}")
            return False
        except Exception as e:
            logger.warning(f"Failed to deliver message to '{receiver_id}': {e}", exc_info=True)
            return False

        logger.info(f"Message from '{sender_id}' routed to '{receiver_id}'.")
        return True
