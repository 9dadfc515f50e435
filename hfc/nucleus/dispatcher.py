# hfc/nucleus/dispatcher.py
import asyncio
import logging
from typing import Dict, List

from hfc.nucleus.protocol import InboundFrame, RegisterFrame, SendMessageFrame
from hfc.nucleus.registry import Connection, PresenceRegistry
from hfc.nucleus.router import MessageRouter
from hfc.nucleus.state import BaseState

logger = logging.getLogger(__name__)


class EventDispatcher:
    """
    The Nucleus handler. The final destination in the pipeline.

    Turns connection events into registry updates and routed messages, and
    keeps the online-users mirror in step with the registry.
    """
    def __init__(
        self,
        registry: PresenceRegistry,
        router: MessageRouter,
        state: BaseState,
        cleanup_on_disconnect: bool = True,
    ):
        self._registry = registry
        self._router = router
        self._state = state
        self._cleanup_on_disconnect = cleanup_on_disconnect
        self._mirror_locks: Dict[str, asyncio.Lock] = {}
        self._mirror_users: Dict[str, int] = {}

    async def handle(self, frame: InboundFrame, connection: Connection) -> None:
        if isinstance(frame, RegisterFrame):
            await self.register(frame.data.user_id, connection)
        elif isinstance(frame, SendMessageFrame):
            data = frame.data
            await self._router.route(data.sender_id, data.receiver_id, data.message_text, origin=connection)
        else:
            logger.warning(f"No handler for frame type {type(frame).__name__}.")

    async def register(self, user_id: str, connection: Connection) -> None:
        self._registry.register(user_id, connection)
        await self._sync_mirror(user_id)

    async def disconnect(self, connection: Connection) -> List[str]:
        """
        Forgets every user id still registered from a closed connection.

        Returns the ids that went offline. Does nothing when disconnect
        cleanup is turned off.
        """
        if not self._cleanup_on_disconnect:
            return []

        removed = self._registry.unregister_connection(connection)
        for user_id in removed:
            await self._sync_mirror(user_id)
        return removed

    async def _sync_mirror(self, user_id: str) -> None:
        """
        Copies the registry's current view of `user_id` into the mirror.

        Updates for one id run one at a time and read the registry only once
        they hold the lock, so the last update to finish always matches the
        registry.
        """
        lock = self._mirror_locks.setdefault(user_id, asyncio.Lock())
        self._mirror_users[user_id] = self._mirror_users.get(user_id, 0) + 1
        try:
            async with lock:
                if self._registry.lookup(user_id) is not None:
                    await self._state.mark_online(user_id)
                else:
                    await self._state.mark_offline(user_id)
        except Exception as e:
            logger.warning(f"[Dispatcher] Could not update online mirror for '{user_id}': {e}")
        finally:
            self._mirror_users[user_id] -= 1
            if not self._mirror_users[user_id]:
                del self._mirror_users[user_id]
                del self._mirror_locks[user_id]
