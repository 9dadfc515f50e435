# hfc/nucleus/registry.py
import logging
import threading
from typing import Dict, List, Optional, Set

from websockets.asyncio.server import ServerConnection

logger = logging.getLogger(__name__)

# Connections are owned by the transport; the registry only keeps references.
Connection = ServerConnection


class PresenceRegistry:
    """
    Maps each online user id to the connection it registered from.

    A later registration for the same id replaces the earlier one. Every
    operation takes the lock, so reads and writes stay consistent when
    handlers run on different threads or event loops.
    """

    def __init__(self):
        self._connections: Dict[str, Connection] = {}
        self._ids_by_connection: Dict[Connection, Set[str]] = {}
        self._lock = threading.Lock()
        logger.info("PresenceRegistry initialized.")

    def register(self, user_id: str, connection: Connection) -> None:
        with self._lock:
            previous = self._connections.get(user_id)
            if previous is not None and previous is not connection:
                self._forget(previous, user_id)
            self._connections[user_id] = connection
            self._ids_by_connection.setdefault(connection, set()).add(user_id)
        if previous is not None and previous is not connection:
            logger.info(f"[Registry] User '{user_id}' re-registered on a new connection.")
        else:
            logger.info(f"[Registry] User '{user_id}' registered.")

    def lookup(self, user_id: str) -> Optional[Connection]:
        with self._lock:
            return self._connections.get(user_id)

    def unregister(self, user_id: str) -> Optional[Connection]:
        with self._lock:
            connection = self._connections.pop(user_id, None)
            if connection is not None:
                self._forget(connection, user_id)
        if connection is not None:
            logger.info(f"[Registry] User '{user_id}' unregistered.")
        return connection

    def unregister_connection(self, connection: Connection) -> List[str]:
        """
        Removes every user id still mapped to `connection`.

        Ids that have since been re-registered on another connection are left
        alone. Returns the ids that were removed.
        """
        with self._lock:
            user_ids = self._ids_by_connection.pop(connection, set())
            removed = []
            for user_id in sorted(user_ids):
                if self._connections.get(user_id) is connection:
                    del self._connections[user_id]
                    removed.append(user_id)
        for user_id in removed:
            logger.info(f"[Registry] User '{user_id}' went offline.")
        return removed

    def user_ids_for(self, connection: Connection) -> List[str]:
        """Returns the ids currently registered from `connection`."""
        with self._lock:
            return sorted(self._ids_by_connection.get(connection, ()))

    def online_users(self) -> List[str]:
        with self._lock:
            return sorted(self._connections)

    def __contains__(self, user_id: object) -> bool:
        with self._lock:
            return user_id in self._connections

    def __len__(self) -> int:
        with self._lock:
            return len(self._connections)

    def _forget(self, connection: Connection, user_id: str) -> None:
        # Caller holds the lock.
        ids = self._ids_by_connection.get(connection)
        if ids is None:
            return
        ids.discard(user_id)
        if not ids:
            del self._ids_by_connection[connection]
