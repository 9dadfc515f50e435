# hfc/nucleus/state.py
from abc import ABC, abstractmethod
import logging
from typing import List, Set

from hfc.utils.redis_client import get_redis_client

logger = logging.getLogger(__name__)


class BaseState(ABC):
    """
    Abstract base class for the online-users mirror.

    The mirror is advisory: it lets other services see who is online, but the
    router always resolves recipients through the PresenceRegistry.
    """
    @abstractmethod
    async def mark_online(self, user_id: str):
        pass

    @abstractmethod
    async def mark_offline(self, user_id: str):
        pass

    @abstractmethod
    async def is_online(self, user_id: str) -> bool:
        pass

    @abstractmethod
    async def online_users(self) -> List[str]:
        pass


class MemoryState(BaseState):
    """Keeps the online set in process memory."""

    def __init__(self):
        self._online: Set[str] = set()

    async def mark_online(self, user_id: str):
        self._online.add(user_id)

    async def mark_offline(self, user_id: str):
        self._online.discard(user_id)

    async def is_online(self, user_id: str) -> bool:
        return user_id in self._online

    async def online_users(self) -> List[str]:
        return sorted(self._online)


class RedisState(BaseState):
    """Publishes the set of online users to Redis."""
    _ONLINE_USERS_KEY = "hfc:online_users"

    def __init__(self, client=None):
        self._redis = client if client is not None else get_redis_client()

    async def mark_online(self, user_id: str):
        """Adds a user to the set of online users."""
        await self._redis.sadd(self._ONLINE_USERS_KEY, user_id)
        logger.debug(f"[State] User '{user_id}' marked online.")

    async def mark_offline(self, user_id: str):
        """Removes a user from the set of online users."""
        await self._redis.srem(self._ONLINE_USERS_KEY, user_id)
        logger.debug(f"[State] User '{user_id}' marked offline.")

    async def is_online(self, user_id: str) -> bool:
        return bool(await self._redis.sismember(self._ONLINE_USERS_KEY, user_id))

    async def online_users(self) -> List[str]:
        return sorted(await self._redis.smembers(self._ONLINE_USERS_KEY))

    async def clear(self):
        """Drops users left over from a previous run of this process."""
        await self._redis.delete(self._ONLINE_USERS_KEY)
