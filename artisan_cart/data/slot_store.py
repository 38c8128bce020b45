# artisan_cart/data/slot_store.py
from typing import Dict, Protocol

import redis

from artisan_cart.utils.retry import redis_retry
from artisan_cart.utils.settings import REDIS_URL, SLOT_NAMESPACE
from artisan_cart.utils.logging import get_logger

logger = get_logger(__name__)


class SlotStore(Protocol):
    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, *keys: str) -> None: ...


class RedisSlotStore:
    """
    Trwaly storage klienta na redisie.
    Kazda sesja ma swoj namespace, wiec sloty nie mieszaja sie miedzy sesjami.
    Odczyt i zapis sa synchroniczne, bez invalidacji miedzy kartami.
    """

    def __init__(self, url: str | None = None, namespace: str | None = None):
        self.redis = redis.Redis.from_url(
            url or REDIS_URL,
            decode_responses=True,
        )
        self.namespace = namespace or SLOT_NAMESPACE

    def _key(self, key: str) -> str:
        return f"{self.namespace}:{key}"

    @redis_retry()
    def get(self, key: str) -> str | None:
        return self.redis.get(self._key(key))

    @redis_retry()
    def set(self, key: str, value: str) -> None:
        self.redis.set(self._key(key), value)

    @redis_retry()
    def delete(self, *keys: str) -> None:
        if not keys:
            return
        logger.debug(f"Delete slots {keys} in namespace {self.namespace}")
        self.redis.delete(*(self._key(k) for k in keys))


class MemorySlotStore:
    """Slot store w pamieci procesu."""

    def __init__(self, initial: Dict[str, str] | None = None):
        self.slots: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self.slots.get(key)

    def set(self, key: str, value: str) -> None:
        self.slots[key] = value

    def delete(self, *keys: str) -> None:
        for key in keys:
            self.slots.pop(key, None)
