# artisan_cart/services/lock_service.py
import threading
from contextlib import contextmanager
from typing import Any, Dict, Iterator

from artisan_cart.utils.logging import get_logger

logger = get_logger(__name__)

CART_WIDE = "*"


class ItemLockService:
    """
    -serializacja mutacji koszyka per produkt
    -dwa rownolegle update_quantity dla tego samego produktu ida po kolei
    -operacje na calym koszyku (clear, refresh) biora klucz CART_WIDE
    """

    def __init__(self):
        self._locks: Dict[Any, threading.Lock] = {}
        self._guard = threading.Lock()

    def _lock_for(self, key: Any) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = threading.Lock()
                self._locks[key] = lock
            return lock

    def acquire_product_lock(self, product_id: Any, timeout: float | None = None) -> bool:
        logger.debug(f"Acquire lock product:{product_id}")
        lock = self._lock_for(product_id)
        if timeout is None:
            return lock.acquire()
        return lock.acquire(timeout=timeout)

    def release_product_lock(self, product_id: Any) -> None:
        logger.debug(f"Release lock product:{product_id}")
        self._lock_for(product_id).release()

    @contextmanager
    def hold(self, product_id: Any) -> Iterator[None]:
        self.acquire_product_lock(product_id)
        try:
            yield
        finally:
            self.release_product_lock(product_id)

    def is_locked(self, product_id: Any) -> bool:
        return self._lock_for(product_id).locked()
