# artisan_cart/services/events.py
import threading
from typing import Callable, Generic, List, TypeVar

from artisan_cart.utils.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


class Subscribers(Generic[T]):
    """
    Jawna lista obserwatorow zamiast globalnego broadcastu.
    Dostarczanie synchroniczne, w kolejnosci rejestracji.
    """

    def __init__(self, name: str = "events"):
        self.name = name
        self._callbacks: List[Callable[[T], None]] = []
        self._lock = threading.Lock()

    def subscribe(self, callback: Callable[[T], None]) -> Callable[[], None]:
        with self._lock:
            self._callbacks.append(callback)

        def unsubscribe() -> None:
            with self._lock:
                if callback in self._callbacks:
                    self._callbacks.remove(callback)

        return unsubscribe

    def publish(self, payload: T) -> None:
        with self._lock:
            callbacks = list(self._callbacks)

        for callback in callbacks:
            try:
                callback(payload)
            except Exception:
                #jeden zepsuty subskrybent nie blokuje reszty
                logger.exception(f"Subscriber {callback!r} of {self.name} failed")

    def __len__(self) -> int:
        return len(self._callbacks)
