# artisan_cart/services/notification_service.py
import threading
from typing import Callable

from artisan_cart.domain.errors import RemoteCallError
from artisan_cart.domain.schemas import UnreadCountUpdate
from artisan_cart.services.events import Subscribers
from artisan_cart.services.notification_client import NotificationClient
from artisan_cart.utils.logging import get_logger

logger = get_logger(__name__)


class NotificationBadgeService:
    """
    Licznik nieprzeczytanych powiadomien.
    Po kazdym zapisie liczba jest pobierana od nowa z serwera,
    tylko mark_all_as_read zeruje lokalnie przed potwierdzeniem.
    """

    def __init__(self, client: NotificationClient, initial_unread_count: int = 0):
        self.client = client
        self.events: Subscribers[UnreadCountUpdate] = Subscribers("notification badge")
        self._unread_count = max(initial_unread_count, 0)
        self._lock = threading.Lock()

    @property
    def unread_count(self) -> int:
        return self._unread_count

    def subscribe(self, callback: Callable[[UnreadCountUpdate], None]) -> Callable[[], None]:
        return self.events.subscribe(callback)

    def set_initial_unread_count(self, count: int) -> None:
        self._set(count)

    def refresh_unread_count(self) -> int:
        count = self.client.fetch_unread_count()
        self._set(count)
        return count

    def clear_badge(self) -> None:
        self._set(0)

    def mark_as_read(self, notification_id: str) -> int:
        logger.info(f"Mark notification {notification_id} as read ({self.client.role})")
        self.client.mark_as_read(notification_id)
        return self.refresh_unread_count()

    def mark_all_as_read(self) -> int:
        previous = self._unread_count
        self._set(0)

        try:
            self.client.mark_all_as_read()
        except RemoteCallError as e:
            logger.error(f"Mark all notifications as read failed: {e}")
            self._set(previous)
            raise

        return self.refresh_unread_count()

    def _set(self, count: int) -> None:
        count = max(int(count), 0)
        with self._lock:
            changed = count != self._unread_count
            self._unread_count = count
        if changed:
            self.events.publish(UnreadCountUpdate(count=count))
