# artisan_cart/container.py
from typing import Dict

from artisan_cart.data.slot_store import RedisSlotStore, SlotStore
from artisan_cart.repos.local_cart_repo import LocalCartRepo
from artisan_cart.services.cart_client import CartApiClient
from artisan_cart.services.cart_service import CartService
from artisan_cart.services.lock_service import ItemLockService
from artisan_cart.services.notification_client import NotificationClient
from artisan_cart.services.notification_service import NotificationBadgeService


def auth_headers(auth_token: str | None = None, csrf_token: str | None = None) -> Dict[str, str]:
    headers = {}
    if auth_token:
        headers["Authorization"] = f"Bearer {auth_token}"
    if csrf_token:
        headers["X-CSRF-TOKEN"] = csrf_token
    return headers


def build_cart_service(
    session_id: str,
    is_authenticated: bool = False,
    auth_token: str | None = None,
    csrf_token: str | None = None,
    store: SlotStore | None = None,
    cart_client: CartApiClient | None = None,
) -> CartService:
    """Sklada CartService dla jednej sesji: sloty per sesja, klient z naglowkami auth."""
    store = store or RedisSlotStore(namespace=f"session:{session_id}")
    client = cart_client or CartApiClient(headers=auth_headers(auth_token, csrf_token))

    return CartService(
        repo=LocalCartRepo(store),
        cart_client=client,
        is_authenticated=is_authenticated,
        lock_service=ItemLockService(),
    )


def build_notification_badge(
    role: str = "buyer",
    initial_unread_count: int = 0,
    auth_token: str | None = None,
    csrf_token: str | None = None,
    client: NotificationClient | None = None,
) -> NotificationBadgeService:
    client = client or NotificationClient(role=role, headers=auth_headers(auth_token, csrf_token))
    return NotificationBadgeService(client, initial_unread_count=initial_unread_count)
