# artisan_cart/services/notification_client.py
from artisan_cart.services.api_client import ApiClient
from artisan_cart.utils.settings import NOTIFICATIONS_API_URL


def base_route(role: str) -> str:
    if role == "seller":
        return "seller"
    if role == "administrator":
        return "admin"
    return "buyer"


class NotificationClient(ApiClient):
    def __init__(self, role: str = "buyer", base_url: str | None = None, **kwargs):
        super().__init__(base_url or NOTIFICATIONS_API_URL, **kwargs)
        self.role = role
        self.route = base_route(role)

    def mark_as_read(self, notification_id: str) -> None:
        self._request("POST", f"/{self.route}/notifications/{notification_id}/read", {})

    def mark_all_as_read(self) -> None:
        self._request("POST", f"/{self.route}/notifications/read-all", {})

    def fetch_unread_count(self) -> int:
        data = self._request("GET", f"/{self.route}/notifications/unread-count") or {}
        return int(data.get("count", 0))
