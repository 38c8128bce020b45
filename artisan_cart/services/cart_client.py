# artisan_cart/services/cart_client.py
from typing import List

from artisan_cart.domain.schemas import CartItem
from artisan_cart.services.api_client import ApiClient
from artisan_cart.utils.settings import CART_API_URL


class CartApiClient(ApiClient):
    """Klient zdalnego koszyka zalogowanego uzytkownika."""

    def __init__(self, base_url: str | None = None, **kwargs):
        super().__init__(base_url or CART_API_URL, **kwargs)

    def fetch_cart(self) -> List[CartItem]:
        data = self._request("GET", "/cart") or {}
        return [CartItem.model_validate(i) for i in data.get("items", [])]

    def fetch_count(self) -> int:
        data = self._request("GET", "/cart/count") or {}
        return int(data.get("count", 0))

    def add(self, product_id: int, quantity: int) -> None:
        self._request("POST", "/cart/add", {"product_id": product_id, "quantity": quantity})

    def remove(self, product_id: int) -> None:
        self._request("DELETE", "/cart/remove", {"product_id": product_id})

    def update(self, product_id: int, quantity: int) -> None:
        self._request("PUT", "/cart/update", {"product_id": product_id, "quantity": quantity})

    def clear(self) -> None:
        self._request("DELETE", "/cart/clear")

    def transfer(self, items: List[CartItem]) -> None:
        self._request(
            "POST",
            "/cart/transfer",
            {"items": [i.model_dump(mode="json") for i in items]},
        )
