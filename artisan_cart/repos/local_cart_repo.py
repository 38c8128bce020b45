# artisan_cart/repos/local_cart_repo.py
from typing import List

from pydantic import TypeAdapter, ValidationError

from artisan_cart.data.slot_store import SlotStore
from artisan_cart.domain.schemas import CartItem
from artisan_cart.utils.settings import (
    CART_COUNT_KEY,
    GUEST_CART_KEY,
    LAST_SEEN_CART_COUNT_KEY,
)
from artisan_cart.utils.logging import get_logger

logger = get_logger(__name__)

_items_adapter = TypeAdapter(List[CartItem])


class LocalCartRepo:
    """
    Sloty klienta:
    - guest_cart: lista pozycji koszyka goscia (json)
    - cart_item_count: ostatnia znana liczba sztuk (badge po przeladowaniu)
    - last_seen_cart_count: czyszczony razem z koszykiem goscia
    """

    def __init__(
        self,
        store: SlotStore,
        cart_key: str = GUEST_CART_KEY,
        count_key: str = CART_COUNT_KEY,
        last_seen_key: str = LAST_SEEN_CART_COUNT_KEY,
    ):
        self.store = store
        self.cart_key = cart_key
        self.count_key = count_key
        self.last_seen_key = last_seen_key

    def has_items_slot(self) -> bool:
        return self.store.get(self.cart_key) is not None

    def load_items(self) -> List[CartItem]:
        raw = self.store.get(self.cart_key)
        if raw is None:
            return []

        try:
            return _items_adapter.validate_json(raw)
        except ValidationError as e:
            #uszkodzony slot traktujemy jak pusty koszyk
            logger.warning(f"Corrupted guest cart in slot '{self.cart_key}', clearing it: {e}")
            self.store.delete(self.cart_key)
            return []

    def save_items(self, items: List[CartItem]) -> None:
        self.store.set(self.cart_key, _items_adapter.dump_json(items).decode("utf-8"))

    def clear_items(self) -> None:
        self.store.delete(self.cart_key)

    def load_item_count(self) -> int:
        raw = self.store.get(self.count_key)
        if raw is None:
            return 0
        try:
            return max(int(raw), 0)
        except ValueError:
            logger.warning(f"Corrupted item count in slot '{self.count_key}', clearing it")
            self.store.delete(self.count_key)
            return 0

    def save_item_count(self, count: int) -> None:
        self.store.set(self.count_key, str(count))

    def clear(self) -> None:
        self.store.delete(self.cart_key, self.count_key, self.last_seen_key)
