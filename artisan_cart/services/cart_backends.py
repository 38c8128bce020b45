# artisan_cart/services/cart_backends.py
import uuid
from typing import Callable, List

from artisan_cart.domain import cart
from artisan_cart.domain.schemas import CartItem, ProductRef
from artisan_cart.repos.local_cart_repo import LocalCartRepo
from artisan_cart.services.cart_client import CartApiClient
from artisan_cart.utils.logging import get_logger

logger = get_logger(__name__)


def new_guest_item_id() -> str:
    return uuid.uuid4().hex


class GuestCartBackend:
    """Koszyk goscia: caly stan w slocie storage klienta."""

    def __init__(self, repo: LocalCartRepo, id_factory: Callable[[], int | str] | None = None):
        self.repo = repo
        self.id_factory = id_factory or new_guest_item_id

    def load(self) -> List[CartItem]:
        return self.repo.load_items()

    def add(self, items: List[CartItem], product: ProductRef, quantity: int) -> List[CartItem]:
        updated = cart.merge_add(items, product, quantity, new_id=self.id_factory())
        self.repo.save_items(updated)
        return updated

    def remove(self, items: List[CartItem], product_id: int) -> List[CartItem]:
        if cart.find_item(items, product_id) is None:
            return items
        updated = cart.drop(items, product_id)
        self.repo.save_items(updated)
        return updated

    def update(self, items: List[CartItem], product_id: int, quantity: int) -> List[CartItem]:
        if cart.find_item(items, product_id) is None:
            return items
        updated = cart.set_quantity(items, product_id, quantity)
        self.repo.save_items(updated)
        return updated

    def clear(self, items: List[CartItem]) -> List[CartItem]:
        self.repo.clear_items()
        return []


class RemoteCartBackend:
    """
    Koszyk zalogowanego: zrodlem prawdy jest backend.
    Lokalnie nic nie jest zmieniane przed potwierdzeniem, po kazdej mutacji
    stan jest pobierany od nowa.
    """

    def __init__(self, client: CartApiClient):
        self.client = client

    def load(self) -> List[CartItem]:
        return self.client.fetch_cart()

    def add(self, items: List[CartItem], product: ProductRef, quantity: int) -> List[CartItem]:
        #ten sam clamp co u goscia, na serwer idzie tylko roznica
        target = cart.merge_add(items, product, quantity, new_id=0)
        existing = cart.find_item(items, product.id)
        current = existing.quantity if existing else 0
        target_quantity = cart.find_item(target, product.id).quantity
        delta = target_quantity - current

        if delta == 0:
            logger.info(f"Product {product.id} already at its ceiling, nothing to add")
            return items

        if delta < 0:
            #stan magazynu spadl ponizej ilosci w koszyku -> wiersz zbity do sufitu
            logger.info(f"Product {product.id} above available stock, lowering to {target_quantity}")
            self.client.update(product.id, target_quantity)
        else:
            self.client.add(product.id, delta)
        return self.client.fetch_cart()

    def remove(self, items: List[CartItem], product_id: int) -> List[CartItem]:
        if cart.find_item(items, product_id) is None:
            return items
        self.client.remove(product_id)
        return self.client.fetch_cart()

    def update(self, items: List[CartItem], product_id: int, quantity: int) -> List[CartItem]:
        item = cart.find_item(items, product_id)
        if item is None:
            return items
        if quantity <= 0:
            return self.remove(items, product_id)

        self.client.update(product_id, min(quantity, item.max_quantity))
        return self.client.fetch_cart()

    def clear(self, items: List[CartItem]) -> List[CartItem]:
        self.client.clear()
        return self.client.fetch_cart()
