import itertools
from decimal import Decimal
from typing import Dict, List

import pytest

from artisan_cart.data.slot_store import MemorySlotStore
from artisan_cart.domain.errors import RemoteCallError
from artisan_cart.domain.schemas import CartItem, ProductRef, SellerRef
from artisan_cart.repos.local_cart_repo import LocalCartRepo
from artisan_cart.services.cart_service import CartService


def make_product(product_id: int = 7, price: str = "100.00", available: int | None = 10, **extra) -> ProductRef:
    return ProductRef(
        id=product_id,
        name=extra.get("name", f"Product {product_id}"),
        price=Decimal(price),
        primary_image=extra.get("primary_image", f"products/{product_id}.jpg"),
        seller=SellerRef(id=1, name="Bicol Weavers"),
        available_quantity=available,
    )


class FakeCartClient:
    """In-memory stand-in for CartApiClient that records every call."""

    def __init__(self, catalog: Dict[int, ProductRef] | None = None):
        self.catalog = catalog or {}
        self.lines: Dict[int, CartItem] = {}
        self.calls: List[tuple] = []
        self.fail_on: set = set()
        self._ids = itertools.count(1000)

    def _call(self, name: str, *args) -> None:
        self.calls.append((name, *args))
        if name in self.fail_on:
            raise RemoteCallError(f"{name} failed", status_code=500)

    def call_names(self) -> List[str]:
        return [c[0] for c in self.calls]

    def _product(self, product_id: int) -> ProductRef:
        return self.catalog.get(product_id) or make_product(product_id)

    def _put(self, product_id: int, quantity: int) -> None:
        product = self._product(product_id)
        self.lines[product_id] = CartItem(
            id=next(self._ids),
            product_id=product_id,
            name=product.name,
            price=product.price,
            quantity=quantity,
            primary_image=product.primary_image,
            seller=product.seller,
            max_quantity=product.max_quantity,
        )

    def seed(self, product_id: int, quantity: int, available: int | None = 10) -> None:
        self.catalog[product_id] = make_product(product_id, available=available)
        self._put(product_id, quantity)

    def fetch_cart(self) -> List[CartItem]:
        self._call("fetch_cart")
        return list(self.lines.values())

    def fetch_count(self) -> int:
        self._call("fetch_count")
        return sum(i.quantity for i in self.lines.values())

    def add(self, product_id: int, quantity: int) -> None:
        self._call("add", product_id, quantity)
        current = self.lines[product_id].quantity if product_id in self.lines else 0
        self._put(product_id, current + quantity)

    def remove(self, product_id: int) -> None:
        self._call("remove", product_id)
        self.lines.pop(product_id, None)

    def update(self, product_id: int, quantity: int) -> None:
        self._call("update", product_id, quantity)
        self._put(product_id, quantity)

    def clear(self) -> None:
        self._call("clear")
        self.lines.clear()

    def transfer(self, items: List[CartItem]) -> None:
        self._call("transfer", [i.product_id for i in items])
        for item in items:
            current = self.lines[item.product_id].quantity if item.product_id in self.lines else 0
            self._put(item.product_id, current + item.quantity)


@pytest.fixture
def store():
    return MemorySlotStore()


@pytest.fixture
def repo(store):
    return LocalCartRepo(store)


@pytest.fixture
def client():
    return FakeCartClient()


@pytest.fixture
def id_factory():
    counter = itertools.count(1)
    return lambda: f"guest-{next(counter)}"


@pytest.fixture
def guest_service(repo, client, id_factory):
    return CartService(repo, client, is_authenticated=False, id_factory=id_factory)


@pytest.fixture
def auth_service(repo, client, id_factory):
    return CartService(repo, client, is_authenticated=True, id_factory=id_factory)
