# artisan_cart/domain/cart.py
from decimal import Decimal
from typing import List

from artisan_cart.domain.schemas import CartItem, ProductRef


def find_item(items: List[CartItem], product_id: int) -> CartItem | None:
    for item in items:
        if item.product_id == product_id:
            return item
    return None


def merge_add(
    items: List[CartItem],
    product: ProductRef,
    quantity: int,
    new_id: int | str,
) -> List[CartItem]:
    """
    Dodanie produktu, jeden wiersz na product_id:
    - istnieje -> min(stara ilosc + quantity, max produktu)
    - nie istnieje -> nowy wiersz z min(quantity, max produktu)
    """
    if quantity <= 0:
        raise ValueError("Quantity must be greater than 0")

    ceiling = product.max_quantity
    existing = find_item(items, product.id)

    if existing:
        new_quantity = min(existing.quantity + quantity, ceiling)
        if new_quantity < 1:
            raise ValueError(f"Product {product.id} is out of stock")
        return [
            i.model_copy(update={"quantity": new_quantity}) if i.product_id == product.id else i
            for i in items
        ]

    new_quantity = min(quantity, ceiling)
    if new_quantity < 1:
        raise ValueError(f"Product {product.id} is out of stock")

    new_item = CartItem(
        id=new_id,
        product_id=product.id,
        name=product.name,
        price=product.price,
        quantity=new_quantity,
        primary_image=product.primary_image,
        seller=product.seller,
        max_quantity=ceiling,
    )
    return [*items, new_item]


def drop(items: List[CartItem], product_id: int) -> List[CartItem]:
    return [i for i in items if i.product_id != product_id]


def set_quantity(items: List[CartItem], product_id: int, quantity: int) -> List[CartItem]:
    if quantity <= 0:
        return drop(items, product_id)

    return [
        i.model_copy(update={"quantity": min(quantity, i.max_quantity)})
        if i.product_id == product_id
        else i
        for i in items
    ]


def total_items(items: List[CartItem]) -> int:
    return sum(i.quantity for i in items)


def total_amount(items: List[CartItem]) -> Decimal:
    return sum((i.line_total for i in items), Decimal("0.00"))
