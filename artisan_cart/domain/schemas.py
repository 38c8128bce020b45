# artisan_cart/domain/schemas.py
from decimal import Decimal, InvalidOperation
from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field, model_validator

from artisan_cart.utils.settings import DEFAULT_MAX_QUANTITY


class SellerRef(BaseModel):
    """Snapshot sprzedawcy zapisany w pozycji koszyka (nie synchronizowany)."""

    id: int | None = None
    name: str = ""


class CartItem(BaseModel):
    """Pozycja koszyka, wspolna dla koszyka goscia i zalogowanego."""

    id: int | str
    product_id: int = Field(..., gt=0)
    name: str
    price: Decimal = Field(..., ge=0)
    quantity: int = Field(..., ge=1)
    primary_image: str | None = None
    seller: SellerRef | None = None
    max_quantity: int = Field(..., ge=1)
    stock_quantity: int | None = None

    model_config = ConfigDict(from_attributes=True)

    @model_validator(mode="before")
    @classmethod
    def _fill_quantity_ceiling(cls, data: Any) -> Any:
        #stock_quantity to alias max_quantity, backend wysyla jedno albo oba
        if isinstance(data, dict):
            data = dict(data)
            if data.get("max_quantity") is None and data.get("stock_quantity") is not None:
                data["max_quantity"] = data["stock_quantity"]
            if data.get("max_quantity") is not None:
                data["stock_quantity"] = data["max_quantity"]
        return data

    @property
    def line_total(self) -> Decimal:
        return self.price * self.quantity


class ProductRef(BaseModel):
    """
    Jeden znormalizowany ksztalt produktu dla koszyka.
    Strony podaja rozne warianty (image vs primary_image, artisan vs seller.name),
    from_payload sprowadza je do tego modelu.
    """

    id: int = Field(..., gt=0)
    name: str
    price: Decimal = Field(Decimal("0"), ge=0)
    primary_image: str | None = None
    seller: SellerRef | None = None
    available_quantity: int | None = Field(None, ge=0)

    @property
    def max_quantity(self) -> int:
        if self.available_quantity is None:
            return DEFAULT_MAX_QUANTITY
        return self.available_quantity

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "ProductRef":
        image = (
            payload.get("primary_image")
            or payload.get("featured_image")
            or payload.get("image")
        )

        seller = None
        raw_seller = payload.get("seller")
        if isinstance(raw_seller, dict):
            seller = SellerRef(
                id=raw_seller.get("id"),
                name=raw_seller.get("business_name") or raw_seller.get("name") or "",
            )
        elif payload.get("artisan"):
            seller = SellerRef(name=str(payload["artisan"]))

        available = None
        for key in ("availableQuantity", "available_quantity", "quantity", "stock_quantity"):
            if payload.get(key) is not None:
                available = int(payload[key])
                break

        return cls(
            id=payload["id"],
            name=payload.get("name") or "",
            price=_parse_price(payload.get("price")),
            primary_image=image,
            seller=seller,
            available_quantity=available,
        )


def _parse_price(value: Any) -> Decimal:
    if value is None or value == "":
        return Decimal("0")
    try:
        price = Decimal(str(value))
    except InvalidOperation:
        return Decimal("0")
    if not price.is_finite() or price < 0:
        return Decimal("0")
    return price


class BadgeUpdate(BaseModel):
    """Payload wysylany subskrybentom po zmianie liczby sztuk w koszyku."""

    count: int = Field(..., ge=0)


class UnreadCountUpdate(BaseModel):
    count: int = Field(..., ge=0)
