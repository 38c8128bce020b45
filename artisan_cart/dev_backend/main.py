# artisan_cart/dev_backend/main.py
from decimal import Decimal
from typing import Any, Dict, List

import uvicorn
from fastapi import FastAPI, HTTPException
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from artisan_cart.utils.logging import get_logger

logger = get_logger(__name__)


#katalog dev mocka
CATALOG = {
    1: {"id": 1, "name": "Abaca Tote Bag", "price": Decimal("850.00"), "quantity": 12,
        "primary_image": "products/abaca-tote.jpg", "seller": {"id": 10, "name": "Bicol Weavers"}},
    2: {"id": 2, "name": "Capiz Shell Lamp", "price": Decimal("1450.50"), "quantity": 3,
        "primary_image": "products/capiz-lamp.jpg", "seller": {"id": 11, "name": "Samar Lights"}},
    3: {"id": 3, "name": "Banig Placemat Set", "price": Decimal("320.00"), "quantity": 40,
        "primary_image": "products/banig-set.jpg", "seller": {"id": 10, "name": "Bicol Weavers"}},
    7: {"id": 7, "name": "Barako Coffee 500g", "price": Decimal("275.00"), "quantity": 4,
        "primary_image": "products/barako.jpg", "seller": {"id": 12, "name": "Batangas Roasters"}},
}

ROLES = ("buyer", "seller", "admin")


class ItemIn(BaseModel):
    product_id: int = Field(..., gt=0)
    quantity: int = Field(..., gt=0)


class RemoveIn(BaseModel):
    product_id: int = Field(..., gt=0)


class TransferItemIn(BaseModel):
    product_id: int = Field(..., gt=0)
    quantity: int = Field(..., gt=0)

    model_config = ConfigDict(extra="ignore")


class TransferIn(BaseModel):
    items: List[TransferItemIn]


class DevState:
    """Stan jednego kupujacego i jego powiadomien, tylko w pamieci."""

    def __init__(self):
        self.lines: Dict[int, Dict[str, Any]] = {}
        self.next_id = 1
        self.unread: Dict[str, set] = {
            "buyer": {"n-1", "n-2"},
            "seller": {"n-3"},
            "admin": set(),
        }

    def add_line(self, product_id: int, quantity: int) -> None:
        line = self.lines.get(product_id)
        if line:
            line["quantity"] += quantity
            return
        self.lines[product_id] = {"id": self.next_id, "product_id": product_id, "quantity": quantity}
        self.next_id += 1

    def serialize(self) -> List[Dict[str, Any]]:
        out = []
        for line in self.lines.values():
            product = CATALOG[line["product_id"]]
            out.append({
                "id": line["id"],
                "product_id": product["id"],
                "name": product["name"],
                "price": float(product["price"]),
                "quantity": line["quantity"],
                "primary_image": product["primary_image"],
                "seller": product["seller"],
                "max_quantity": product["quantity"],
                "stock_quantity": product["quantity"],
            })
        return out

    def total(self) -> Decimal:
        return sum(
            (CATALOG[line["product_id"]]["price"] * line["quantity"] for line in self.lines.values()),
            Decimal("0.00"),
        )

    def count(self) -> int:
        return sum(line["quantity"] for line in self.lines.values())


def _fail(message: str, status_code: int = 400) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "message": message})


def _product_or_404(product_id: int) -> Dict[str, Any]:
    product = CATALOG.get(product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return product


def _role_or_404(role: str) -> str:
    if role not in ROLES:
        raise HTTPException(status_code=404, detail="Unknown role")
    return role


def create_app() -> FastAPI:
    app = FastAPI(title="Artisan Marketplace (dev mock)", version="1.0.0")
    state = DevState()
    app.state.dev = state

    @app.get("/api/cart")
    def get_cart():
        return {
            "items": state.serialize(),
            "cart_total": float(state.total()),
            "item_count": state.count(),
        }

    @app.get("/api/cart/count")
    def get_cart_count():
        return {"count": state.count()}

    @app.post("/api/cart/add")
    def add_to_cart(payload: ItemIn):
        product = _product_or_404(payload.product_id)

        if payload.quantity > product["quantity"]:
            return _fail("Requested quantity not available")

        line = state.lines.get(product["id"])
        if line and line["quantity"] + payload.quantity > product["quantity"]:
            return _fail("Cannot add more items than available in stock")

        state.add_line(product["id"], payload.quantity)
        return {"success": True, "message": "Item added to cart"}

    @app.put("/api/cart/update")
    def update_quantity(payload: ItemIn):
        product = _product_or_404(payload.product_id)
        line = state.lines.get(payload.product_id)
        if not line:
            raise HTTPException(status_code=404, detail="Cart item not found")

        if payload.quantity > product["quantity"]:
            return _fail("Requested quantity not available")

        line["quantity"] = payload.quantity
        return {"success": True, "message": "Cart updated"}

    @app.delete("/api/cart/remove")
    def remove_from_cart(payload: RemoveIn):
        if payload.product_id not in state.lines:
            raise HTTPException(status_code=404, detail="Cart item not found")
        del state.lines[payload.product_id]
        return {"success": True, "message": "Item removed from cart"}

    @app.delete("/api/cart/clear")
    def clear_cart():
        state.lines.clear()
        return {"success": True, "message": "Cart cleared"}

    @app.post("/api/cart/transfer")
    def transfer_cart(payload: TransferIn):
        transferred = 0
        for item in payload.items:
            #ilosci sie sumuja, bez clampa do stanu magazynu
            if item.product_id not in CATALOG:
                logger.warning(f"Product not found during transfer: {item.product_id}")
                continue
            state.add_line(item.product_id, item.quantity)
            transferred += 1

        logger.info(f"Guest cart transferred, items: {transferred}")
        return {
            "success": True,
            "message": "Cart items transferred successfully",
            "cart_total": float(state.total()),
            "items_count": len(state.lines),
        }

    @app.get("/{role}/notifications/unread-count")
    def unread_count(role: str):
        return {"count": len(state.unread[_role_or_404(role)])}

    @app.post("/{role}/notifications/read-all")
    def mark_all_as_read(role: str):
        state.unread[_role_or_404(role)].clear()
        return {"success": True}

    @app.post("/{role}/notifications/{notification_id}/read")
    def mark_as_read(role: str, notification_id: str):
        state.unread[_role_or_404(role)].discard(notification_id)
        return {"success": True}

    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
