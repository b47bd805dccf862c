"""
Cart Routes for MenuPro
=======================

Endpoints:
----------
- GET /carts/{cart_id}: Cart lines, subtotal and item count
- PATCH /carts/{cart_id}/items/{item_id}: Change a line's quantity (<= 0 removes)
- DELETE /carts/{cart_id}/items/{item_id}: Remove a line
- DELETE /carts/{cart_id}: Empty the cart
- POST /carts/{cart_id}/validate-inventory: Check stock before checkout

Half-and-half pizzas are added through POST /carts/{cart_id}/half-half
(see routes/half_half.py).
"""

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from ..db import get_db
from ..inventory import OutOfStockError, validate_inventory
from ..models import Cart
from ..schemas import CartOut, CartQuantityUpdate, InventoryCheckOut
from ..services.cart import (
    CartItemNotFoundError,
    cart_items,
    cart_to_out,
    clear_cart,
    get_cart,
    remove_item,
    update_quantity,
)

logger = logging.getLogger(__name__)

cart_router = APIRouter(prefix="/carts", tags=["Cart"])


def _get_cart_or_404(db: Session, cart_id: str) -> Cart:
    cart = get_cart(db, cart_id)
    if cart is None:
        raise HTTPException(status_code=404, detail="Cart not found")
    return cart


@cart_router.get("/{cart_id}", response_model=CartOut)
def read_cart(cart_id: str, db: Session = Depends(get_db)) -> CartOut:
    return cart_to_out(_get_cart_or_404(db, cart_id))


@cart_router.patch("/{cart_id}/items/{item_id}", response_model=CartOut)
def update_cart_item(
    cart_id: str,
    item_id: str,
    payload: CartQuantityUpdate,
    db: Session = Depends(get_db),
) -> CartOut:
    cart = _get_cart_or_404(db, cart_id)
    try:
        update_quantity(db, cart, item_id, payload.quantity)
    except CartItemNotFoundError:
        raise HTTPException(status_code=404, detail="Cart item not found")
    return cart_to_out(cart)


@cart_router.delete("/{cart_id}/items/{item_id}", response_model=CartOut)
def delete_cart_item(cart_id: str, item_id: str, db: Session = Depends(get_db)) -> CartOut:
    cart = _get_cart_or_404(db, cart_id)
    try:
        remove_item(db, cart, item_id)
    except CartItemNotFoundError:
        raise HTTPException(status_code=404, detail="Cart item not found")
    return cart_to_out(cart)


@cart_router.delete("/{cart_id}", response_model=CartOut)
def empty_cart(cart_id: str, db: Session = Depends(get_db)) -> CartOut:
    cart = _get_cart_or_404(db, cart_id)
    clear_cart(db, cart)
    return cart_to_out(cart)


@cart_router.post("/{cart_id}/validate-inventory", response_model=InventoryCheckOut)
def validate_cart_inventory(cart_id: str, db: Session = Depends(get_db)) -> InventoryCheckOut:
    """
    Check that the cart can be fulfilled from stock.

    Half-and-half lines are charged to each flavor's product.
    """
    cart = _get_cart_or_404(db, cart_id)
    try:
        validate_inventory(db, cart_items(cart))
    except OutOfStockError as exc:
        logger.info("Cart %s failed inventory validation: %s", cart_id, exc)
        return InventoryCheckOut(
            ok=False,
            message=f"Não há estoque suficiente de {exc.product_name} para este pedido.",
        )
    return InventoryCheckOut(ok=True)
