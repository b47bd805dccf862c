"""
Cart Service for MenuPro
========================

This module stores customer carts in the database. A cart is identified by a
client-generated cart_id and holds its lines as a JSON list (see
schemas.cart.CartItem).

Cart Rules:
-----------
- Each added line gets an id "<product_id>-<epoch ms>-<random suffix>".
- Setting a quantity of 0 or less removes the line.
- Switching a cart to another company clears it; a cart never mixes stores.
- Subtotal = sum of (unit price + option modifiers) * quantity. Half-and-half
  lines carry zero-priced options, so their unit price is used as is.

Usage:
------
    from menupro.services.cart import CartStore

    cart = CartStore(db, cart_id)
    builder.add_to_cart(cart)          # builder calls cart.add_item(line)
    print(cart.subtotal())
"""

import logging
import random
import string
import time
from typing import List, Optional

from sqlalchemy.orm import Session
from sqlalchemy.orm.attributes import flag_modified

from ..models import Cart
from ..schemas import CartItem, CartOut

logger = logging.getLogger(__name__)


class CartItemNotFoundError(LookupError):
    def __init__(self, cart_id: str, item_id: str):
        self.cart_id = cart_id
        self.item_id = item_id
        super().__init__(f"Cart {cart_id} has no item {item_id}")


def _new_item_id(product_id: str) -> str:
    suffix = "".join(random.choices(string.ascii_lowercase + string.digits, k=9))
    return f"{product_id}-{int(time.time() * 1000)}-{suffix}"


# =============================================================================
# Cart Functions
# =============================================================================

def get_cart(db: Session, cart_id: str) -> Optional[Cart]:
    return db.query(Cart).filter(Cart.cart_id == cart_id).one_or_none()


def get_or_create_cart(db: Session, cart_id: str, company_slug: Optional[str] = None) -> Cart:
    cart = get_cart(db, cart_id)
    if cart is None:
        cart = Cart(cart_id=cart_id, company_slug=company_slug, items=[])
        db.add(cart)
        db.commit()
        db.refresh(cart)
        logger.debug("Created cart %s", cart_id)
    return cart


def cart_items(cart: Cart) -> List[CartItem]:
    return [CartItem.model_validate(item) for item in (cart.items or [])]


def _save_items(db: Session, cart: Cart, items: List[CartItem]) -> None:
    cart.items = [item.model_dump() for item in items]
    flag_modified(cart, "items")
    db.commit()
    db.refresh(cart)


def add_item(db: Session, cart: Cart, item: CartItem) -> CartItem:
    """Append a line to the cart and return it with its new id."""
    stored = item.model_copy(update={"id": _new_item_id(item.product_id)})
    items = cart_items(cart)
    items.append(stored)
    _save_items(db, cart, items)
    logger.info("Added %s x%d to cart %s", stored.product_name, stored.quantity, cart.cart_id)
    return stored


def remove_item(db: Session, cart: Cart, item_id: str) -> None:
    items = cart_items(cart)
    remaining = [item for item in items if item.id != item_id]
    if len(remaining) == len(items):
        raise CartItemNotFoundError(cart.cart_id, item_id)
    _save_items(db, cart, remaining)


def update_quantity(db: Session, cart: Cart, item_id: str, quantity: int) -> None:
    """Change a line's quantity; zero or less removes the line."""
    if quantity <= 0:
        remove_item(db, cart, item_id)
        return

    items = cart_items(cart)
    for item in items:
        if item.id == item_id:
            item.quantity = quantity
            break
    else:
        raise CartItemNotFoundError(cart.cart_id, item_id)
    _save_items(db, cart, items)


def clear_cart(db: Session, cart: Cart) -> None:
    _save_items(db, cart, [])


def set_company_slug(db: Session, cart: Cart, slug: str) -> None:
    """Bind the cart to a company, emptying it if it belonged to another one."""
    if cart.company_slug and cart.company_slug != slug:
        logger.info("Cart %s switched from %s to %s; clearing", cart.cart_id, cart.company_slug, slug)
        cart.items = []
        flag_modified(cart, "items")
    cart.company_slug = slug
    db.commit()
    db.refresh(cart)


def cart_subtotal(items: List[CartItem]) -> float:
    total = 0.0
    for item in items:
        options_total = sum(opt.price_modifier for opt in item.options)
        total += (item.price + options_total) * item.quantity
    return round(total, 2)


def cart_item_count(items: List[CartItem]) -> int:
    return sum(item.quantity for item in items)


def cart_to_out(cart: Cart) -> CartOut:
    items = cart_items(cart)
    return CartOut(
        cart_id=cart.cart_id,
        company_slug=cart.company_slug,
        items=items,
        subtotal=cart_subtotal(items),
        item_count=cart_item_count(items),
    )


# =============================================================================
# Cart Store
# =============================================================================

class CartStore:
    """
    A cart bound to a database session.

    This is the collaborator the half-and-half builder hands its finished
    line to (it only needs add_item).
    """

    def __init__(self, db: Session, cart_id: str, company_slug: Optional[str] = None):
        self.db = db
        self.cart = get_or_create_cart(db, cart_id, company_slug)
        if company_slug:
            set_company_slug(db, self.cart, company_slug)

    @property
    def cart_id(self) -> str:
        return self.cart.cart_id

    @property
    def items(self) -> List[CartItem]:
        return cart_items(self.cart)

    def add_item(self, item: CartItem) -> CartItem:
        return add_item(self.db, self.cart, item)

    def remove_item(self, item_id: str) -> None:
        remove_item(self.db, self.cart, item_id)

    def update_quantity(self, item_id: str, quantity: int) -> None:
        update_quantity(self.db, self.cart, item_id, quantity)

    def clear(self) -> None:
        clear_cart(self.db, self.cart)

    def subtotal(self) -> float:
        return cart_subtotal(self.items)

    def item_count(self) -> int:
        return cart_item_count(self.items)

    def to_out(self) -> CartOut:
        return cart_to_out(self.cart)
