"""
Stock validation for cart checkout.

Regular lines consume `quantity` units of their product. Half-and-half lines
consume a fraction of each flavor instead: a two-flavor pizza ordered twice
takes 1.0 unit of each flavor (2 pizzas x 1/2). The flavors come from the
half_half_flavor_product_ids of the line's "Meio a meio" option.

Products with stock_quantity = None are not tracked and always pass.
"""

import logging
from collections import defaultdict
from typing import Dict, Iterable

from sqlalchemy.orm import Session

from .models import Product
from .schemas import CartItem

logger = logging.getLogger(__name__)


class OutOfStockError(Exception):
    """Raised when there is not enough stock to fulfill the cart."""

    def __init__(self, product_name: str, requested: float, available: float):
        self.product_name = product_name
        self.requested = requested
        self.available = available
        super().__init__(
            f"Not enough stock for {product_name}: requested {requested:g}, available {available:g}"
        )


def expand_stock_requirements(items: Iterable[CartItem]) -> Dict[str, float]:
    """Return product_id -> units needed for the given cart lines."""
    needed: Dict[str, float] = defaultdict(float)
    for item in items:
        if item.quantity <= 0:
            continue
        flavor_ids = item.half_half_flavor_product_ids
        if flavor_ids:
            share = item.quantity / len(flavor_ids)
            for product_id in flavor_ids:
                needed[product_id] += share
        else:
            needed[item.product_id] += item.quantity
    return dict(needed)


def validate_inventory(db: Session, items: Iterable[CartItem]) -> Dict[str, float]:
    """
    Check that every tracked product has enough stock.

    Returns:
        The expanded requirements (product_id -> units)

    Raises:
        OutOfStockError: For the first product short of stock
    """
    needed = expand_stock_requirements(items)
    if not needed:
        return needed

    products = db.query(Product).filter(Product.id.in_(list(needed))).all()
    for product in products:
        if product.stock_quantity is None:
            continue
        requested = needed[product.id]
        if product.stock_quantity + 1e-9 < requested:
            raise OutOfStockError(product.name, requested, product.stock_quantity)
    return needed


def apply_inventory_decrement(db: Session, items: Iterable[CartItem]) -> None:
    """Validate, then decrement stock for every tracked product, and commit.

    The caller is responsible for catching OutOfStockError. The decrement is
    committed on its own; it is not part of any cart or order transaction.
    """
    items = list(items)
    needed = validate_inventory(db, items)

    products = db.query(Product).filter(Product.id.in_(list(needed))).all()
    for product in products:
        if product.stock_quantity is None:
            continue
        product.stock_quantity -= needed[product.id]
        logger.debug("Stock of %s now %.2f", product.name, product.stock_quantity)

    db.commit()
