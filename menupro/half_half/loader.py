"""
Read-only queries backing the half-and-half wizard.

All reads filter by id and order by sort_order. The loader checks its cancel
token before every query: once the owning builder is closed, the next query
raises LoadCancelledError and whatever was fetched so far is dropped.

Database errors are not handled here; the builder catches them at the top of
each load and falls back to an empty state.
"""

import logging
import threading
from typing import Dict, List, Optional

from sqlalchemy import and_, func, or_
from sqlalchemy.orm import Session, selectinload

from ..models import (
    PizzaCategorySize,
    PizzaCrustFlavor,
    PizzaDoughType,
    PizzaProductCrustFlavor,
    Product,
    ProductOptionGroup,
)
from ..schemas import FlavorProduct, GroupKind, OptionGroupOut, OptionOut
from .errors import LoadCancelledError

logger = logging.getLogger(__name__)


class HalfHalfLoader:
    """
    Fetches sizes, option groups, dough types and crust flavors.

    Args:
        db: SQLAlchemy session
        cancel_event: Set by the builder on close; checked before each query
    """

    def __init__(self, db: Session, cancel_event: Optional[threading.Event] = None):
        self.db = db
        self.cancel_event = cancel_event or threading.Event()

    def _check_cancelled(self) -> None:
        if self.cancel_event.is_set():
            raise LoadCancelledError()

    # =========================================================================
    # Products
    # =========================================================================

    def load_flavors(self, company_id: str, product_ids: List[str]) -> List[FlavorProduct]:
        """Active products of the company, in the order the ids were given."""
        self._check_cancelled()
        rows = (
            self.db.query(Product)
            .filter(
                Product.company_id == company_id,
                Product.id.in_(product_ids),
                Product.is_active.is_(True),
            )
            .all()
        )
        by_id = {row.id: row for row in rows}
        return [FlavorProduct.model_validate(by_id[pid]) for pid in product_ids if pid in by_id]

    # =========================================================================
    # Sizes
    # =========================================================================

    def load_size_options(self, product_ids: List[str]) -> Dict[str, List[dict]]:
        """
        Options of each product's size group.

        A size group is one stored with kind "size", or a legacy group whose
        name contains "tamanho". Only the first such group per product counts.
        """
        self._check_cancelled()
        groups = (
            self.db.query(ProductOptionGroup)
            .options(selectinload(ProductOptionGroup.options))
            .filter(
                ProductOptionGroup.product_id.in_(product_ids),
                or_(
                    ProductOptionGroup.kind == GroupKind.SIZE.value,
                    and_(
                        ProductOptionGroup.kind.is_(None),
                        func.lower(ProductOptionGroup.name).like("%tamanho%"),
                    ),
                ),
            )
            .order_by(ProductOptionGroup.sort_order)
            .all()
        )

        options_by_product: Dict[str, List[dict]] = {}
        for group in groups:
            if group.product_id in options_by_product:
                continue
            options_by_product[group.product_id] = [
                {
                    "id": opt.id,
                    "name": opt.name,
                    "price_modifier": opt.price_modifier,
                    "is_available": opt.is_available,
                }
                for opt in group.options
            ]
        return options_by_product

    def load_category_sizes(self, category_id: str) -> List[PizzaCategorySize]:
        self._check_cancelled()
        return (
            self.db.query(PizzaCategorySize)
            .filter(PizzaCategorySize.category_id == category_id)
            .order_by(PizzaCategorySize.sort_order)
            .all()
        )

    # =========================================================================
    # Options
    # =========================================================================

    def load_option_groups(self, product_id: str) -> List[OptionGroupOut]:
        """Option groups of one product with their available options."""
        self._check_cancelled()
        groups = (
            self.db.query(ProductOptionGroup)
            .options(selectinload(ProductOptionGroup.options))
            .filter(ProductOptionGroup.product_id == product_id)
            .order_by(ProductOptionGroup.sort_order)
            .all()
        )
        return [
            OptionGroupOut(
                id=group.id,
                name=group.name,
                description=group.description,
                selection_type=group.selection_type,
                is_required=group.is_required,
                max_selections=group.max_selections,
                min_selections=group.min_selections,
                kind=group.kind,
                options=[
                    OptionOut.model_validate(opt)
                    for opt in group.options
                    if opt.is_available
                ],
            )
            for group in groups
        ]

    def load_dough_types(self, company_id: str) -> List[PizzaDoughType]:
        self._check_cancelled()
        return (
            self.db.query(PizzaDoughType)
            .filter(
                PizzaDoughType.company_id == company_id,
                PizzaDoughType.active.is_(True),
            )
            .order_by(PizzaDoughType.sort_order)
            .all()
        )

    def load_crust_flavors(self, product_id: str) -> List[PizzaCrustFlavor]:
        """Crust flavors linked to a product (inactive ones included, filtered later)."""
        self._check_cancelled()
        return (
            self.db.query(PizzaCrustFlavor)
            .join(PizzaProductCrustFlavor, PizzaProductCrustFlavor.crust_flavor_id == PizzaCrustFlavor.id)
            .filter(PizzaProductCrustFlavor.product_id == product_id)
            .order_by(PizzaCrustFlavor.sort_order)
            .all()
        )
