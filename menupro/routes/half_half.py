"""
Half-and-Half Routes for MenuPro
================================

Public endpoints used by the digital menu to assemble a half-and-half pizza.
The wizard itself runs in the browser; each request replays the customer's
selection on a fresh HalfHalfBuilder, so the server keeps no wizard state
between calls.

Endpoints:
----------
- GET /half-half/config/{company_id}: Pizza settings of a company
- POST /half-half/sizes: Sizes and per-flavor size prices
- POST /half-half/options: Dough/crust/addon groups for the selected flavors
- POST /half-half/quote: Running price of the selection
- POST /carts/{cart_id}/half-half: Validate, price and add the pizza to a cart

Errors:
-------
Selection problems ("Selecione 2 sabores para montar a pizza", ...) are
returned as 422 with the customer-facing message as detail.

Usage:
------
    POST /half-half/quote
    {
        "company_id": "c-1",
        "category_id": "cat-pizzas",
        "size_id": "grande",
        "flavor_ids": ["p-calabresa", "p-marguerita"],
        "options": [{"group_id": "pizza-crust", "option_id": "cr-catupiry"}],
        "quantity": 1
    }
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from ..config import get_rate_limit_quote
from ..db import get_db
from ..half_half import (
    HalfHalfBuilder,
    HalfHalfError,
    HalfHalfLoader,
    InvalidSelectionError,
    UnknownFlavorError,
    WizardStep,
)
from ..pizza_config import load_pizza_config, resolve_half_half_settings
from ..rate_limit import limiter
from ..schemas import (
    CartOut,
    HalfHalfSelectionRequest,
    HalfHalfSizesRequest,
    OptionsOut,
    PizzaConfigOut,
    QuoteOut,
    SizesOut,
)
from ..services.cart import CartStore

logger = logging.getLogger(__name__)

half_half_router = APIRouter(prefix="/half-half", tags=["Half-and-Half"])
half_half_cart_router = APIRouter(prefix="/carts", tags=["Cart"])


# =============================================================================
# Helper Functions
# =============================================================================

def _unprocessable(exc: HalfHalfError) -> HTTPException:
    logger.info("Rejected half-and-half selection: %s", exc.message)
    return HTTPException(status_code=422, detail=exc.message)


def _distinct(ids: List[str]) -> List[str]:
    return list(dict.fromkeys(ids))


def _new_builder(db: Session, company_id: str, category_id, product_ids: List[str]) -> HalfHalfBuilder:
    """Load settings and flavors and open a builder positioned on its first step."""
    settings = resolve_half_half_settings(load_pizza_config(db, company_id), category_id)
    loader = HalfHalfLoader(db)

    wanted = _distinct(product_ids)
    flavors = loader.load_flavors(company_id, wanted)
    found = {f.id for f in flavors}
    for product_id in wanted:
        if product_id not in found:
            raise UnknownFlavorError(product_id)

    return HalfHalfBuilder(settings, flavors, loader).open()


def _replay_selection(db: Session, req: HalfHalfSelectionRequest) -> HalfHalfBuilder:
    """Run the size and flavor steps of the wizard for a request."""
    builder = _new_builder(db, req.company_id, req.category_id, req.flavor_ids)
    if not builder.settings.allow_repeated_flavors and len(_distinct(req.flavor_ids)) != len(req.flavor_ids):
        builder.close()
        raise InvalidSelectionError("Cada sabor só pode ser escolhido uma vez")
    if req.size_id:
        builder.select_size(req.size_id)
    if builder.step == WizardStep.SIZE:
        builder.advance()
    for flavor_id in req.flavor_ids:
        builder.toggle_flavor(flavor_id)
    builder.set_quantity(req.quantity)
    return builder


def _apply_options(builder: HalfHalfBuilder, req: HalfHalfSelectionRequest) -> None:
    for choice in req.options:
        builder.select_option(choice.group_id, choice.option_id)


# =============================================================================
# Endpoints
# =============================================================================

@half_half_router.get("/config/{company_id}", response_model=PizzaConfigOut)
def get_pizza_config(
    company_id: str,
    db: Session = Depends(get_db),
) -> PizzaConfigOut:
    """Company pizza settings plus per-category overrides."""
    return load_pizza_config(db, company_id).to_out()


@half_half_router.post("/sizes", response_model=SizesOut)
def list_sizes(
    req: HalfHalfSizesRequest,
    db: Session = Depends(get_db),
) -> SizesOut:
    """
    Sizes offered for a set of candidate flavors.

    An empty list means no size is configured and the menu should go
    straight to flavor selection.
    """
    try:
        builder = _new_builder(db, req.company_id, req.category_id, req.product_ids)
    except HalfHalfError as exc:
        raise _unprocessable(exc)

    try:
        return SizesOut(
            source=builder.sizes.source,
            sizes=builder.sizes.sizes,
            prices_by_product=builder.sizes.prices_by_product,
        )
    finally:
        builder.close()


@half_half_router.post("/options", response_model=OptionsOut)
def list_options(
    req: HalfHalfSelectionRequest,
    db: Session = Depends(get_db),
) -> OptionsOut:
    """Dough, crust and addon groups taken from the reference flavor."""
    try:
        builder = _replay_selection(db, req)
    except HalfHalfError as exc:
        raise _unprocessable(exc)

    try:
        groups = builder.load_options()
        return OptionsOut(
            reference_flavor_id=builder.reference_flavor.id if builder.reference_flavor else None,
            dough=groups.dough,
            crust=groups.crust,
            addons=groups.addons,
        )
    finally:
        builder.close()


@half_half_router.post("/quote", response_model=QuoteOut)
@limiter.limit(get_rate_limit_quote)
def quote_half_half(
    request: Request,
    req: HalfHalfSelectionRequest,
    db: Session = Depends(get_db),
) -> QuoteOut:
    """Running price of a possibly partial selection, with per-flavor hints."""
    try:
        builder = _replay_selection(db, req)
        if req.options:
            _apply_options(builder, req)
    except HalfHalfError as exc:
        raise _unprocessable(exc)

    try:
        return QuoteOut(
            size=builder.selected_size,
            flavors_selected=len(builder.selected_flavors),
            max_flavors=builder.max_flavors,
            price=builder.quote(),
            hints=builder.flavor_hints(),
            selected_options=builder.selected_options,
        )
    finally:
        builder.close()


@half_half_cart_router.post("/{cart_id}/half-half", response_model=CartOut, status_code=201)
@limiter.limit(get_rate_limit_quote)
def add_half_half_to_cart(
    request: Request,
    cart_id: str,
    req: HalfHalfSelectionRequest,
    db: Session = Depends(get_db),
) -> CartOut:
    """Validate the finished pizza, price it, and add it to the cart."""
    builder = None
    try:
        builder = _replay_selection(db, req)
        builder.advance()
        _apply_options(builder, req)
        # A cart holds one store's items; switching company empties it
        cart = CartStore(db, cart_id, company_slug=req.company_id)
        builder.add_to_cart(cart)
    except HalfHalfError as exc:
        raise _unprocessable(exc)
    finally:
        if builder is not None and not builder.is_closed:
            builder.close()

    return cart.to_out()
