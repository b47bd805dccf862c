"""
Schemas Package for MenuPro
===========================

This package contains the Pydantic models used for API request validation,
response serialization, and the ephemeral values passed between the
half-and-half resolver modules.

Schema Organization:
--------------------
- **menu.py**: Flavor products
- **options.py**: Option groups, options, and selected options
- **pizza.py**: Half-and-half settings, sizes, prices, requests/responses
- **cart.py**: Cart lines and cart responses

Naming Conventions:
-------------------
- *Out: Response models (e.g., CartOut) - what the API returns
- *Request: Request bodies (e.g., HalfHalfSelectionRequest)

Usage:
------
    from menupro.schemas import FlavorProduct, PizzaSize, CartItem
"""

from .menu import FlavorProduct
from .options import (
    GroupKind,
    OptionOut,
    OptionGroupOut,
    SelectedOption,
    OptionChoice,
)
from .pizza import (
    PricingRule,
    OptionsSource,
    PizzaSize,
    HalfHalfSettings,
    PriceBreakdown,
    FlavorHint,
    HalfHalfSizesRequest,
    HalfHalfSelectionRequest,
    SizesOut,
    OptionsOut,
    QuoteOut,
    PizzaSettingsOut,
    PizzaCategorySettingsOut,
    PizzaConfigOut,
)
from .cart import (
    CartItemOption,
    CartItem,
    CartOut,
    CartQuantityUpdate,
    InventoryCheckOut,
)

__all__ = [
    "FlavorProduct",
    "GroupKind",
    "OptionOut",
    "OptionGroupOut",
    "SelectedOption",
    "OptionChoice",
    "PricingRule",
    "OptionsSource",
    "PizzaSize",
    "HalfHalfSettings",
    "PriceBreakdown",
    "FlavorHint",
    "HalfHalfSizesRequest",
    "HalfHalfSelectionRequest",
    "SizesOut",
    "OptionsOut",
    "QuoteOut",
    "PizzaSettingsOut",
    "PizzaCategorySettingsOut",
    "PizzaConfigOut",
    "CartItemOption",
    "CartItem",
    "CartOut",
    "CartQuantityUpdate",
    "InventoryCheckOut",
]
