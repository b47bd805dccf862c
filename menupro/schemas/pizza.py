"""
Half-and-Half Pizza Schemas for MenuPro
=======================================

Pydantic models for the half-and-half (meio a meio) pizza flow: the merged
company/category settings, resolved sizes, price breakdowns, and the request
and response bodies of the /half-half endpoints.

Endpoint Coverage:
------------------
- GET /half-half/config/{company_id}: Company pizza configuration
- POST /half-half/sizes: Sizes available for a set of flavors
- POST /half-half/options: Dough, crust and addon groups for a selection
- POST /half-half/quote: Running price of a (possibly partial) selection
- POST /carts/{cart_id}/half-half: Add a finished pizza to a cart

Pricing Rules:
--------------
- "highest": the pizza costs as much as its most expensive flavor
- "average": the pizza costs the average of its flavors
- "sum": one fraction of each flavor, which for a full pizza equals the average

Options Source:
---------------
The reference flavor whose option groups populate the options step:
- "highest": most expensive flavor (default)
- "lowest": cheapest flavor
- "first": first flavor picked
"""

from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .options import OptionChoice, OptionGroupOut, SelectedOption


class PricingRule(str, Enum):
    HIGHEST = "highest"
    AVERAGE = "average"
    SUM = "sum"


class OptionsSource(str, Enum):
    HIGHEST = "highest"
    LOWEST = "lowest"
    FIRST = "first"


class PizzaSize(BaseModel):
    """
    A size offered in the size step.

    Sizes built from per-product size groups use the normalized size name as
    their id; sizes from the category table keep their row id.

    Attributes:
        id: Size identifier
        name: Display name (e.g., "Grande")
        base_price: Lowest flavor price for this size (product sizes) or the
                    flat category price (category sizes)
        max_flavors: Flavors allowed in this size
        slices: Number of slices, shown to the customer
    """
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    base_price: float = 0.0
    max_flavors: int = 2
    slices: int = 8


class HalfHalfSettings(BaseModel):
    """
    Effective configuration of one half-and-half pizza, merged from the
    company's pizza_settings and the category's pizza_category_settings.
    """
    company_id: str
    category_id: Optional[str] = None
    max_flavors: int = Field(default=2, ge=1)
    enable_crust: bool = True
    enable_addons: bool = True
    allow_crust_extra_price: bool = True
    pricing_rule: PricingRule = PricingRule.AVERAGE
    discount_percentage: float = Field(default=0.0, ge=0, le=100)
    options_source: OptionsSource = OptionsSource.HIGHEST
    allow_repeated_flavors: bool = False
    dough_is_required: bool = True
    dough_max_selections: int = 1
    crust_is_required: bool = False
    crust_max_selections: int = 1


class PriceBreakdown(BaseModel):
    """
    Price of a half-and-half pizza.

    Attributes:
        base_price: Price from the flavors after applying the pricing rule
        options_price: Sum of the chosen option modifiers
        subtotal: base_price + options_price
        discount: Amount removed by the category discount
        unit_price: subtotal - discount
        quantity: Number of pizzas
        total: unit_price * quantity
        is_partial: True while fewer flavors than allowed are selected
    """
    base_price: float
    options_price: float
    subtotal: float
    discount: float
    unit_price: float
    quantity: int
    total: float
    is_partial: bool


class FlavorHint(BaseModel):
    """Display-only fraction price shown next to each flavor ("½ R$ 24.00")."""
    product_id: str
    name: str
    size_price: float
    fraction_price: float


# =============================================================================
# Request Schemas
# =============================================================================

class HalfHalfSizesRequest(BaseModel):
    company_id: str
    category_id: Optional[str] = None
    product_ids: List[str] = Field(min_length=1)


class HalfHalfSelectionRequest(BaseModel):
    """
    A customer's half-and-half selection, as sent by the menu front-end.

    Used for options lookup, quoting, and adding to the cart. The server
    replays the wizard from scratch for every request.
    """
    company_id: str
    category_id: Optional[str] = None
    size_id: Optional[str] = None
    flavor_ids: List[str] = Field(default_factory=list)
    options: List[OptionChoice] = Field(default_factory=list)
    quantity: int = Field(default=1, ge=1)


# =============================================================================
# Response Schemas
# =============================================================================

class SizesOut(BaseModel):
    source: Optional[str] = None
    sizes: List[PizzaSize] = Field(default_factory=list)
    prices_by_product: Dict[str, Dict[str, float]] = Field(default_factory=dict)


class OptionsOut(BaseModel):
    reference_flavor_id: Optional[str] = None
    dough: List[OptionGroupOut] = Field(default_factory=list)
    crust: List[OptionGroupOut] = Field(default_factory=list)
    addons: List[OptionGroupOut] = Field(default_factory=list)


class QuoteOut(BaseModel):
    size: Optional[PizzaSize] = None
    flavors_selected: int
    max_flavors: int
    price: Optional[PriceBreakdown] = None
    hints: List[FlavorHint] = Field(default_factory=list)
    selected_options: List[SelectedOption] = Field(default_factory=list)


class PizzaSettingsOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    company_id: str
    enable_half_half: bool = True
    enable_crust: bool = True
    enable_addons: bool = True
    max_flavors: int = 2
    allow_crust_extra_price: bool = True


class PizzaCategorySettingsOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    category_id: str
    allow_half_half: bool = True
    max_flavors: Optional[int] = None
    half_half_pricing_rule: Optional[str] = None
    half_half_discount_percentage: float = 0.0
    allow_repeated_flavors: bool = False
    half_half_options_source: Optional[str] = None
    dough_max_selections: int = 1
    dough_is_required: bool = True
    crust_max_selections: int = 1
    crust_is_required: bool = False


class PizzaConfigOut(BaseModel):
    settings: Optional[PizzaSettingsOut] = None
    category_settings: Dict[str, PizzaCategorySettingsOut] = Field(default_factory=dict)
    pizza_category_ids: List[str] = Field(default_factory=list)
