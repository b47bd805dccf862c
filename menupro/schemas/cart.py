"""
Cart Schemas for MenuPro
========================

Pydantic models for the customer cart. A cart line stores its unit price and
a list of options; options whose price is already folded into the unit price
carry a price_modifier of 0 so the subtotal does not count them twice.

Half-and-Half Marker:
---------------------
A half-and-half pizza line carries one option named "Meio a meio" whose
half_half_flavor_product_ids lists the product of every flavor. Inventory
validation uses it to charge stock to each flavor instead of to the line's
product_id alone.

    {
        "name": "Meio a meio",
        "price_modifier": 0,
        "half_half_flavor_product_ids": ["p-calabresa", "p-marguerita"]
    }
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class CartItemOption(BaseModel):
    name: str
    price_modifier: float = 0.0
    group_name: Optional[str] = None
    half_half_flavor_product_ids: Optional[List[str]] = None


class CartItem(BaseModel):
    """
    One line of the cart.

    Attributes:
        id: Line identifier, assigned when the line is added
        product_id: Product charged for the line (first flavor for pizzas)
        product_name: Display name (e.g., "Pizza Meio a Meio - Grande")
        price: Unit price with folded-in options and discount
        quantity: Number of units
        options: Descriptive and priced options
        notes: Free-form description shown to the kitchen
        image_url: Photo shown in the cart
        requires_preparation: Whether the kitchen must prepare the item
        promotion_id: Promotion applied to the line, if any
    """
    model_config = ConfigDict(from_attributes=True)

    id: Optional[str] = None
    product_id: str
    product_name: str
    price: float
    quantity: int = Field(default=1, ge=1)
    options: List[CartItemOption] = Field(default_factory=list)
    notes: Optional[str] = None
    image_url: Optional[str] = None
    requires_preparation: bool = False
    promotion_id: Optional[str] = None

    @property
    def half_half_flavor_product_ids(self) -> Optional[List[str]]:
        for option in self.options:
            if option.half_half_flavor_product_ids:
                return option.half_half_flavor_product_ids
        return None


class CartOut(BaseModel):
    cart_id: str
    company_slug: Optional[str] = None
    items: List[CartItem] = Field(default_factory=list)
    subtotal: float = 0.0
    item_count: int = 0


class CartQuantityUpdate(BaseModel):
    quantity: int


class InventoryCheckOut(BaseModel):
    ok: bool
    message: Optional[str] = None
