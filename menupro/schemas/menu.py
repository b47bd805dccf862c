"""
Menu Product Schemas for MenuPro
================================

Pydantic models for the menu products that take part in a half-and-half
pizza. Each flavor of a half-and-half pizza is an ordinary product of a pizza
category; the resolver only needs a handful of its fields.

Usage:
------
    product = db.query(Product).filter(Product.id == product_id).one()
    flavor = FlavorProduct.model_validate(product)
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict


class FlavorProduct(BaseModel):
    """
    A candidate flavor for a half-and-half pizza.

    Can be created directly from SQLAlchemy Product objects.

    Attributes:
        id: Product primary key
        name: Display name (e.g., "Calabresa")
        price: Base price of the whole pizza in this flavor
        category_id: Menu category the product belongs to
        description: Optional product description
        image_url: Optional product photo, reused on the cart line
    """
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    price: float
    category_id: Optional[str] = None
    description: Optional[str] = None
    image_url: Optional[str] = None
