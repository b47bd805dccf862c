"""
Half-and-half (meio a meio) pizza resolver.

Modules:
--------
- sizes.py: size list and per-flavor size prices
- pricing.py: pricing rules, options, discount; preview vs committed price
- option_groups.py: reference flavor, group merge, dough/crust/addon split
- loader.py: read-only database queries with a cancel token
- cart_line.py: the cart line emitted for a finished pizza
- builder.py: the size -> flavors -> options wizard
- errors.py: customer-facing validation errors

Usage:
------
    loader = HalfHalfLoader(db)
    builder = HalfHalfBuilder(settings, flavors, loader).open()
    builder.advance()                      # size -> flavors
    builder.toggle_flavor("p-calabresa")
    builder.toggle_flavor("p-marguerita")
    builder.advance()                      # flavors -> options
    builder.select_option("pizza-dough", dough_id)
    builder.add_to_cart(cart)
"""

from .builder import HalfHalfBuilder, WizardStep
from .errors import (
    BuilderClosedError,
    FlavorCountError,
    HalfHalfDisabledError,
    HalfHalfError,
    InvalidSelectionError,
    LoadCancelledError,
    MaxFlavorsReachedError,
    MissingRequiredOptionError,
    PricingError,
    UnknownFlavorError,
)
from .loader import HalfHalfLoader

__all__ = [
    "HalfHalfBuilder",
    "WizardStep",
    "HalfHalfLoader",
    "HalfHalfError",
    "HalfHalfDisabledError",
    "FlavorCountError",
    "MaxFlavorsReachedError",
    "MissingRequiredOptionError",
    "InvalidSelectionError",
    "UnknownFlavorError",
    "BuilderClosedError",
    "LoadCancelledError",
    "PricingError",
]
