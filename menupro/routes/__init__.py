"""
Routes Package for MenuPro
==========================

API route definitions organized by domain. Each module defines FastAPI
APIRouters with related endpoints grouped together.

- half_half.py: Half-and-half pizza sizes, options, quotes, add-to-cart
- carts.py: Cart reading, quantity changes, removal, inventory validation

Router Registration:
--------------------
All routers are registered in main.py under two prefixes:
1. /api/v1/* - Versioned API (recommended)
2. /* - Root paths for backward compatibility
"""

from .half_half import half_half_router, half_half_cart_router
from .carts import cart_router

__all__ = [
    "half_half_router",
    "half_half_cart_router",
    "cart_router",
]
