"""
Services Package for MenuPro
============================

Service modules that encapsulate persistence concerns shared by the routes.

Available Services:
-------------------
- **cart**: Database-backed customer carts

Usage:
------
    from menupro.services.cart import CartStore, get_cart
"""

from . import cart

__all__ = ["cart"]
