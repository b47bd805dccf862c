"""
Configuration Module for MenuPro
================================

This module centralizes the configuration settings, environment variables, and
constants used throughout the MenuPro half-and-half pizza service. Values are
parsed at module load time so configuration errors surface early, and every
setting can be overridden per environment without code changes.

Configuration Categories:
-------------------------
- **Database**: Connection URL for the SQLAlchemy engine.

- **Half-and-Half Defaults**: Fallback values used when a company or category
  has no pizza configuration stored. Stores normally override these through the
  pizza_settings / pizza_category_settings tables.

- **Rate Limiting**: Controls request throttling on the pricing and cart
  endpoints. Uses slowapi with in-memory storage.

- **CORS Settings**: Cross-Origin Resource Sharing configuration for the
  digital menu front-end. Defaults allow all origins for development.

Environment Variables:
----------------------
- DATABASE_URL: SQLAlchemy URL (default: "sqlite:///./menupro.db")
- DEFAULT_MAX_FLAVORS: Flavors per half-and-half pizza (default: 2)
- DEFAULT_PRICING_RULE: highest, average or sum (default: "average")
- DEFAULT_OPTIONS_SOURCE: highest, lowest or first (default: "highest")
- RATE_LIMIT_QUOTE: Pricing/cart endpoint rate limit (default: "60 per minute")
- RATE_LIMIT_ENABLED: Enable/disable rate limiting (default: "true")
- CORS_ORIGINS: Comma-separated allowed origins (default: "*")

Usage:
------
    from menupro.config import (
        DEFAULT_MAX_FLAVORS,
        DEFAULT_PRICING_RULE,
        RATE_LIMIT_QUOTE,
    )
"""

import os
from typing import List


# =============================================================================
# Database Configuration
# =============================================================================

DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./menupro.db")


# =============================================================================
# Half-and-Half Defaults
# =============================================================================
# Used when neither the company nor the category stores a value.

DEFAULT_MAX_FLAVORS: int = int(os.getenv("DEFAULT_MAX_FLAVORS", "2"))

# One of: "highest", "average", "sum"
DEFAULT_PRICING_RULE: str = os.getenv("DEFAULT_PRICING_RULE", "average")

# Which flavor supplies dough/crust/addon groups: "highest", "lowest", "first"
DEFAULT_OPTIONS_SOURCE: str = os.getenv("DEFAULT_OPTIONS_SOURCE", "highest")

# Slice count assumed when a size row does not define one
DEFAULT_SLICES: int = 8

# Label of the sentinel cart option that carries the flavor product ids
HALF_HALF_OPTION_NAME: str = "Meio a meio"


# =============================================================================
# Rate Limiting Configuration
# =============================================================================
# Rate limit format: "X per Y" where Y is second, minute, hour, or day

RATE_LIMIT_QUOTE: str = os.getenv("RATE_LIMIT_QUOTE", "60 per minute")
RATE_LIMIT_ENABLED: bool = os.getenv("RATE_LIMIT_ENABLED", "true").lower() == "true"


def get_rate_limit_quote() -> str:
    """
    Return the current pricing endpoint rate limit.

    This function allows dynamic override in tests without modifying
    the module-level constant.
    """
    return RATE_LIMIT_QUOTE


# =============================================================================
# CORS Configuration
# =============================================================================
# Format: comma-separated list of origins, e.g. "https://menu.example.com"

_cors_origins_env = os.getenv("CORS_ORIGINS", "")
CORS_ORIGINS: List[str] = [
    origin.strip()
    for origin in _cors_origins_env.split(",")
    if origin.strip()
] or ["*"]
