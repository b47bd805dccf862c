"""
Shared slowapi limiter for the public pricing and cart endpoints.

Uses in-memory storage. For multiple workers, pass a storage_uri such as
"redis://..." to the Limiter.
"""

from fastapi import Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from .config import RATE_LIMIT_ENABLED


def get_cart_id_or_ip(request: Request) -> str:
    """Rate limit per cart when the path names one, else per client IP."""
    cart_id = request.path_params.get("cart_id") if request.path_params else None
    if cart_id:
        return f"cart:{cart_id}"
    return get_remote_address(request)


limiter = Limiter(key_func=get_cart_id_or_ip, enabled=RATE_LIMIT_ENABLED)
