"""
Size resolution for half-and-half pizzas.

Sizes come from one of two places:

1. Per-product size groups: each flavor may carry an option group named like
   "Tamanho" whose options are sizes priced absolutely (the option's
   price_modifier is the whole-pizza price in that size, not a delta). The
   displayed size list is the union of the sizes seen across flavors, and each
   flavor keeps its own price for each size.

2. Category sizes: when no flavor has a size group, the category's
   pizza_category_sizes table is used and its flat base_price applies to every
   flavor.
"""

import unicodedata
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional

from ..config import DEFAULT_SLICES
from ..schemas import FlavorProduct, PizzaSize

SOURCE_PRODUCT = "product"
SOURCE_CATEGORY = "category"


def normalize_size_key(value: str | None) -> str:
    """Lowercase, strip accents and surrounding whitespace ("Média " -> "media")."""
    decomposed = unicodedata.normalize("NFD", (value or "").lower())
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return stripped.strip()


def estimate_slices(size_name: str) -> int:
    """Guess the slice count of a size from its name.

    Examples:
        "broto" -> 4
        "media" -> 6
        "grande" -> 8
        "gigante" -> 10
    """
    name = normalize_size_key(size_name)
    if "pequen" in name or "broto" in name or "individual" in name:
        return 4
    if "medi" in name:
        return 6
    if "grand" in name or "famil" in name:
        return 8
    if "giga" in name or "extra" in name:
        return 10
    return DEFAULT_SLICES


def _title(key: str) -> str:
    return " ".join(word[:1].upper() + word[1:] for word in key.split(" "))


@dataclass
class SizeResolution:
    """Sizes on offer plus, for product sizes, each flavor's price per size."""

    source: Optional[str] = None
    sizes: List[PizzaSize] = field(default_factory=list)
    # product_id -> normalized size key -> price
    prices_by_product: Dict[str, Dict[str, float]] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return not self.sizes

    def find(self, size_id: str) -> Optional[PizzaSize]:
        for size in self.sizes:
            if size.id == size_id:
                return size
        return None


def build_size_price_map(options: Iterable[Mapping]) -> Dict[str, float]:
    """
    Map the available options of one flavor's size group to their prices.

    Unavailable options, blank names and non-positive prices are skipped.
    """
    prices: Dict[str, float] = {}
    for option in options:
        if not option.get("is_available", True):
            continue
        key = normalize_size_key(option.get("name"))
        price = float(option.get("price_modifier") or 0)
        if key and price > 0:
            prices[key] = price
    return prices


def resolve_product_sizes(
    flavors: List[FlavorProduct],
    size_options_by_product: Mapping[str, Iterable[Mapping]],
    max_flavors: int,
) -> SizeResolution:
    """
    Build the size list from per-product size groups.

    Args:
        flavors: Candidate flavor products
        size_options_by_product: product_id -> options of its size group
        max_flavors: Flavors allowed per pizza

    Returns:
        A SizeResolution with source "product", or an empty resolution if no
        flavor has a usable size option.
    """
    prices_by_product: Dict[str, Dict[str, float]] = {}
    all_keys: Dict[str, None] = {}

    for flavor in flavors:
        price_map = build_size_price_map(size_options_by_product.get(flavor.id, []))
        if price_map:
            prices_by_product[flavor.id] = price_map
            for key in price_map:
                all_keys.setdefault(key, None)

    if not prices_by_product:
        return SizeResolution()

    sizes = []
    for key in all_keys:
        prices = [
            prices_by_product[f.id][key]
            for f in flavors
            if key in prices_by_product.get(f.id, {})
        ]
        sizes.append(PizzaSize(
            id=key,
            name=_title(key),
            base_price=min(prices) if prices else 0.0,
            max_flavors=max_flavors,
            slices=estimate_slices(key),
        ))

    # Largest first; sorted() is stable so equal slice counts keep first-seen order
    sizes = sorted(sizes, key=lambda s: s.slices, reverse=True)
    return SizeResolution(source=SOURCE_PRODUCT, sizes=sizes, prices_by_product=prices_by_product)


def resolve_category_sizes(rows: Iterable, default_max_flavors: int) -> SizeResolution:
    """Build the size list from pizza_category_sizes rows (fallback path)."""
    sizes = [
        PizzaSize(
            id=str(row.id),
            name=row.name,
            base_price=float(row.base_price or 0),
            max_flavors=row.max_flavors or default_max_flavors,
            slices=row.slices if row.slices is not None else DEFAULT_SLICES,
        )
        for row in rows
    ]
    if not sizes:
        return SizeResolution()
    sizes = sorted(sizes, key=lambda s: s.slices, reverse=True)
    return SizeResolution(source=SOURCE_CATEGORY, sizes=sizes)


def flavor_price_for_size(
    flavor: FlavorProduct,
    size: Optional[PizzaSize],
    resolution: SizeResolution,
) -> float:
    """
    Price of one whole pizza of this flavor in the given size.

    Product sizes use the flavor's own price for the size, falling back to the
    flavor's base price when the flavor does not list that size. Category
    sizes charge the size's flat price regardless of flavor.
    """
    if size is None:
        return float(flavor.price)

    if resolution.source == SOURCE_CATEGORY:
        if size.base_price > 0:
            return float(size.base_price)
        return float(flavor.price)

    price = resolution.prices_by_product.get(flavor.id, {}).get(normalize_size_key(size.name))
    if price is not None and price > 0:
        return price
    return float(flavor.price)


def half_price_hint(price: float, max_flavors: int) -> float:
    """Display-only fraction price of one flavor ("½ R$ 24.00").

    Not guaranteed to add up to the committed price: under the "highest"
    rule the pizza costs the priciest flavor, not the sum of fractions.
    """
    if max_flavors < 1:
        return float(price)
    return price / max_flavors
