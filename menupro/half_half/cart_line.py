"""
Cart line emission for a finished half-and-half pizza.
"""

from typing import List, Optional

from ..config import HALF_HALF_OPTION_NAME
from ..schemas import CartItem, CartItemOption, FlavorProduct, PizzaSize, SelectedOption


def build_cart_line(
    flavors: List[FlavorProduct],
    size: Optional[PizzaSize],
    selected_options: List[SelectedOption],
    unit_price: float,
    quantity: int,
) -> CartItem:
    """
    Build the cart line for a half-and-half pizza.

    Every option is listed with a zero modifier because the unit price already
    includes them. The "Meio a meio" option carries the flavor product ids used
    later to charge stock to each flavor.
    """
    if not flavors:
        raise ValueError("A half-and-half cart line needs at least one flavor")

    flavors_text = " + ".join(f.name for f in flavors)
    size_text = f" - {size.name}" if size else ""
    slices_text = f" | {size.slices} fatias" if size else ""

    options = [
        CartItemOption(
            name=HALF_HALF_OPTION_NAME,
            price_modifier=0,
            half_half_flavor_product_ids=[f.id for f in flavors],
        )
    ]
    if size:
        options.append(CartItemOption(name=f"Tamanho: {size.name}", price_modifier=0))
    options.extend(
        CartItemOption(name=f"Sabor {idx}: {flavor.name}", price_modifier=0)
        for idx, flavor in enumerate(flavors, start=1)
    )
    options.extend(
        CartItemOption(
            name=f"{opt.group_name}: {opt.option_name}",
            price_modifier=0,
            group_name=opt.group_name,
        )
        for opt in selected_options
    )

    return CartItem(
        product_id=flavors[0].id,
        product_name=f"Pizza Meio a Meio{size_text}",
        price=unit_price,
        quantity=quantity,
        image_url=flavors[0].image_url,
        notes=f"Sabores: {flavors_text}{slices_text}",
        options=options,
        requires_preparation=True,
    )
