"""
Option Group Schemas for MenuPro
================================

Pydantic models for product option groups and the choices a customer makes
while assembling a half-and-half pizza.

Hierarchical Structure:
-----------------------
1. **Option Group** (e.g., "Tipo de massa", "Borda", "Adicionais")
   - Has a selection type (single or multiple)
   - May be required, with optional min/max selection counts
   - Has a kind: size, dough, crust or addon

2. **Option** (e.g., "Catupiry", "Cheddar", "Bacon extra")
   - Carries a price modifier added to the pizza price
   - Can be marked unavailable

Example Structure:
------------------
```
Pizza Calabresa
├── Group: "Tamanho" (kind=size, single)
│   ├── Option: "Média" (R$ 42.00, absolute size price)
│   └── Option: "Grande" (R$ 55.00)
├── Group: "Bordas" (kind=crust, single, optional)
│   ├── Option: "Catupiry" (+R$ 8.00)
│   └── Option: "Cheddar" (+R$ 8.00)
└── Group: "Adicionais" (kind=addon, multiple)
    └── Option: "Bacon" (+R$ 5.00)
```

Group Kind:
-----------
The kind is stored explicitly on new groups. Legacy groups with no stored kind
are classified from their name (see half_half.option_groups.infer_group_kind).
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class GroupKind(str, Enum):
    """Role an option group plays in the half-and-half wizard."""
    SIZE = "size"
    DOUGH = "dough"
    CRUST = "crust"
    ADDON = "addon"


class OptionOut(BaseModel):
    """
    A single choice within an option group.

    Attributes:
        id: Option identifier
        name: Display name (e.g., "Catupiry")
        price_modifier: Amount added to the pizza price when chosen
        is_available: Whether the option can currently be chosen
    """
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    price_modifier: float = 0.0
    is_available: bool = True


class OptionGroupOut(BaseModel):
    """
    An option group offered for a half-and-half pizza.

    Groups loaded from the database keep their own ids; synthetic groups built
    from the dough and crust tables use the fixed ids "pizza-dough" and
    "pizza-crust".
    """
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    description: Optional[str] = None
    selection_type: str = "single"
    is_required: bool = False
    max_selections: Optional[int] = None
    min_selections: Optional[int] = None
    kind: Optional[GroupKind] = None
    options: List[OptionOut] = Field(default_factory=list)

    @property
    def is_single(self) -> bool:
        return self.selection_type != "multiple"


class SelectedOption(BaseModel):
    """
    One option chosen by the customer.

    The group kind travels with the selection so pricing can zero the crust
    contribution when the store does not charge for crusts.
    """
    group_id: str
    group_name: str
    group_kind: GroupKind = GroupKind.ADDON
    option_id: str
    option_name: str
    price_modifier: float = 0.0


class OptionChoice(BaseModel):
    """A (group, option) pair sent by the client."""
    group_id: str
    option_id: str
