"""
Option group merging and categorization for half-and-half pizzas.

The options step of the wizard offers three kinds of groups, all taken from a
single reference flavor:

- dough: the company's pizza_dough_types as one synthetic group when any
  exist, otherwise the reference flavor's own dough groups
- crust: the crust flavors linked to the reference flavor as one synthetic
  group, plus the flavor's own crust groups
- addons: every remaining group

Groups with the same name and selection type are merged into one, with their
options unioned by name.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

from ..schemas import (
    FlavorProduct,
    GroupKind,
    OptionGroupOut,
    OptionOut,
    OptionsSource,
)

logger = logging.getLogger(__name__)

DOUGH_GROUP_ID = "pizza-dough"
DOUGH_GROUP_NAME = "Tipo de massa"
CRUST_GROUP_ID = "pizza-crust"
CRUST_GROUP_NAME = "Borda"

# Legacy name keywords, used only for groups stored without a kind
_SIZE_KEYWORDS = ("tamanho",)
_DOUGH_KEYWORDS = ("massa", "dough")
_CRUST_KEYWORDS = ("borda", "crust", "rechead")


def normalize_name(value: str | None) -> str:
    return (value or "").lower().strip()


def infer_group_kind(name: str | None) -> GroupKind:
    """Classify a legacy group by its (Portuguese) name."""
    normalized = normalize_name(name)
    if any(k in normalized for k in _SIZE_KEYWORDS):
        return GroupKind.SIZE
    if any(k in normalized for k in _DOUGH_KEYWORDS):
        return GroupKind.DOUGH
    if any(k in normalized for k in _CRUST_KEYWORDS):
        return GroupKind.CRUST
    return GroupKind.ADDON


def group_kind(group: OptionGroupOut) -> GroupKind:
    """The stored kind when present, else the name-based guess."""
    if group.kind is not None:
        return GroupKind(group.kind)
    return infer_group_kind(group.name)


def select_reference_flavor(
    flavors: List[FlavorProduct],
    source: OptionsSource | str = OptionsSource.HIGHEST,
) -> Optional[FlavorProduct]:
    """
    Pick the flavor whose option groups are offered for the whole pizza.

    Ties keep the flavor picked first.
    """
    if not flavors:
        return None

    source = OptionsSource(source)
    if source == OptionsSource.FIRST:
        return flavors[0]

    reference = flavors[0]
    for flavor in flavors[1:]:
        if source == OptionsSource.LOWEST and flavor.price < reference.price:
            reference = flavor
        elif source == OptionsSource.HIGHEST and flavor.price > reference.price:
            reference = flavor
    return reference


def merge_option_groups(groups: Iterable[OptionGroupOut]) -> List[OptionGroupOut]:
    """
    Merge groups sharing a normalized name and selection type.

    Options are unioned by normalized name (first one wins), is_required is
    OR-ed, and min/max selections keep the first value that is set.
    """
    merged: Dict[Tuple[str, str], OptionGroupOut] = {}

    for group in groups:
        key = (normalize_name(group.name), group.selection_type)
        existing = merged.get(key)

        if existing is None:
            merged[key] = group.model_copy(update={"options": list(group.options)})
            continue

        options_by_name = {normalize_name(opt.name): opt for opt in existing.options}
        for opt in group.options:
            options_by_name.setdefault(normalize_name(opt.name), opt)

        existing.options = list(options_by_name.values())
        existing.is_required = existing.is_required or group.is_required
        if existing.max_selections is None:
            existing.max_selections = group.max_selections
        if existing.min_selections is None:
            existing.min_selections = group.min_selections
        if existing.kind is None:
            existing.kind = group.kind

    return list(merged.values())


def _selection_type(max_selections: int) -> str:
    return "multiple" if max_selections and max_selections > 1 else "single"


def build_dough_group(
    dough_types: Iterable,
    is_required: bool = True,
    max_selections: int = 1,
) -> Optional[OptionGroupOut]:
    """Synthetic dough group from pizza_dough_types rows, or None if there are none."""
    options = [
        OptionOut(id=str(d.id), name=d.name, price_modifier=float(d.extra_price or 0))
        for d in dough_types
    ]
    if not options:
        return None
    return OptionGroupOut(
        id=DOUGH_GROUP_ID,
        name=DOUGH_GROUP_NAME,
        selection_type=_selection_type(max_selections),
        is_required=is_required,
        max_selections=max_selections,
        min_selections=1 if is_required else 0,
        kind=GroupKind.DOUGH,
        options=options,
    )


def build_crust_group(
    crust_flavors: Iterable,
    is_required: bool = False,
    max_selections: int = 1,
) -> Optional[OptionGroupOut]:
    """Synthetic crust group from the crust flavors linked to a product."""
    options = [
        OptionOut(id=str(c.id), name=c.name, price_modifier=float(c.extra_price or 0))
        for c in crust_flavors
        if c.active
    ]
    if not options:
        return None
    return OptionGroupOut(
        id=CRUST_GROUP_ID,
        name=CRUST_GROUP_NAME,
        selection_type=_selection_type(max_selections),
        is_required=is_required,
        max_selections=max_selections,
        min_selections=1 if is_required else 0,
        kind=GroupKind.CRUST,
        options=options,
    )


@dataclass
class CategorizedGroups:
    size: List[OptionGroupOut] = field(default_factory=list)
    dough: List[OptionGroupOut] = field(default_factory=list)
    crust: List[OptionGroupOut] = field(default_factory=list)
    addons: List[OptionGroupOut] = field(default_factory=list)

    @property
    def offered(self) -> List[OptionGroupOut]:
        """Groups shown in the options step, in display order."""
        return [*self.dough, *self.crust, *self.addons]

    @property
    def is_empty(self) -> bool:
        return not self.offered

    def find(self, group_id: str) -> Optional[OptionGroupOut]:
        for group in self.offered:
            if group.id == group_id:
                return group
        return None


def categorize_groups(
    merged: List[OptionGroupOut],
    dough_group: Optional[OptionGroupOut] = None,
    crust_group: Optional[OptionGroupOut] = None,
    enable_crust: bool = True,
    enable_addons: bool = True,
) -> CategorizedGroups:
    """
    Split merged groups into size, dough, crust and addon groups.

    A synthetic dough group replaces the product's own dough groups so shared
    options like "Tradicional" are not listed twice. Size groups are returned
    for reference only; the size step owns size selection.
    """
    by_kind: Dict[GroupKind, List[OptionGroupOut]] = {kind: [] for kind in GroupKind}
    for group in merged:
        kind = group_kind(group)
        by_kind[kind].append(group.model_copy(update={"kind": kind}))

    dough = [dough_group] if dough_group is not None else by_kind[GroupKind.DOUGH]
    crust = ([crust_group] if crust_group is not None else []) + by_kind[GroupKind.CRUST]

    categorized = CategorizedGroups(
        size=by_kind[GroupKind.SIZE],
        dough=dough,
        crust=crust if enable_crust else [],
        addons=by_kind[GroupKind.ADDON] if enable_addons else [],
    )
    logger.debug(
        "Categorized option groups: dough=%d crust=%d addons=%d",
        len(categorized.dough), len(categorized.crust), len(categorized.addons),
    )
    return categorized
