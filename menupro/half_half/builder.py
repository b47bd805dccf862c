"""
Half-and-half pizza builder.

Drives the three-step wizard a customer goes through on the digital menu:

    size -> flavors -> options -> add to cart

- size: pick one of the resolved sizes (skipped when none are configured)
- flavors: pick exactly max_flavors flavors
- options: dough, crust and addon groups of the reference flavor (skipped
  when the store enables neither crusts nor addons)

A builder lives for one "modal open": every piece of state is created by
open() and thrown away by close(). Closing also cancels any load still in
progress, so results arriving afterwards never touch the closed builder.
"""

import logging
from enum import Enum
from typing import List, Optional, Protocol

from sqlalchemy.exc import SQLAlchemyError

from ..schemas import (
    CartItem,
    FlavorHint,
    FlavorProduct,
    HalfHalfSettings,
    PizzaSize,
    PriceBreakdown,
    SelectedOption,
)
from .cart_line import build_cart_line
from .errors import (
    BuilderClosedError,
    FlavorCountError,
    InvalidSelectionError,
    LoadCancelledError,
    MaxFlavorsReachedError,
    MissingRequiredOptionError,
    UnknownFlavorError,
)
from .loader import HalfHalfLoader
from .option_groups import (
    CategorizedGroups,
    build_crust_group,
    build_dough_group,
    categorize_groups,
    merge_option_groups,
    select_reference_flavor,
)
from .pricing import committed_price, preview_price
from .sizes import (
    SizeResolution,
    flavor_price_for_size,
    half_price_hint,
    resolve_category_sizes,
    resolve_product_sizes,
)

logger = logging.getLogger(__name__)


class WizardStep(str, Enum):
    SIZE = "size"
    FLAVORS = "flavors"
    OPTIONS = "options"


class CartSink(Protocol):
    def add_item(self, item: CartItem) -> CartItem:
        ...


class HalfHalfBuilder:
    """
    Assembles one half-and-half pizza.

    Args:
        settings: Effective company/category half-and-half settings
        flavors: Candidate flavor products offered in the flavors step
        loader: Query helper; its cancel_event is set when the builder closes
    """

    def __init__(
        self,
        settings: HalfHalfSettings,
        flavors: List[FlavorProduct],
        loader: HalfHalfLoader,
    ):
        self.settings = settings
        self.flavors = list(flavors)
        self.loader = loader
        self._closed = False
        self._sizes_loaded = False
        self._reset()

    def _reset(self) -> None:
        self.step = WizardStep.SIZE
        self.sizes = SizeResolution()
        self.selected_size: Optional[PizzaSize] = None
        self.selected_flavors: List[FlavorProduct] = []
        self.groups: Optional[CategorizedGroups] = None
        self.reference_flavor: Optional[FlavorProduct] = None
        self.selected_options: List[SelectedOption] = []
        self.quantity = 1

    # =========================================================================
    # Lifecycle
    # =========================================================================

    @property
    def max_flavors(self) -> int:
        return self.settings.max_flavors

    @property
    def is_closed(self) -> bool:
        return self._closed

    @property
    def options_step_enabled(self) -> bool:
        return self.settings.enable_crust or self.settings.enable_addons

    def _ensure_open(self) -> None:
        if self._closed:
            raise BuilderClosedError()

    def open(self) -> "HalfHalfBuilder":
        """Load sizes (once) and position the wizard on its first step."""
        self._ensure_open()
        if not self._sizes_loaded:
            self._sizes_loaded = True
            self.load_sizes()

        if self.sizes.is_empty:
            self.step = WizardStep.FLAVORS
        else:
            self.step = WizardStep.SIZE
            if self.selected_size is None:
                self.selected_size = self.sizes.sizes[0]
        return self

    def close(self) -> None:
        """Cancel pending loads and discard all state."""
        self.loader.cancel_event.set()
        self._closed = True
        self._reset()

    # =========================================================================
    # Loading
    # =========================================================================

    def _category_id(self) -> Optional[str]:
        if self.settings.category_id:
            return self.settings.category_id
        if self.flavors:
            return self.flavors[0].category_id
        return None

    def load_sizes(self) -> SizeResolution:
        """
        Resolve sizes from the flavors' size groups, falling back to the
        category size table. Any database error leaves the wizard with no sizes.
        """
        try:
            size_options = self.loader.load_size_options([f.id for f in self.flavors])
            resolution = resolve_product_sizes(self.flavors, size_options, self.max_flavors)

            category_id = self._category_id()
            if resolution.is_empty and category_id:
                rows = self.loader.load_category_sizes(category_id)
                resolution = resolve_category_sizes(rows, self.max_flavors)
        except LoadCancelledError:
            logger.debug("Size load cancelled; dropping results")
            return self.sizes
        except SQLAlchemyError:
            logger.exception("Error loading pizza sizes")
            resolution = SizeResolution()

        if self.loader.cancel_event.is_set():
            logger.debug("Builder closed during size load; dropping results")
            return self.sizes

        logger.info(
            "Loaded %d pizza sizes (source=%s) for %d flavors",
            len(resolution.sizes), resolution.source, len(self.flavors),
        )
        self.sizes = resolution
        return resolution

    def load_options(self) -> CategorizedGroups:
        """
        Load dough, crust and addon groups from the reference flavor.

        Any database error leaves the wizard with no options to offer.
        """
        reference = select_reference_flavor(self.selected_flavors, self.settings.options_source)
        if reference is None:
            return CategorizedGroups()

        try:
            groups = self.loader.load_option_groups(reference.id)
            dough_types = self.loader.load_dough_types(self.settings.company_id)
            crust_flavors = self.loader.load_crust_flavors(reference.id) if self.settings.enable_crust else []

            categorized = categorize_groups(
                merge_option_groups(groups),
                dough_group=build_dough_group(
                    dough_types,
                    is_required=self.settings.dough_is_required,
                    max_selections=self.settings.dough_max_selections,
                ),
                crust_group=build_crust_group(
                    crust_flavors,
                    is_required=self.settings.crust_is_required,
                    max_selections=self.settings.crust_max_selections,
                ),
                enable_crust=self.settings.enable_crust,
                enable_addons=self.settings.enable_addons,
            )
        except LoadCancelledError:
            logger.debug("Option load cancelled; dropping results")
            return self.groups or CategorizedGroups()
        except SQLAlchemyError:
            logger.exception("Error loading pizza options")
            categorized = CategorizedGroups()

        if self.loader.cancel_event.is_set():
            logger.debug("Builder closed during option load; dropping results")
            return self.groups or CategorizedGroups()

        self.groups = categorized
        self.reference_flavor = reference
        self._prune_selected_options()
        return categorized

    def _prune_selected_options(self) -> None:
        """Drop choices that the freshly loaded groups no longer offer."""
        kept = []
        for selection in self.selected_options:
            group = self.groups.find(selection.group_id) if self.groups else None
            if group and any(opt.id == selection.option_id for opt in group.options):
                kept.append(selection)
        self.selected_options = kept

    # =========================================================================
    # Selection
    # =========================================================================

    def select_size(self, size_id: str) -> PizzaSize:
        self._ensure_open()
        size = self.sizes.find(size_id)
        if size is None:
            raise InvalidSelectionError(f"Tamanho indisponível: {size_id}")
        self.selected_size = size
        return size

    def _find_flavor(self, product_id: str) -> FlavorProduct:
        for flavor in self.flavors:
            if flavor.id == product_id:
                return flavor
        raise UnknownFlavorError(product_id)

    def toggle_flavor(self, product_id: str) -> List[FlavorProduct]:
        """
        Select a flavor, or deselect it if it is already selected.

        When repeated flavors are allowed, selecting always adds another slot;
        use remove_flavor() to take one out.

        Raises:
            MaxFlavorsReachedError: If max_flavors are already selected
        """
        self._ensure_open()
        flavor = self._find_flavor(product_id)
        already = any(f.id == product_id for f in self.selected_flavors)

        if already and not self.settings.allow_repeated_flavors:
            self.selected_flavors = [f for f in self.selected_flavors if f.id != product_id]
            self.groups = None
            return self.selected_flavors

        if len(self.selected_flavors) >= self.max_flavors:
            raise MaxFlavorsReachedError(self.max_flavors)

        self.selected_flavors.append(flavor)
        self.groups = None
        return self.selected_flavors

    def remove_flavor(self, index: int) -> List[FlavorProduct]:
        self._ensure_open()
        if index < 0 or index >= len(self.selected_flavors):
            raise InvalidSelectionError(f"Sabor {index + 1} não está selecionado")
        del self.selected_flavors[index]
        self.groups = None
        return self.selected_flavors

    def select_option(self, group_id: str, option_id: str) -> List[SelectedOption]:
        """
        Choose an option.

        Single-select groups replace the previous choice; multi-select groups
        toggle the option, up to the group's max_selections.

        Raises:
            InvalidSelectionError: If the store offers no options step, or the
                group/option is not on offer
        """
        self._ensure_open()
        if not self.options_step_enabled:
            raise InvalidSelectionError("Esta pizza não tem opções para escolher")
        if self.groups is None:
            self.load_options()

        group = self.groups.find(group_id) if self.groups else None
        if group is None:
            raise InvalidSelectionError(f"Grupo de opções indisponível: {group_id}")

        option = next((opt for opt in group.options if opt.id == option_id), None)
        if option is None or not option.is_available:
            raise InvalidSelectionError(f"Opção indisponível em {group.name}")

        selection = SelectedOption(
            group_id=group.id,
            group_name=group.name,
            group_kind=group.kind,
            option_id=option.id,
            option_name=option.name,
            price_modifier=option.price_modifier,
        )

        if group.is_single:
            self.selected_options = [
                s for s in self.selected_options if s.group_id != group.id
            ] + [selection]
            return self.selected_options

        if any(s.option_id == option.id and s.group_id == group.id for s in self.selected_options):
            self.selected_options = [
                s for s in self.selected_options
                if not (s.option_id == option.id and s.group_id == group.id)
            ]
            return self.selected_options

        in_group = sum(1 for s in self.selected_options if s.group_id == group.id)
        if group.max_selections and in_group >= group.max_selections:
            raise InvalidSelectionError(
                f"Você pode escolher no máximo {group.max_selections} opções em {group.name}"
            )
        self.selected_options.append(selection)
        return self.selected_options

    def clear_option(self, group_id: str) -> List[SelectedOption]:
        self._ensure_open()
        self.selected_options = [s for s in self.selected_options if s.group_id != group_id]
        return self.selected_options

    def set_quantity(self, quantity: int) -> int:
        self._ensure_open()
        if quantity < 1:
            raise InvalidSelectionError("A quantidade deve ser pelo menos 1")
        self.quantity = quantity
        return quantity

    # =========================================================================
    # Navigation
    # =========================================================================

    def _check_flavor_count(self) -> None:
        if len(self.selected_flavors) != self.max_flavors:
            raise FlavorCountError(len(self.selected_flavors), self.max_flavors)

    def advance(self) -> WizardStep:
        """
        Move to the next step.

        Leaving the flavors step requires exactly max_flavors flavors. When
        the options step is disabled the wizard stays on flavors and the pizza
        goes straight to the cart.
        """
        self._ensure_open()

        if self.step == WizardStep.SIZE:
            if not self.sizes.is_empty and self.selected_size is None:
                raise InvalidSelectionError("Escolha um tamanho")
            self.step = WizardStep.FLAVORS
        elif self.step == WizardStep.FLAVORS:
            self._check_flavor_count()
            if self.options_step_enabled:
                self.load_options()
                self.step = WizardStep.OPTIONS
        return self.step

    def back(self) -> WizardStep:
        self._ensure_open()
        if self.step == WizardStep.OPTIONS:
            self.step = WizardStep.FLAVORS
        elif self.step == WizardStep.FLAVORS and not self.sizes.is_empty:
            self.step = WizardStep.SIZE
        return self.step

    # =========================================================================
    # Pricing
    # =========================================================================

    def flavor_prices(self) -> List[float]:
        return [
            flavor_price_for_size(f, self.selected_size, self.sizes)
            for f in self.selected_flavors
        ]

    def flavor_hints(self) -> List[FlavorHint]:
        """Fraction price shown next to every candidate flavor."""
        hints = []
        for flavor in self.flavors:
            size_price = flavor_price_for_size(flavor, self.selected_size, self.sizes)
            hints.append(FlavorHint(
                product_id=flavor.id,
                name=flavor.name,
                size_price=size_price,
                fraction_price=round(half_price_hint(size_price, self.max_flavors), 2),
            ))
        return hints

    def quote(self) -> Optional[PriceBreakdown]:
        """Running price of the current selection, or None before any flavor is picked."""
        if not self.selected_flavors:
            return None
        return preview_price(
            self.flavor_prices(),
            self.max_flavors,
            self.settings.pricing_rule,
            self.selected_options,
            allow_crust_extra_price=self.settings.allow_crust_extra_price,
            discount_percentage=self.settings.discount_percentage,
            quantity=self.quantity,
        )

    # =========================================================================
    # Checkout
    # =========================================================================

    def validate_required_options(self) -> None:
        if self.groups is None:
            return
        for group in self.groups.offered:
            if not group.is_required or not group.options:
                continue
            chosen = sum(1 for s in self.selected_options if s.group_id == group.id)
            minimum = 1 if group.is_single else max(group.min_selections or 1, 1)
            if chosen < minimum:
                raise MissingRequiredOptionError(group.name)

    def add_to_cart(self, cart: CartSink) -> CartItem:
        """
        Validate the selection, price it, and hand the line to the cart.

        The builder is closed afterwards.

        Raises:
            FlavorCountError: Unless exactly max_flavors flavors are selected
            MissingRequiredOptionError: If a required group has no choice
        """
        self._ensure_open()
        self._check_flavor_count()

        if self.options_step_enabled and self.groups is None:
            self.load_options()
        self.validate_required_options()

        breakdown = committed_price(
            self.flavor_prices(),
            self.max_flavors,
            self.settings.pricing_rule,
            self.selected_options,
            allow_crust_extra_price=self.settings.allow_crust_extra_price,
            discount_percentage=self.settings.discount_percentage,
            quantity=self.quantity,
        )

        line = build_cart_line(
            self.selected_flavors,
            self.selected_size,
            self.selected_options,
            unit_price=breakdown.unit_price,
            quantity=self.quantity,
        )
        added = cart.add_item(line)
        logger.info(
            "Added half-and-half pizza to cart: flavors=%s unit=%.2f qty=%d",
            [f.id for f in self.selected_flavors], breakdown.unit_price, self.quantity,
        )
        self.close()
        return added
