"""
Tests for the half-and-half wizard (HalfHalfBuilder) against the seeded pizzeria.
"""
import pytest
from sqlalchemy.exc import OperationalError

from menupro.half_half import (
    BuilderClosedError,
    FlavorCountError,
    HalfHalfBuilder,
    HalfHalfLoader,
    InvalidSelectionError,
    MaxFlavorsReachedError,
    MissingRequiredOptionError,
    WizardStep,
)
from menupro.half_half.option_groups import CRUST_GROUP_ID, DOUGH_GROUP_ID
from menupro.schemas import HalfHalfSettings, OptionsSource, PricingRule

PIZZAS = ["p-calabresa", "p-marguerita", "p-portuguesa"]


class FakeCart:
    def __init__(self):
        self.items = []

    def add_item(self, item):
        self.items.append(item)
        return item


def _settings(**overrides):
    values = dict(company_id="c-1", category_id="cat-pizzas")
    values.update(overrides)
    return HalfHalfSettings(**values)


def _builder(db, settings=None, product_ids=PIZZAS, loader=None):
    loader = loader or HalfHalfLoader(db)
    flavors = loader.load_flavors("c-1", list(product_ids))
    return HalfHalfBuilder(settings or _settings(), flavors, loader).open()


def _pick(builder, *product_ids):
    if builder.step == WizardStep.SIZE:
        builder.advance()
    for product_id in product_ids:
        builder.toggle_flavor(product_id)
    return builder


class TestOpen:

    def test_opens_on_size_step_with_largest_size(self, db):
        builder = _builder(db)
        assert builder.step == WizardStep.SIZE
        assert [s.id for s in builder.sizes.sizes] == ["grande", "media"]
        assert builder.selected_size.id == "grande"

    def test_category_sizes_when_products_have_none(self, db):
        builder = _builder(db, _settings(category_id="cat-tradicionais"),
                           product_ids=["p-mussarela", "p-napolitana"])
        assert builder.sizes.source == "category"
        assert [s.name for s in builder.sizes.sizes] == ["Grande", "Broto"]

    def test_no_sizes_starts_on_flavors(self, db):
        builder = _builder(db, _settings(category_id=None), product_ids=["p-portuguesa"])
        assert builder.sizes.is_empty
        assert builder.step == WizardStep.FLAVORS
        assert builder.selected_size is None


class TestFlavorSelection:

    def test_more_than_max_flavors_rejected(self, db):
        builder = _pick(_builder(db), "p-calabresa", "p-marguerita")
        with pytest.raises(MaxFlavorsReachedError) as exc:
            builder.toggle_flavor("p-portuguesa")
        assert exc.value.message == "Você pode selecionar no máximo 2 sabores"
        assert len(builder.selected_flavors) == 2

    def test_toggle_deselects(self, db):
        builder = _pick(_builder(db), "p-calabresa", "p-calabresa")
        assert builder.selected_flavors == []

    def test_repeated_flavors_when_allowed(self, db):
        builder = _pick(_builder(db, _settings(allow_repeated_flavors=True)),
                        "p-calabresa", "p-calabresa")
        assert [f.id for f in builder.selected_flavors] == ["p-calabresa", "p-calabresa"]
        builder.remove_flavor(0)
        assert len(builder.selected_flavors) == 1

    def test_fewer_flavors_block_next_step(self, db):
        builder = _pick(_builder(db), "p-calabresa")
        with pytest.raises(FlavorCountError) as exc:
            builder.advance()
        assert exc.value.message == "Selecione 2 sabores para montar a pizza"
        assert builder.step == WizardStep.FLAVORS

    def test_no_flavors_message(self, db):
        builder = _pick(_builder(db))
        with pytest.raises(FlavorCountError) as exc:
            builder.add_to_cart(FakeCart())
        assert exc.value.message == "Selecione pelo menos um sabor"

    def test_unknown_size_rejected(self, db):
        with pytest.raises(InvalidSelectionError):
            _builder(db).select_size("gigante")


class TestQuote:

    def test_no_quote_before_first_flavor(self, db):
        assert _builder(db).quote() is None

    def test_partial_quote_is_running_fraction(self, db):
        price = _pick(_builder(db), "p-calabresa").quote()
        assert price.is_partial is True
        assert price.base_price == 27.5

    def test_full_quote_uses_size_prices(self, db):
        builder = _pick(_builder(db), "p-calabresa", "p-marguerita")
        assert builder.flavor_prices() == [55.0, 50.0]
        assert builder.quote().unit_price == 52.5

        builder.select_size("media")
        assert builder.quote().unit_price == 40.0

    def test_highest_rule_with_discount_on_category_sizes(self, db):
        builder = _builder(db, _settings(category_id="cat-tradicionais",
                                         pricing_rule=PricingRule.HIGHEST,
                                         discount_percentage=10),
                           product_ids=["p-mussarela", "p-napolitana"])
        _pick(builder, "p-mussarela", "p-napolitana")
        price = builder.quote()
        assert price.base_price == 48.0
        assert price.discount == 4.8
        assert price.unit_price == 43.2

    def test_hints_for_every_candidate(self, db):
        hints = {h.product_id: h for h in _builder(db).flavor_hints()}
        assert hints["p-calabresa"].size_price == 55.0
        assert hints["p-calabresa"].fraction_price == 27.5
        assert hints["p-portuguesa"].fraction_price == 25.0

    def test_sum_rule_hints_match_flavor_part_only(self, db):
        builder = _builder(db, _settings(pricing_rule=PricingRule.SUM, discount_percentage=10),
                           product_ids=["p-calabresa", "p-marguerita"])
        _pick(builder, "p-calabresa", "p-marguerita")
        builder.advance()
        builder.select_option(CRUST_GROUP_ID, "cr-catupiry")

        hints_total = sum(h.fraction_price for h in builder.flavor_hints())
        price = builder.quote()
        assert hints_total == price.base_price == 52.5
        assert price.unit_price == 56.25
        assert price.unit_price != hints_total


class TestOptions:

    def test_options_from_reference_flavor(self, db):
        builder = _pick(_builder(db), "p-calabresa", "p-marguerita")
        assert builder.advance() == WizardStep.OPTIONS
        assert builder.reference_flavor.id == "p-calabresa"

        groups = builder.groups
        assert [g.id for g in groups.dough] == [DOUGH_GROUP_ID]
        assert [o.name for o in groups.dough[0].options] == ["Tradicional", "Integral"]
        assert [g.id for g in groups.crust] == [CRUST_GROUP_ID, "grp-bordas"]
        assert [o.id for o in groups.crust[0].options] == ["cr-catupiry"]
        assert [g.id for g in groups.addons] == ["grp-adicionais"]
        assert "opt-ovo" not in [o.id for o in groups.addons[0].options]
        assert groups.find("grp-cal-tamanho") is None

    def test_lowest_options_source(self, db):
        builder = _pick(_builder(db, _settings(options_source=OptionsSource.LOWEST)),
                        "p-calabresa", "p-marguerita")
        builder.advance()
        assert builder.reference_flavor.id == "p-marguerita"
        assert builder.groups.crust == []
        assert [g.id for g in builder.groups.addons] == ["grp-mar-adicionais"]

    def test_single_select_replaces_choice(self, db):
        builder = _pick(_builder(db), "p-calabresa", "p-marguerita")
        builder.advance()
        builder.select_option(DOUGH_GROUP_ID, "dough-tradicional")
        builder.select_option(DOUGH_GROUP_ID, "dough-integral")
        assert [s.option_id for s in builder.selected_options] == ["dough-integral"]

    def test_multiple_select_toggles_up_to_max(self, db):
        builder = _pick(_builder(db), "p-calabresa", "p-marguerita")
        builder.advance()
        builder.select_option("grp-adicionais", "opt-bacon")
        builder.select_option("grp-adicionais", "opt-azeitona")
        with pytest.raises(InvalidSelectionError):
            builder.select_option("grp-adicionais", "opt-cebola")

        builder.select_option("grp-adicionais", "opt-bacon")
        assert [s.option_id for s in builder.selected_options] == ["opt-azeitona"]

    def test_unknown_option_rejected(self, db):
        builder = _pick(_builder(db), "p-calabresa", "p-marguerita")
        builder.advance()
        with pytest.raises(InvalidSelectionError):
            builder.select_option(CRUST_GROUP_ID, "cr-chocolate")

    def test_options_priced_into_quote(self, db):
        builder = _pick(_builder(db), "p-calabresa", "p-marguerita")
        builder.advance()
        builder.select_option(DOUGH_GROUP_ID, "dough-integral")
        builder.select_option(CRUST_GROUP_ID, "cr-catupiry")
        assert builder.quote().unit_price == 66.5

    def test_crust_free_when_not_charged(self, db):
        builder = _pick(_builder(db, _settings(allow_crust_extra_price=False)),
                        "p-calabresa", "p-marguerita")
        builder.advance()
        builder.select_option(DOUGH_GROUP_ID, "dough-integral")
        builder.select_option(CRUST_GROUP_ID, "cr-catupiry")
        assert builder.quote().unit_price == 56.5

    def test_changing_flavors_drops_loaded_groups(self, db):
        builder = _pick(_builder(db), "p-calabresa", "p-marguerita")
        builder.advance()
        builder.back()
        builder.toggle_flavor("p-calabresa")
        assert builder.groups is None


class TestAddToCart:

    def test_required_dough_blocks_checkout(self, db):
        builder = _pick(_builder(db), "p-calabresa", "p-marguerita")
        builder.advance()
        with pytest.raises(MissingRequiredOptionError) as exc:
            builder.add_to_cart(FakeCart())
        assert exc.value.message == "Escolha uma opção em Tipo de massa"

    def test_adds_priced_line_and_closes(self, db):
        builder = _pick(_builder(db), "p-calabresa", "p-marguerita")
        builder.advance()
        builder.select_option(DOUGH_GROUP_ID, "dough-integral")
        builder.select_option(CRUST_GROUP_ID, "cr-catupiry")
        builder.set_quantity(2)

        cart = FakeCart()
        line = builder.add_to_cart(cart)

        assert cart.items == [line]
        assert line.product_id == "p-calabresa"
        assert line.product_name == "Pizza Meio a Meio - Grande"
        assert line.price == 66.5
        assert line.quantity == 2
        assert line.half_half_flavor_product_ids == ["p-calabresa", "p-marguerita"]
        assert builder.is_closed
        assert builder.selected_flavors == []

    def test_options_step_skipped_when_crust_and_addons_disabled(self, db):
        builder = _pick(_builder(db, _settings(enable_crust=False, enable_addons=False)),
                        "p-calabresa", "p-marguerita")
        assert builder.advance() == WizardStep.FLAVORS

        line = builder.add_to_cart(FakeCart())
        assert line.price == 52.5

    def test_no_option_choices_when_options_step_skipped(self, db):
        builder = _pick(_builder(db, _settings(enable_crust=False, enable_addons=False)),
                        "p-calabresa", "p-marguerita")
        builder.advance()
        with pytest.raises(InvalidSelectionError):
            builder.select_option(DOUGH_GROUP_ID, "dough-integral")

        line = builder.add_to_cart(FakeCart())
        assert line.price == 52.5
        assert not any(o.name.startswith("Tipo de massa") for o in line.options)


class TestCancellation:

    def test_closed_builder_rejects_changes(self, db):
        builder = _builder(db)
        builder.close()
        with pytest.raises(BuilderClosedError):
            builder.toggle_flavor("p-calabresa")

    def test_close_during_option_load_drops_results(self, db):
        class ClosingLoader(HalfHalfLoader):
            builder = None

            def load_option_groups(self, product_id):
                groups = super().load_option_groups(product_id)
                self.builder.close()
                return groups

        loader = ClosingLoader(db)
        builder = _pick(_builder(db, loader=loader), "p-calabresa", "p-marguerita")
        loader.builder = builder

        groups = builder.load_options()
        assert groups.is_empty
        assert builder.groups is None
        assert builder.reference_flavor is None

    def test_database_error_leaves_no_sizes(self, db, caplog):
        class BrokenLoader(HalfHalfLoader):
            def load_size_options(self, product_ids):
                raise OperationalError("SELECT", {}, Exception("database is locked"))

        builder = _builder(db, loader=BrokenLoader(db))
        assert builder.sizes.is_empty
        assert builder.step == WizardStep.FLAVORS
        assert "Error loading pizza sizes" in caplog.text

        _pick(builder, "p-calabresa", "p-marguerita")
        assert builder.quote().unit_price == 42.5
