"""
Tests for loading pizza configuration and resolving effective settings.
"""
import logging

import pytest
from sqlalchemy.exc import OperationalError

from menupro.half_half.errors import HalfHalfDisabledError
from menupro.models import PizzaCategorySettings
from menupro.pizza_config import PizzaConfig, load_pizza_config, resolve_half_half_settings
from menupro.schemas import OptionsSource, PricingRule


def test_load_company_config(db):
    config = load_pizza_config(db, "c-1")
    assert config.error is None
    assert config.settings.enable_half_half is True
    assert sorted(config.pizza_category_ids) == ["cat-pizzas", "cat-tradicionais"]
    assert set(config.category_settings) == {"cat-pizzas", "cat-tradicionais"}


def test_config_out(db):
    out = load_pizza_config(db, "c-1").to_out()
    assert out.settings.max_flavors == 2
    assert out.category_settings["cat-tradicionais"].half_half_discount_percentage == 10.0


def test_unknown_company_has_empty_config(db):
    config = load_pizza_config(db, "c-missing")
    assert config.settings is None
    assert config.pizza_category_ids == []


def test_database_error_is_carried(db, monkeypatch, caplog):
    def broken_query(*args, **kwargs):
        raise OperationalError("SELECT", {}, Exception("connection refused"))

    monkeypatch.setattr(db, "query", broken_query)
    with caplog.at_level(logging.ERROR):
        config = load_pizza_config(db, "c-1")
    assert isinstance(config.error, OperationalError)
    assert config.settings is None
    assert "Error loading pizza config" in caplog.text


class TestResolveSettings:

    def test_category_values_win(self, db):
        settings = resolve_half_half_settings(load_pizza_config(db, "c-1"), "cat-tradicionais")
        assert settings.pricing_rule == PricingRule.HIGHEST
        assert settings.discount_percentage == 10.0
        assert settings.max_flavors == 2

    def test_category_max_flavors_overrides_company(self, db):
        db.query(PizzaCategorySettings).filter_by(category_id="cat-pizzas").update({"max_flavors": 3})
        db.commit()
        settings = resolve_half_half_settings(load_pizza_config(db, "c-1"), "cat-pizzas")
        assert settings.max_flavors == 3

    def test_defaults_without_any_config(self):
        settings = resolve_half_half_settings(PizzaConfig(company_id="c-new"))
        assert settings.max_flavors == 2
        assert settings.pricing_rule == PricingRule.AVERAGE
        assert settings.options_source == OptionsSource.HIGHEST
        assert settings.enable_crust is True
        assert settings.allow_crust_extra_price is True
        assert settings.dough_is_required is True

    def test_company_disabled(self, db):
        with pytest.raises(HalfHalfDisabledError):
            resolve_half_half_settings(load_pizza_config(db, "c-2"), "cat-c2")

    def test_category_disabled(self, db):
        db.query(PizzaCategorySettings).filter_by(category_id="cat-pizzas").update({"allow_half_half": False})
        db.commit()
        with pytest.raises(HalfHalfDisabledError) as exc:
            resolve_half_half_settings(load_pizza_config(db, "c-1"), "cat-pizzas")
        assert exc.value.message == "Pizza meio a meio não está disponível para esta categoria"

    def test_unknown_rule_falls_back_to_average(self, db, caplog):
        db.query(PizzaCategorySettings).filter_by(category_id="cat-pizzas").update(
            {"half_half_pricing_rule": "median"}
        )
        db.commit()
        settings = resolve_half_half_settings(load_pizza_config(db, "c-1"), "cat-pizzas")
        assert settings.pricing_rule == PricingRule.AVERAGE
        assert "Unknown half-and-half pricing rule" in caplog.text

    @pytest.mark.parametrize("stored", [150.0, -5.0])
    def test_out_of_range_discount_falls_back_to_zero(self, db, caplog, stored):
        db.query(PizzaCategorySettings).filter_by(category_id="cat-tradicionais").update(
            {"half_half_discount_percentage": stored}
        )
        db.commit()
        settings = resolve_half_half_settings(load_pizza_config(db, "c-1"), "cat-tradicionais")
        assert settings.discount_percentage == 0.0
        assert "Invalid half-and-half discount" in caplog.text
