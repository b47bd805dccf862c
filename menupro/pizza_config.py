"""
Pizza configuration loading.

A company's pizza behavior comes from three tables:

- pizza_settings: one row per company (half-and-half on/off, crusts, addons,
  max flavors, whether crusts cost extra)
- pizza_categories: which menu categories are pizza categories
- pizza_category_settings: per-category overrides (pricing rule, discount,
  options source, dough/crust selection rules)

resolve_half_half_settings() merges these into the HalfHalfSettings a
builder runs with.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .config import DEFAULT_MAX_FLAVORS, DEFAULT_OPTIONS_SOURCE, DEFAULT_PRICING_RULE
from .half_half.errors import HalfHalfDisabledError
from .models import PizzaCategory, PizzaCategorySettings, PizzaSettings
from .schemas import (
    HalfHalfSettings,
    OptionsSource,
    PizzaCategorySettingsOut,
    PizzaConfigOut,
    PizzaSettingsOut,
    PricingRule,
)

logger = logging.getLogger(__name__)


@dataclass
class PizzaConfig:
    company_id: str
    settings: Optional[PizzaSettings] = None
    category_settings: Dict[str, PizzaCategorySettings] = field(default_factory=dict)
    pizza_category_ids: List[str] = field(default_factory=list)
    error: Optional[Exception] = None

    def to_out(self) -> PizzaConfigOut:
        return PizzaConfigOut(
            settings=PizzaSettingsOut.model_validate(self.settings) if self.settings else None,
            category_settings={
                cid: PizzaCategorySettingsOut.model_validate(cs)
                for cid, cs in self.category_settings.items()
            },
            pizza_category_ids=list(self.pizza_category_ids),
        )


def load_pizza_config(db: Session, company_id: str) -> PizzaConfig:
    """
    Load a company's pizza configuration.

    A database error is logged and yields an empty configuration that
    carries the error.
    """
    try:
        settings = (
            db.query(PizzaSettings)
            .filter(PizzaSettings.company_id == company_id)
            .one_or_none()
        )
        category_ids = [
            row.category_id
            for row in db.query(PizzaCategory).filter(PizzaCategory.company_id == company_id).all()
        ]

        category_settings: Dict[str, PizzaCategorySettings] = {}
        if category_ids:
            rows = (
                db.query(PizzaCategorySettings)
                .filter(PizzaCategorySettings.category_id.in_(category_ids))
                .all()
            )
            category_settings = {row.category_id: row for row in rows}
    except SQLAlchemyError as exc:
        logger.exception("Error loading pizza config for company %s", company_id)
        return PizzaConfig(company_id=company_id, error=exc)

    return PizzaConfig(
        company_id=company_id,
        settings=settings,
        category_settings=category_settings,
        pizza_category_ids=category_ids,
    )


def _parse_rule(value: Optional[str]) -> PricingRule:
    try:
        return PricingRule(value or DEFAULT_PRICING_RULE)
    except ValueError:
        logger.warning("Unknown half-and-half pricing rule %r; using average", value)
        return PricingRule.AVERAGE


def _parse_source(value: Optional[str]) -> OptionsSource:
    try:
        return OptionsSource(value or DEFAULT_OPTIONS_SOURCE)
    except ValueError:
        logger.warning("Unknown half-and-half options source %r; using highest", value)
        return OptionsSource.HIGHEST


def _parse_discount(value: Optional[float]) -> float:
    if value is None:
        return 0.0
    if 0 <= value <= 100:
        return float(value)
    logger.warning("Invalid half-and-half discount %r; using 0", value)
    return 0.0


def resolve_half_half_settings(config: PizzaConfig, category_id: Optional[str] = None) -> HalfHalfSettings:
    """
    Merge company and category settings into effective builder settings.

    Category values win over company values; missing values use the defaults
    from config.py.

    Raises:
        HalfHalfDisabledError: If the company or the category turned half-and-half off
    """
    company = config.settings
    category = config.category_settings.get(category_id) if category_id else None

    if company is not None and not company.enable_half_half:
        raise HalfHalfDisabledError(category_id)
    if category is not None and not category.allow_half_half:
        raise HalfHalfDisabledError(category_id)

    max_flavors = DEFAULT_MAX_FLAVORS
    if company is not None and company.max_flavors:
        max_flavors = company.max_flavors
    if category is not None and category.max_flavors:
        max_flavors = category.max_flavors

    values = dict(
        company_id=config.company_id,
        category_id=category_id,
        max_flavors=max_flavors,
        enable_crust=company.enable_crust if company is not None else True,
        enable_addons=company.enable_addons if company is not None else True,
        allow_crust_extra_price=company.allow_crust_extra_price if company is not None else True,
        pricing_rule=_parse_rule(category.half_half_pricing_rule if category is not None else None),
        options_source=_parse_source(category.half_half_options_source if category is not None else None),
    )
    if category is not None:
        values.update(
            discount_percentage=_parse_discount(category.half_half_discount_percentage),
            allow_repeated_flavors=category.allow_repeated_flavors,
            dough_is_required=category.dough_is_required,
            dough_max_selections=category.dough_max_selections or 1,
            crust_is_required=category.crust_is_required,
            crust_max_selections=category.crust_max_selections or 1,
        )
    return HalfHalfSettings(**values)
