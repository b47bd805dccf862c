import os

# Must be set before menupro.config is imported
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import menupro.db as db_mod
from menupro.main import app
from menupro.models import (
    Base,
    PizzaCategory,
    PizzaCategorySettings,
    PizzaCategorySize,
    PizzaCrustFlavor,
    PizzaDoughType,
    PizzaProductCrustFlavor,
    PizzaSettings,
    Product,
    ProductOption,
    ProductOptionGroup,
)


def seed_pizzeria(session):
    """Seed one pizzeria (c-1) with two pizza categories, plus a company (c-2)
    that has half-and-half turned off.

    cat-pizzas: flavors carry their own "Tamanho" groups
        Calabresa  R$45  Média 42 / Grande 55   stock 10
        Marguerita R$40  Media 38 / Grande 50   stock not tracked
        Portuguesa R$50  no size group          stock 1

    cat-tradicionais: no size groups, category sizes Broto 30 / Grande 48,
    "highest" rule with a 10% discount.

    c-3: no pizza settings at all, two flavors without sizes or options.
    """
    session.add_all([
        PizzaSettings(company_id="c-1", enable_half_half=True, enable_crust=True,
                      enable_addons=True, max_flavors=2, allow_crust_extra_price=True),
        PizzaSettings(company_id="c-2", enable_half_half=False),
        PizzaCategory(company_id="c-1", category_id="cat-pizzas"),
        PizzaCategory(company_id="c-1", category_id="cat-tradicionais"),
        PizzaCategorySettings(category_id="cat-pizzas", half_half_pricing_rule="average",
                              dough_is_required=True),
        PizzaCategorySettings(category_id="cat-tradicionais", half_half_pricing_rule="highest",
                              half_half_discount_percentage=10.0),
        PizzaCategorySize(id="size-broto", category_id="cat-tradicionais", name="Broto",
                          base_price=30.0, slices=4, sort_order=0),
        PizzaCategorySize(id="size-grande", category_id="cat-tradicionais", name="Grande",
                          base_price=48.0, slices=8, sort_order=1),
    ])

    session.add_all([
        Product(id="p-calabresa", company_id="c-1", category_id="cat-pizzas",
                name="Calabresa", price=45.0, stock_quantity=10),
        Product(id="p-marguerita", company_id="c-1", category_id="cat-pizzas",
                name="Marguerita", price=40.0),
        Product(id="p-portuguesa", company_id="c-1", category_id="cat-pizzas",
                name="Portuguesa", price=50.0, stock_quantity=1),
        Product(id="p-frango", company_id="c-1", category_id="cat-pizzas",
                name="Frango", price=42.0, is_active=False),
        Product(id="p-mussarela", company_id="c-1", category_id="cat-tradicionais",
                name="Mussarela", price=35.0),
        Product(id="p-napolitana", company_id="c-1", category_id="cat-tradicionais",
                name="Napolitana", price=38.0),
        Product(id="p-atum", company_id="c-2", category_id="cat-c2",
                name="Atum", price=44.0),
        Product(id="p-c3-atum", company_id="c-3", category_id="cat-c3",
                name="Atum", price=46.0),
        Product(id="p-c3-quatro-queijos", company_id="c-3", category_id="cat-c3",
                name="Quatro Queijos", price=50.0),
    ])
    session.flush()

    session.add_all([
        ProductOptionGroup(id="grp-cal-tamanho", product_id="p-calabresa", name="Tamanho",
                           kind="size", sort_order=0, options=[
                               ProductOption(id="opt-cal-media", name="Média", price_modifier=42.0, sort_order=0),
                               ProductOption(id="opt-cal-grande", name="Grande", price_modifier=55.0, sort_order=1),
                           ]),
        ProductOptionGroup(id="grp-cal-massa", product_id="p-calabresa", name="Massa",
                           sort_order=1, options=[
                               ProductOption(id="opt-cal-massa", name="Tradicional", price_modifier=0.0),
                           ]),
        ProductOptionGroup(id="grp-bordas", product_id="p-calabresa", name="Bordas",
                           kind="crust", sort_order=2, options=[
                               ProductOption(id="opt-borda-catupiry", name="Catupiry", price_modifier=8.0, sort_order=0),
                               ProductOption(id="opt-borda-cheddar", name="Cheddar", price_modifier=7.0, sort_order=1),
                           ]),
        ProductOptionGroup(id="grp-adicionais", product_id="p-calabresa", name="Adicionais",
                           selection_type="multiple", max_selections=2, sort_order=3, options=[
                               ProductOption(id="opt-bacon", name="Bacon", price_modifier=5.0, sort_order=0),
                               ProductOption(id="opt-azeitona", name="Azeitona", price_modifier=3.0, sort_order=1),
                               ProductOption(id="opt-cebola", name="Cebola", price_modifier=2.0, sort_order=2),
                               ProductOption(id="opt-ovo", name="Ovo", price_modifier=2.0, sort_order=3,
                                             is_available=False),
                           ]),
        # Legacy group: no kind stored, recognized by its name
        ProductOptionGroup(id="grp-mar-tamanho", product_id="p-marguerita", name="Tamanho",
                           sort_order=0, options=[
                               ProductOption(id="opt-mar-media", name="Media ", price_modifier=38.0, sort_order=0),
                               ProductOption(id="opt-mar-grande", name="Grande", price_modifier=50.0, sort_order=1),
                           ]),
        ProductOptionGroup(id="grp-mar-adicionais", product_id="p-marguerita", name="Adicionais",
                           selection_type="multiple", max_selections=2, sort_order=1, options=[
                               ProductOption(id="opt-mar-bacon", name="Bacon", price_modifier=6.0),
                           ]),
    ])

    session.add_all([
        PizzaDoughType(id="dough-tradicional", company_id="c-1", name="Tradicional",
                       extra_price=0.0, sort_order=0),
        PizzaDoughType(id="dough-integral", company_id="c-1", name="Integral",
                       extra_price=4.0, sort_order=1),
        PizzaDoughType(id="dough-sem-gluten", company_id="c-1", name="Sem glúten",
                       extra_price=6.0, active=False, sort_order=2),
        PizzaDoughType(id="dough-outra", company_id="c-2", name="Fina", extra_price=1.0),
        PizzaCrustFlavor(id="cr-catupiry", company_id="c-1", name="Catupiry",
                         extra_price=10.0, sort_order=0),
        PizzaCrustFlavor(id="cr-chocolate", company_id="c-1", name="Chocolate",
                         extra_price=12.0, active=False, sort_order=1),
    ])
    session.flush()

    session.add_all([
        PizzaProductCrustFlavor(product_id="p-calabresa", crust_flavor_id="cr-catupiry"),
        PizzaProductCrustFlavor(product_id="p-calabresa", crust_flavor_id="cr-chocolate"),
        PizzaProductCrustFlavor(product_id="p-portuguesa", crust_flavor_id="cr-catupiry"),
    ])
    session.commit()


@pytest.fixture
def db():
    """Seeded session on a private in-memory SQLite database."""
    engine = create_engine("sqlite:///:memory:")
    Base.metadata.create_all(engine)
    Session = sessionmaker(bind=engine)
    s = Session()
    seed_pizzeria(s)
    yield s
    s.close()


@pytest.fixture
def client():
    """Shared FastAPI TestClient using an in-memory SQLite DB.

    Uses StaticPool so all connections share the same in-memory database.
    """
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    # Patch the db module used by the app
    db_mod.engine = engine
    db_mod.SessionLocal = TestingSessionLocal

    Base.metadata.create_all(bind=engine)

    session = TestingSessionLocal()
    seed_pizzeria(session)
    session.close()

    # Override FastAPI DB dependency
    def override_get_db():
        db_sess = TestingSessionLocal()
        try:
            yield db_sess
        finally:
            db_sess.close()

    app.dependency_overrides[db_mod.get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
