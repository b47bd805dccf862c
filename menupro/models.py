import uuid

from sqlalchemy import (
    Column,
    Integer,
    String,
    Float,
    Boolean,
    JSON,
    DateTime,
    ForeignKey,
    Text,
    Index,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()


def _uuid() -> str:
    return str(uuid.uuid4())


# --- Catalog ---

class Product(Base):
    __tablename__ = "products"

    id = Column(String(36), primary_key=True, default=_uuid)
    company_id = Column(String, nullable=False, index=True)
    category_id = Column(String, nullable=True, index=True)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    price = Column(Float, nullable=False, default=0.0)
    image_url = Column(String, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    stock_quantity = Column(Float, nullable=True)  # None = stock not tracked

    option_groups = relationship("ProductOptionGroup", back_populates="product", cascade="all, delete-orphan")
    crust_links = relationship("PizzaProductCrustFlavor", back_populates="product", cascade="all, delete-orphan")


class ProductOptionGroup(Base):
    """A named set of choices attached to one product (e.g. "Tamanho", "Bordas")."""
    __tablename__ = "product_option_groups"

    id = Column(String(36), primary_key=True, default=_uuid)
    product_id = Column(String(36), ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    selection_type = Column(String, nullable=False, default="single")  # 'single' or 'multiple'
    is_required = Column(Boolean, nullable=False, default=False)
    max_selections = Column(Integer, nullable=True)
    min_selections = Column(Integer, nullable=True)
    sort_order = Column(Integer, nullable=False, default=0)
    # 'size', 'dough', 'crust', 'addon'; NULL for rows created before the column existed
    kind = Column(String, nullable=True)

    product = relationship("Product", back_populates="option_groups")
    options = relationship(
        "ProductOption",
        back_populates="group",
        cascade="all, delete-orphan",
        order_by="ProductOption.sort_order",
    )


class ProductOption(Base):
    __tablename__ = "product_options"

    id = Column(String(36), primary_key=True, default=_uuid)
    group_id = Column(String(36), ForeignKey("product_option_groups.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String, nullable=False)
    # For size groups of pizzas this is the absolute size price, not a delta
    price_modifier = Column(Float, nullable=False, default=0.0)
    is_available = Column(Boolean, nullable=False, default=True)
    sort_order = Column(Integer, nullable=False, default=0)

    group = relationship("ProductOptionGroup", back_populates="options")


# --- Pizza configuration ---

class PizzaSettings(Base):
    """Company-wide pizza settings."""
    __tablename__ = "pizza_settings"

    id = Column(String(36), primary_key=True, default=_uuid)
    company_id = Column(String, nullable=False, unique=True, index=True)
    enable_half_half = Column(Boolean, nullable=False, default=True)
    enable_crust = Column(Boolean, nullable=False, default=True)
    enable_addons = Column(Boolean, nullable=False, default=True)
    max_flavors = Column(Integer, nullable=False, default=2)
    allow_crust_extra_price = Column(Boolean, nullable=False, default=True)


class PizzaCategory(Base):
    """Marks a menu category as a pizza category for a company."""
    __tablename__ = "pizza_categories"

    id = Column(String(36), primary_key=True, default=_uuid)
    company_id = Column(String, nullable=False, index=True)
    category_id = Column(String, nullable=False)

    __table_args__ = (
        UniqueConstraint("company_id", "category_id", name="uix_pizza_category"),
    )


class PizzaCategorySettings(Base):
    __tablename__ = "pizza_category_settings"

    id = Column(String(36), primary_key=True, default=_uuid)
    category_id = Column(String, nullable=False, unique=True, index=True)
    allow_half_half = Column(Boolean, nullable=False, default=True)
    max_flavors = Column(Integer, nullable=True)
    half_half_pricing_rule = Column(String, nullable=True)  # 'highest', 'average', 'sum'
    half_half_discount_percentage = Column(Float, nullable=False, default=0.0)
    allow_repeated_flavors = Column(Boolean, nullable=False, default=False)
    half_half_options_source = Column(String, nullable=True)  # 'highest', 'lowest', 'first'
    dough_max_selections = Column(Integer, nullable=False, default=1)
    dough_is_required = Column(Boolean, nullable=False, default=True)
    crust_max_selections = Column(Integer, nullable=False, default=1)
    crust_is_required = Column(Boolean, nullable=False, default=False)


class PizzaCategorySize(Base):
    """Category-level size table, used when products carry no size group."""
    __tablename__ = "pizza_category_sizes"

    id = Column(String(36), primary_key=True, default=_uuid)
    category_id = Column(String, nullable=False, index=True)
    name = Column(String, nullable=False)
    base_price = Column(Float, nullable=False, default=0.0)
    max_flavors = Column(Integer, nullable=False, default=2)
    slices = Column(Integer, nullable=True)
    sort_order = Column(Integer, nullable=False, default=0)


class PizzaDoughType(Base):
    __tablename__ = "pizza_dough_types"

    id = Column(String(36), primary_key=True, default=_uuid)
    company_id = Column(String, nullable=False, index=True)
    name = Column(String, nullable=False)
    extra_price = Column(Float, nullable=False, default=0.0)
    active = Column(Boolean, nullable=False, default=True)
    sort_order = Column(Integer, nullable=False, default=0)


class PizzaCrustFlavor(Base):
    __tablename__ = "pizza_crust_flavors"

    id = Column(String(36), primary_key=True, default=_uuid)
    company_id = Column(String, nullable=False, index=True)
    name = Column(String, nullable=False)
    extra_price = Column(Float, nullable=False, default=0.0)
    active = Column(Boolean, nullable=False, default=True)
    sort_order = Column(Integer, nullable=False, default=0)

    product_links = relationship("PizzaProductCrustFlavor", back_populates="crust_flavor", cascade="all, delete-orphan")


class PizzaProductCrustFlavor(Base):
    """Links a crust flavor to the pizza products that offer it."""
    __tablename__ = "pizza_product_crust_flavors"

    id = Column(String(36), primary_key=True, default=_uuid)
    product_id = Column(String(36), ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True)
    crust_flavor_id = Column(String(36), ForeignKey("pizza_crust_flavors.id", ondelete="CASCADE"), nullable=False, index=True)

    __table_args__ = (
        UniqueConstraint("product_id", "crust_flavor_id", name="uix_product_crust_flavor"),
    )

    product = relationship("Product", back_populates="crust_links")
    crust_flavor = relationship("PizzaCrustFlavor", back_populates="product_links")


# --- Cart persistence ---

class Cart(Base):
    """
    Persists a customer's cart so it survives page reloads and server restarts.
    """
    __tablename__ = "carts"

    id = Column(Integer, primary_key=True, index=True)
    cart_id = Column(String, unique=True, nullable=False, index=True)
    company_slug = Column(String, nullable=True)

    # Cart items as JSON (see schemas.cart.CartItem)
    items = Column(JSON, nullable=False, default=list)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    __table_args__ = (
        Index("ix_carts_company_slug_updated_at", "company_slug", "updated_at"),
    )
