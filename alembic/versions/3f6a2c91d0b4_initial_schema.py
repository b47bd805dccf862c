"""initial schema

Revision ID: 3f6a2c91d0b4
Revises:
Create Date: 2026-09-14 10:02:11.481203

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f6a2c91d0b4'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    # Check if tables already exist (databases created by init_db)
    conn = op.get_bind()
    inspector = sa.inspect(conn)
    existing_tables = inspector.get_table_names()

    if 'products' not in existing_tables:
        op.create_table('products',
            sa.Column('id', sa.String(length=36), nullable=False),
            sa.Column('company_id', sa.String(), nullable=False),
            sa.Column('category_id', sa.String(), nullable=True),
            sa.Column('name', sa.String(), nullable=False),
            sa.Column('description', sa.Text(), nullable=True),
            sa.Column('price', sa.Float(), nullable=False),
            sa.Column('image_url', sa.String(), nullable=True),
            sa.Column('is_active', sa.Boolean(), nullable=False),
            sa.Column('stock_quantity', sa.Float(), nullable=True),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_products_company_id'), 'products', ['company_id'], unique=False)
        op.create_index(op.f('ix_products_category_id'), 'products', ['category_id'], unique=False)

    if 'product_option_groups' not in existing_tables:
        op.create_table('product_option_groups',
            sa.Column('id', sa.String(length=36), nullable=False),
            sa.Column('product_id', sa.String(length=36), nullable=False),
            sa.Column('name', sa.String(), nullable=False),
            sa.Column('description', sa.Text(), nullable=True),
            sa.Column('selection_type', sa.String(), nullable=False),
            sa.Column('is_required', sa.Boolean(), nullable=False),
            sa.Column('max_selections', sa.Integer(), nullable=True),
            sa.Column('min_selections', sa.Integer(), nullable=True),
            sa.Column('sort_order', sa.Integer(), nullable=False),
            sa.ForeignKeyConstraint(['product_id'], ['products.id'], ondelete='CASCADE'),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_product_option_groups_product_id'), 'product_option_groups', ['product_id'], unique=False)

    if 'product_options' not in existing_tables:
        op.create_table('product_options',
            sa.Column('id', sa.String(length=36), nullable=False),
            sa.Column('group_id', sa.String(length=36), nullable=False),
            sa.Column('name', sa.String(), nullable=False),
            sa.Column('price_modifier', sa.Float(), nullable=False),
            sa.Column('is_available', sa.Boolean(), nullable=False),
            sa.Column('sort_order', sa.Integer(), nullable=False),
            sa.ForeignKeyConstraint(['group_id'], ['product_option_groups.id'], ondelete='CASCADE'),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_product_options_group_id'), 'product_options', ['group_id'], unique=False)

    if 'pizza_settings' not in existing_tables:
        op.create_table('pizza_settings',
            sa.Column('id', sa.String(length=36), nullable=False),
            sa.Column('company_id', sa.String(), nullable=False),
            sa.Column('enable_half_half', sa.Boolean(), nullable=False),
            sa.Column('enable_crust', sa.Boolean(), nullable=False),
            sa.Column('enable_addons', sa.Boolean(), nullable=False),
            sa.Column('max_flavors', sa.Integer(), nullable=False),
            sa.Column('allow_crust_extra_price', sa.Boolean(), nullable=False),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_pizza_settings_company_id'), 'pizza_settings', ['company_id'], unique=True)

    if 'pizza_categories' not in existing_tables:
        op.create_table('pizza_categories',
            sa.Column('id', sa.String(length=36), nullable=False),
            sa.Column('company_id', sa.String(), nullable=False),
            sa.Column('category_id', sa.String(), nullable=False),
            sa.PrimaryKeyConstraint('id'),
            sa.UniqueConstraint('company_id', 'category_id', name='uix_pizza_category')
        )
        op.create_index(op.f('ix_pizza_categories_company_id'), 'pizza_categories', ['company_id'], unique=False)

    if 'pizza_category_settings' not in existing_tables:
        op.create_table('pizza_category_settings',
            sa.Column('id', sa.String(length=36), nullable=False),
            sa.Column('category_id', sa.String(), nullable=False),
            sa.Column('allow_half_half', sa.Boolean(), nullable=False),
            sa.Column('max_flavors', sa.Integer(), nullable=True),
            sa.Column('half_half_pricing_rule', sa.String(), nullable=True),
            sa.Column('half_half_discount_percentage', sa.Float(), nullable=False, server_default='0'),
            sa.Column('allow_repeated_flavors', sa.Boolean(), nullable=False, server_default=sa.false()),
            sa.Column('half_half_options_source', sa.String(), nullable=True),
            sa.Column('dough_max_selections', sa.Integer(), nullable=False, server_default='1'),
            sa.Column('dough_is_required', sa.Boolean(), nullable=False, server_default=sa.true()),
            sa.Column('crust_max_selections', sa.Integer(), nullable=False, server_default='1'),
            sa.Column('crust_is_required', sa.Boolean(), nullable=False, server_default=sa.false()),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_pizza_category_settings_category_id'), 'pizza_category_settings', ['category_id'], unique=True)

    if 'pizza_category_sizes' not in existing_tables:
        op.create_table('pizza_category_sizes',
            sa.Column('id', sa.String(length=36), nullable=False),
            sa.Column('category_id', sa.String(), nullable=False),
            sa.Column('name', sa.String(), nullable=False),
            sa.Column('base_price', sa.Float(), nullable=False),
            sa.Column('max_flavors', sa.Integer(), nullable=False),
            sa.Column('slices', sa.Integer(), nullable=True),
            sa.Column('sort_order', sa.Integer(), nullable=False),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_pizza_category_sizes_category_id'), 'pizza_category_sizes', ['category_id'], unique=False)

    if 'pizza_dough_types' not in existing_tables:
        op.create_table('pizza_dough_types',
            sa.Column('id', sa.String(length=36), nullable=False),
            sa.Column('company_id', sa.String(), nullable=False),
            sa.Column('name', sa.String(), nullable=False),
            sa.Column('extra_price', sa.Float(), nullable=False),
            sa.Column('active', sa.Boolean(), nullable=False),
            sa.Column('sort_order', sa.Integer(), nullable=False),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_pizza_dough_types_company_id'), 'pizza_dough_types', ['company_id'], unique=False)

    if 'pizza_crust_flavors' not in existing_tables:
        op.create_table('pizza_crust_flavors',
            sa.Column('id', sa.String(length=36), nullable=False),
            sa.Column('company_id', sa.String(), nullable=False),
            sa.Column('name', sa.String(), nullable=False),
            sa.Column('extra_price', sa.Float(), nullable=False),
            sa.Column('active', sa.Boolean(), nullable=False),
            sa.Column('sort_order', sa.Integer(), nullable=False),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_pizza_crust_flavors_company_id'), 'pizza_crust_flavors', ['company_id'], unique=False)

    if 'pizza_product_crust_flavors' not in existing_tables:
        op.create_table('pizza_product_crust_flavors',
            sa.Column('id', sa.String(length=36), nullable=False),
            sa.Column('product_id', sa.String(length=36), nullable=False),
            sa.Column('crust_flavor_id', sa.String(length=36), nullable=False),
            sa.ForeignKeyConstraint(['product_id'], ['products.id'], ondelete='CASCADE'),
            sa.ForeignKeyConstraint(['crust_flavor_id'], ['pizza_crust_flavors.id'], ondelete='CASCADE'),
            sa.PrimaryKeyConstraint('id'),
            sa.UniqueConstraint('product_id', 'crust_flavor_id', name='uix_product_crust_flavor')
        )
        op.create_index(op.f('ix_pizza_product_crust_flavors_product_id'), 'pizza_product_crust_flavors', ['product_id'], unique=False)
        op.create_index(op.f('ix_pizza_product_crust_flavors_crust_flavor_id'), 'pizza_product_crust_flavors', ['crust_flavor_id'], unique=False)

    if 'carts' not in existing_tables:
        op.create_table('carts',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('cart_id', sa.String(), nullable=False),
            sa.Column('company_slug', sa.String(), nullable=True),
            sa.Column('items', sa.JSON(), nullable=False),
            sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
            sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_carts_id'), 'carts', ['id'], unique=False)
        op.create_index(op.f('ix_carts_cart_id'), 'carts', ['cart_id'], unique=True)
        op.create_index('ix_carts_company_slug_updated_at', 'carts', ['company_slug', 'updated_at'], unique=False)


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index('ix_carts_company_slug_updated_at', table_name='carts')
    op.drop_index(op.f('ix_carts_cart_id'), table_name='carts')
    op.drop_index(op.f('ix_carts_id'), table_name='carts')
    op.drop_table('carts')

    op.drop_index(op.f('ix_pizza_product_crust_flavors_crust_flavor_id'), table_name='pizza_product_crust_flavors')
    op.drop_index(op.f('ix_pizza_product_crust_flavors_product_id'), table_name='pizza_product_crust_flavors')
    op.drop_table('pizza_product_crust_flavors')

    op.drop_index(op.f('ix_pizza_crust_flavors_company_id'), table_name='pizza_crust_flavors')
    op.drop_table('pizza_crust_flavors')

    op.drop_index(op.f('ix_pizza_dough_types_company_id'), table_name='pizza_dough_types')
    op.drop_table('pizza_dough_types')

    op.drop_index(op.f('ix_pizza_category_sizes_category_id'), table_name='pizza_category_sizes')
    op.drop_table('pizza_category_sizes')

    op.drop_index(op.f('ix_pizza_category_settings_category_id'), table_name='pizza_category_settings')
    op.drop_table('pizza_category_settings')

    op.drop_index(op.f('ix_pizza_categories_company_id'), table_name='pizza_categories')
    op.drop_table('pizza_categories')

    op.drop_index(op.f('ix_pizza_settings_company_id'), table_name='pizza_settings')
    op.drop_table('pizza_settings')

    op.drop_index(op.f('ix_product_options_group_id'), table_name='product_options')
    op.drop_table('product_options')

    op.drop_index(op.f('ix_product_option_groups_product_id'), table_name='product_option_groups')
    op.drop_table('product_option_groups')

    op.drop_index(op.f('ix_products_category_id'), table_name='products')
    op.drop_index(op.f('ix_products_company_id'), table_name='products')
    op.drop_table('products')
