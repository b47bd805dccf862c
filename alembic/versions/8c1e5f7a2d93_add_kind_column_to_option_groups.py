"""Add kind column to product_option_groups

Revision ID: 8c1e5f7a2d93
Revises: 3f6a2c91d0b4
Create Date: 2026-09-28 15:40:52.107734

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '8c1e5f7a2d93'
down_revision: Union[str, Sequence[str], None] = '3f6a2c91d0b4'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    # Nullable: groups left NULL are classified by name at read time
    op.add_column(
        'product_option_groups',
        sa.Column('kind', sa.String(), nullable=True)
    )

    # Backfill the unambiguous cases
    op.execute(
        "UPDATE product_option_groups SET kind = 'size' "
        "WHERE kind IS NULL AND lower(name) LIKE '%tamanho%'"
    )
    op.execute(
        "UPDATE product_option_groups SET kind = 'dough' "
        "WHERE kind IS NULL AND lower(name) LIKE '%massa%'"
    )
    op.execute(
        "UPDATE product_option_groups SET kind = 'crust' "
        "WHERE kind IS NULL AND lower(name) LIKE '%borda%'"
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_column('product_option_groups', 'kind')
