"""initial schema - clients, requirements, suppliers, products, deals

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-19

For EXISTING databases: run `alembic stamp 001_initial` (skip DDL, just mark as current).
For NEW databases: run `alembic upgrade head` (creates all tables from models).
"""
from typing import Sequence, Union

from alembic import op  # noqa: F401
import sqlalchemy as sa  # noqa: F401

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the five brokerage tables from the SQLAlchemy models.

    checkfirst=True so tables created earlier by create_tables() are left alone.
    """
    from app.models import Base
    from app.database import engine

    Base.metadata.create_all(bind=engine, checkfirst=True)


def downgrade() -> None:
    """Drop all tables. DESTRUCTIVE: dev/test environments only."""
    from app.models import Base
    from app.database import engine

    Base.metadata.drop_all(bind=engine)
