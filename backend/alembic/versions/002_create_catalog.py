"""Create catalog tables: brands, vehicles and served locations.

Revision ID: 002
Revises: 001
Create Date: 2026-10-19
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def upgrade() -> None:
    """Create catalog module tables."""

    # Brands (global)
    op.create_table(
        "vehicle_brands",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False, unique=True),
        sa.Column("code", sa.String(50), nullable=True),
        *_timestamps(),
    )

    # Vehicles
    op.create_table(
        "vehicles",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("tenant_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False),
        sa.Column("brand_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("vehicle_brands.id", ondelete="RESTRICT"), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("url", sa.String(255), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_vehicles_tenant_id", "vehicles", ["tenant_id"])
    op.create_index("ix_vehicles_brand_id", "vehicles", ["brand_id"])
    op.create_index("ix_vehicles_is_active", "vehicles", ["is_active"])
    op.create_index("ix_vehicles_deleted_at", "vehicles", ["deleted_at"])
    op.create_index(
        "ux_vehicles_tenant_url",
        "vehicles",
        ["tenant_id", "url"],
        unique=True,
        postgresql_where=sa.text("deleted_at IS NULL AND url IS NOT NULL"),
    )

    # Locations
    op.create_table(
        "states",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("code", sa.String(2), nullable=False, unique=True),
    )
    op.create_table(
        "cities",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(150), nullable=False),
        sa.Column("state_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("states.id", ondelete="CASCADE"), nullable=False),
    )
    op.create_index("ix_cities_state_id", "cities", ["state_id"])
    op.create_table(
        "neighborhoods",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(150), nullable=False),
        sa.Column("city_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("cities.id", ondelete="CASCADE"), nullable=False),
    )
    op.create_index("ix_neighborhoods_city_id", "neighborhoods", ["city_id"])

    # Locations served by each tenant
    op.create_table(
        "tenant_cities",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("tenant_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False),
        sa.Column("city_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("cities.id", ondelete="CASCADE"), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        sa.UniqueConstraint("tenant_id", "city_id", name="uq_tenant_cities_tenant_city"),
    )
    op.create_index("ix_tenant_cities_tenant_id", "tenant_cities", ["tenant_id"])
    op.create_index("ix_tenant_cities_is_active", "tenant_cities", ["is_active"])
    op.create_table(
        "tenant_neighborhoods",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("tenant_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False),
        sa.Column("neighborhood_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("neighborhoods.id", ondelete="CASCADE"), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        sa.UniqueConstraint("tenant_id", "neighborhood_id", name="uq_tenant_neighborhoods_tenant_neighborhood"),
    )
    op.create_index("ix_tenant_neighborhoods_tenant_id", "tenant_neighborhoods", ["tenant_id"])
    op.create_index("ix_tenant_neighborhoods_is_active", "tenant_neighborhoods", ["is_active"])


def downgrade() -> None:
    """Drop catalog module tables."""
    op.drop_table("tenant_neighborhoods")
    op.drop_table("tenant_cities")
    op.drop_table("neighborhoods")
    op.drop_table("cities")
    op.drop_table("states")
    op.drop_table("vehicles")
    op.drop_table("vehicle_brands")
