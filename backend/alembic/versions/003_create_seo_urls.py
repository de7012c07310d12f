"""Create SEO url and redirect tables.

Revision ID: 003
Revises: 002
Create Date: 2026-10-19
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "003"
down_revision: Union[str, None] = "002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create SEO module tables."""

    # Generated SEO urls
    op.create_table(
        "seo_urls",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("tenant_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False),
        sa.Column("locale", sa.String(10), nullable=False),
        sa.Column("path", sa.String(500), nullable=False),
        sa.Column("type", sa.String(30), nullable=False),
        sa.Column("canonical_url", sa.String(500), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("meta_description", sa.Text(), nullable=True),
        sa.Column("breadcrumbs", postgresql.JSONB(), nullable=False, server_default=sa.text("'[]'::jsonb")),
        sa.Column("route_params", postgresql.JSONB(), nullable=False, server_default=sa.text("'{}'::jsonb")),
        sa.Column("is_indexable", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("include_in_sitemap", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("sitemap_priority", sa.Float(), nullable=False, server_default="0.6"),
        sa.Column("sitemap_changefreq", sa.String(20), nullable=False, server_default="weekly"),
        sa.Column("lastmod", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint("type IN ('vehicle_detail', 'collection')", name="ck_seo_urls_type"),
        sa.CheckConstraint(
            "sitemap_priority >= 0 AND sitemap_priority <= 1",
            name="ck_seo_urls_priority_range",
        ),
    )
    op.create_index("ix_seo_urls_tenant_id", "seo_urls", ["tenant_id"])
    op.create_index("ix_seo_urls_type", "seo_urls", ["type"])
    op.create_index(
        "ux_seo_urls_tenant_locale_path",
        "seo_urls",
        ["tenant_id", "locale", "path"],
        unique=True,
    )

    # Redirects from old vehicle paths
    op.create_table(
        "url_redirects",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("tenant_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False),
        sa.Column("from_url", sa.String(500), nullable=False),
        sa.Column("to_url", sa.String(500), nullable=False),
        sa.Column("redirect_type", sa.Integer(), nullable=False, server_default="301"),
        sa.Column("reason", sa.String(100), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("hit_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("last_redirected_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint("redirect_type = 301", name="ck_url_redirects_type"),
        sa.CheckConstraint("char_length(from_url) >= 1", name="ck_url_redirects_from_url"),
    )
    op.create_index("ix_url_redirects_tenant_id", "url_redirects", ["tenant_id"])
    op.create_index("ix_url_redirects_is_active", "url_redirects", ["is_active"])
    op.create_index("ux_url_redirects_tenant_from", "url_redirects", ["tenant_id", "from_url"], unique=True)
    op.create_index("ix_url_redirects_tenant_to", "url_redirects", ["tenant_id", "to_url"])


def downgrade() -> None:
    """Drop SEO module tables."""
    op.drop_table("url_redirects")
    op.drop_table("seo_urls")
