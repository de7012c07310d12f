"""Tenant database model."""

from sqlalchemy import CheckConstraint, String
from sqlalchemy.orm import Mapped, mapped_column

from autolisting.core.base_model import ActiveMixin, Base, SoftDeleteMixin, TimestampMixin, UUIDMixin


class Tenant(Base, UUIDMixin, TimestampMixin, SoftDeleteMixin, ActiveMixin):
    """Tenant (dealership account) model.

    Every sluggable entity and every SEO url record belongs to exactly one
    tenant; url uniqueness is enforced only inside that scope.
    """

    __tablename__ = "tenants"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(100), unique=True, nullable=False, index=True)
    domain: Mapped[str | None] = mapped_column(String(255), nullable=True, unique=True)

    __table_args__ = (
        CheckConstraint("char_length(slug) >= 2", name="ck_tenants_slug_min_length"),
    )

    def __repr__(self) -> str:
        return f"<Tenant {self.slug}>"
