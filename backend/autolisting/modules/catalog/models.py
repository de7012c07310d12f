"""Catalog database models: brands, vehicles and served locations."""

from uuid import UUID

from sqlalchemy import ForeignKey, Index, String, Text, UniqueConstraint, text
from sqlalchemy.dialects.postgresql import UUID as PGUUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from autolisting.core.base_model import (
    ActiveMixin,
    Base,
    SoftDeleteMixin,
    TenantMixin,
    TimestampMixin,
    UUIDMixin,
)


# ============================================================================
# Brands & Vehicles
# ============================================================================


class VehicleBrand(Base, UUIDMixin, TimestampMixin):
    """Vehicle brand (global, shared by all tenants)."""

    __tablename__ = "vehicle_brands"

    name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    code: Mapped[str | None] = mapped_column(String(50), nullable=True)

    def __repr__(self) -> str:
        return f"<VehicleBrand {self.name}>"


class Vehicle(Base, UUIDMixin, TimestampMixin, SoftDeleteMixin, TenantMixin, ActiveMixin):
    """Vehicle listing owned by a tenant.

    ``url`` is the tenant-unique slug derived from ``title``. It is written
    only by the url lifecycle, never directly by API clients.
    """

    __tablename__ = "vehicles"

    brand_id: Mapped[UUID] = mapped_column(
        PGUUID(as_uuid=True),
        ForeignKey("vehicle_brands.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    url: Mapped[str | None] = mapped_column(String(255), nullable=True)

    brand: Mapped["VehicleBrand"] = relationship("VehicleBrand", lazy="raise")

    __table_args__ = (
        # Last line of defense against concurrent slug resolution.
        Index(
            "ux_vehicles_tenant_url",
            "tenant_id",
            "url",
            unique=True,
            postgresql_where=text("deleted_at IS NULL AND url IS NOT NULL"),
        ),
    )

    def __repr__(self) -> str:
        return f"<Vehicle {self.title}>"


# ============================================================================
# Locations
# ============================================================================


class State(Base, UUIDMixin):
    """Federative unit (UF)."""

    __tablename__ = "states"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    code: Mapped[str] = mapped_column(String(2), nullable=False, unique=True)


class City(Base, UUIDMixin):
    """City within a state."""

    __tablename__ = "cities"

    name: Mapped[str] = mapped_column(String(150), nullable=False)
    state_id: Mapped[UUID] = mapped_column(
        PGUUID(as_uuid=True),
        ForeignKey("states.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    state: Mapped["State"] = relationship("State", lazy="raise")


class Neighborhood(Base, UUIDMixin):
    """Neighborhood (bairro) within a city."""

    __tablename__ = "neighborhoods"

    name: Mapped[str] = mapped_column(String(150), nullable=False)
    city_id: Mapped[UUID] = mapped_column(
        PGUUID(as_uuid=True),
        ForeignKey("cities.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    city: Mapped["City"] = relationship("City", lazy="raise")


class TenantCity(Base, UUIDMixin, TimestampMixin, TenantMixin, ActiveMixin):
    """City served by a tenant."""

    __tablename__ = "tenant_cities"

    city_id: Mapped[UUID] = mapped_column(
        PGUUID(as_uuid=True),
        ForeignKey("cities.id", ondelete="CASCADE"),
        nullable=False,
    )

    city: Mapped["City"] = relationship("City", lazy="raise")

    __table_args__ = (
        UniqueConstraint("tenant_id", "city_id", name="uq_tenant_cities_tenant_city"),
    )


class TenantNeighborhood(Base, UUIDMixin, TimestampMixin, TenantMixin, ActiveMixin):
    """Neighborhood served by a tenant."""

    __tablename__ = "tenant_neighborhoods"

    neighborhood_id: Mapped[UUID] = mapped_column(
        PGUUID(as_uuid=True),
        ForeignKey("neighborhoods.id", ondelete="CASCADE"),
        nullable=False,
    )

    neighborhood: Mapped["Neighborhood"] = relationship("Neighborhood", lazy="raise")

    __table_args__ = (
        UniqueConstraint(
            "tenant_id", "neighborhood_id", name="uq_tenant_neighborhoods_tenant_neighborhood"
        ),
    )
