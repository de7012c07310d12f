"""Pydantic schemas for catalog module."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


# ============================================================================
# Brand Schemas
# ============================================================================


class VehicleBrandResponse(BaseModel):
    """Schema for brand response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    code: str | None = None


# ============================================================================
# Vehicle Schemas
# ============================================================================


class VehicleBase(BaseModel):
    """Base schema for vehicle."""

    brand_id: UUID
    title: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    is_active: bool = True


class VehicleCreate(VehicleBase):
    """Schema for creating vehicle. The url is always generated."""

    pass


class VehicleUpdate(BaseModel):
    """Schema for updating vehicle."""

    brand_id: UUID | None = None
    title: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    is_active: bool | None = None


class VehicleResponse(VehicleBase):
    """Schema for vehicle response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    tenant_id: UUID
    url: str | None = None
    brand: VehicleBrandResponse | None = None
    created_at: datetime
    updated_at: datetime
    deleted_at: datetime | None = None


class VehicleListResponse(BaseModel):
    """Schema for vehicle list response."""

    items: list[VehicleResponse]
    total: int
    page: int
    page_size: int
