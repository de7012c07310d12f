"""Hierarchical SEO path builder.

Turns catalog snapshots into ``GeneratedUrl`` drafts following the path
grammar::

    {brand}                                   collection
    comprar-carro/{brand}                     collection
    {brand}/{vehicle}                         vehicle_detail
    {brand}/{city}-{uf}                       collection
    {brand}/{vehicle}/{city}-{uf}             vehicle_detail
    {brand}/{neighborhood}-{city}-{uf}        collection
    {brand}/{vehicle}/{neighborhood}-{city}-{uf}  vehicle_detail

Nothing here touches the database. Callers load the sources with explicit
queries and hand the drafts to ``SeoUrlRegistry``.
"""

from collections.abc import Iterable, Iterator, Mapping, Sequence
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any
from uuid import UUID

from autolisting.config import settings
from autolisting.modules.catalog.models import City, Neighborhood, Vehicle, VehicleBrand
from autolisting.modules.urls.slugs import slugify

HOME_LABEL = "Início"
PURCHASE_LABEL = "Comprar Carro"
NEIGHBORHOODS_LABEL = "Bairros"
NEIGHBORHOODS_SEGMENT = "bairros"

SITEMAP_CHANGEFREQ = "weekly"


class PageType(StrEnum):
    VEHICLE_DETAIL = "vehicle_detail"
    COLLECTION = "collection"


SITEMAP_PRIORITIES: Mapping[PageType, float] = {
    PageType.VEHICLE_DETAIL: 0.8,
    PageType.COLLECTION: 0.6,
}


# ============================================================================
# Source snapshots
# ============================================================================


@dataclass(frozen=True)
class BrandSource:
    id: UUID
    name: str

    @property
    def slug(self) -> str:
        return slugify(self.name)

    @classmethod
    def from_model(cls, brand: VehicleBrand) -> "BrandSource":
        return cls(id=brand.id, name=brand.name)


@dataclass(frozen=True)
class VehicleSource:
    """Vehicle with its brand already resolved.

    ``url`` is the tenant-unique slug stored on the vehicle; detail paths use
    it so two vehicles with the same title never share a path.
    """

    id: UUID
    title: str
    brand: BrandSource
    url: str | None = None
    description: str | None = None

    @property
    def slug(self) -> str:
        return self.url or slugify(self.title)

    @classmethod
    def from_model(cls, vehicle: Vehicle) -> "VehicleSource":
        """Requires ``vehicle.brand`` to be eager loaded."""
        return cls(
            id=vehicle.id,
            title=vehicle.title,
            brand=BrandSource.from_model(vehicle.brand),
            url=vehicle.url,
            description=vehicle.description,
        )


@dataclass(frozen=True)
class CitySource:
    id: UUID
    name: str
    state_name: str
    state_code: str

    @property
    def slug(self) -> str:
        return slugify(f"{self.name}-{self.state_code}")

    @classmethod
    def from_model(cls, city: City) -> "CitySource":
        """Requires ``city.state`` to be eager loaded."""
        return cls(
            id=city.id,
            name=city.name,
            state_name=city.state.name,
            state_code=city.state.code,
        )


@dataclass(frozen=True)
class NeighborhoodSource:
    id: UUID
    name: str
    city: CitySource

    @property
    def slug(self) -> str:
        """Neighborhood slug qualified by its city, e.g. ``vila-madalena-sao-paulo-sp``."""
        return f"{slugify(self.name)}-{self.city.slug}"

    @classmethod
    def from_model(cls, neighborhood: Neighborhood) -> "NeighborhoodSource":
        """Requires ``neighborhood.city.state`` to be eager loaded."""
        return cls(
            id=neighborhood.id,
            name=neighborhood.name,
            city=CitySource.from_model(neighborhood.city),
        )


# ============================================================================
# Drafts
# ============================================================================


@dataclass(frozen=True)
class Breadcrumb:
    name: str
    path: str

    def to_dict(self) -> dict[str, str]:
        return {"name": self.name, "path": self.path}


@dataclass(frozen=True)
class GeneratedUrl:
    """Content of one SEO url record, before it is stored."""

    path: str
    type: PageType
    title: str
    meta_description: str
    breadcrumbs: tuple[Breadcrumb, ...]
    route_params: Mapping[str, str] = field(default_factory=dict)

    @property
    def canonical_url(self) -> str:
        return f"/{self.path}"

    @property
    def sitemap_priority(self) -> float:
        return SITEMAP_PRIORITIES[self.type]

    @property
    def sitemap_changefreq(self) -> str:
        return SITEMAP_CHANGEFREQ

    def content(self) -> dict[str, Any]:
        """Column values written on upsert (everything except the key)."""
        return {
            "type": self.type.value,
            "canonical_url": self.canonical_url,
            "title": self.title,
            "meta_description": self.meta_description,
            "breadcrumbs": [crumb.to_dict() for crumb in self.breadcrumbs],
            "route_params": dict(self.route_params),
            "is_indexable": True,
            "include_in_sitemap": True,
            "sitemap_priority": self.sitemap_priority,
            "sitemap_changefreq": self.sitemap_changefreq,
        }


# ============================================================================
# Builder
# ============================================================================


class HierarchicalPathBuilder:
    """Builds every SEO-facing page of a tenant catalog."""

    def __init__(self, purchase_prefix: str | None = None) -> None:
        self.purchase_prefix = slugify(purchase_prefix or settings.seo_purchase_prefix)

    def _home(self) -> Breadcrumb:
        return Breadcrumb(HOME_LABEL, "/")

    # Brands ---------------------------------------------------------------

    def brand_urls(self, brand: BrandSource) -> list[GeneratedUrl]:
        """Brand collection and bounded-purchase collection."""
        purchase_path = f"{self.purchase_prefix}/{brand.slug}"
        return [
            GeneratedUrl(
                path=brand.slug,
                type=PageType.COLLECTION,
                title=f"Carros {brand.name}",
                meta_description=f"Encontre os melhores carros {brand.name} disponíveis",
                breadcrumbs=(
                    self._home(),
                    Breadcrumb(brand.name, f"/{brand.slug}"),
                ),
                route_params={"brand_id": str(brand.id)},
            ),
            GeneratedUrl(
                path=purchase_path,
                type=PageType.COLLECTION,
                title=f"Comprar Carro {brand.name}",
                meta_description=f"Compre seu carro {brand.name} com as melhores condições",
                breadcrumbs=(
                    self._home(),
                    Breadcrumb(PURCHASE_LABEL, f"/{self.purchase_prefix}"),
                    Breadcrumb(brand.name, f"/{purchase_path}"),
                ),
                route_params={"brand_id": str(brand.id)},
            ),
        ]

    def vehicle_url(self, vehicle: VehicleSource) -> GeneratedUrl:
        brand = vehicle.brand
        path = f"{brand.slug}/{vehicle.slug}"
        return GeneratedUrl(
            path=path,
            type=PageType.VEHICLE_DETAIL,
            title=vehicle.title,
            meta_description=vehicle.description or f"Veja detalhes do {vehicle.title}",
            breadcrumbs=(
                self._home(),
                Breadcrumb(brand.name, f"/{brand.slug}"),
                Breadcrumb(vehicle.title, f"/{path}"),
            ),
            route_params={"vehicle_id": str(vehicle.id)},
        )

    # Cities ---------------------------------------------------------------

    def city_brand_url(self, brand: BrandSource, city: CitySource) -> GeneratedUrl:
        path = f"{brand.slug}/{city.slug}"
        return GeneratedUrl(
            path=path,
            type=PageType.COLLECTION,
            title=f"Carros {brand.name} em {city.name}",
            meta_description=f"Encontre carros {brand.name} em {city.name} - {city.state_name}",
            breadcrumbs=(
                self._home(),
                Breadcrumb(brand.name, f"/{brand.slug}"),
                Breadcrumb(city.name, f"/{path}"),
            ),
            route_params={"brand_id": str(brand.id), "city_id": str(city.id)},
        )

    def city_vehicle_url(self, vehicle: VehicleSource, city: CitySource) -> GeneratedUrl:
        brand = vehicle.brand
        path = f"{brand.slug}/{vehicle.slug}/{city.slug}"
        return GeneratedUrl(
            path=path,
            type=PageType.VEHICLE_DETAIL,
            title=f"{vehicle.title} em {city.name}",
            meta_description=(
                f"Veja o {vehicle.title} disponível em {city.name} - {city.state_name}"
            ),
            breadcrumbs=(
                self._home(),
                Breadcrumb(brand.name, f"/{brand.slug}"),
                Breadcrumb(city.name, f"/{brand.slug}/{city.slug}"),
                Breadcrumb(vehicle.title, f"/{path}"),
            ),
            route_params={"vehicle_id": str(vehicle.id), "city_id": str(city.id)},
        )

    # Neighborhoods --------------------------------------------------------

    def _neighborhood_trail(
        self, brand: BrandSource, neighborhood: NeighborhoodSource
    ) -> tuple[Breadcrumb, ...]:
        city = neighborhood.city
        return (
            self._home(),
            Breadcrumb(brand.name, f"/{brand.slug}"),
            Breadcrumb(NEIGHBORHOODS_LABEL, f"/{brand.slug}/{NEIGHBORHOODS_SEGMENT}"),
            Breadcrumb(city.name, f"/{brand.slug}/{NEIGHBORHOODS_SEGMENT}/{city.slug}"),
            Breadcrumb(neighborhood.name, f"/{brand.slug}/{neighborhood.slug}"),
        )

    def neighborhood_brand_url(
        self, brand: BrandSource, neighborhood: NeighborhoodSource
    ) -> GeneratedUrl:
        city = neighborhood.city
        return GeneratedUrl(
            path=f"{brand.slug}/{neighborhood.slug}",
            type=PageType.COLLECTION,
            title=f"Carros {brand.name} em {neighborhood.name}",
            meta_description=(
                f"Encontre carros {brand.name} no bairro {neighborhood.name} em {city.name}"
            ),
            breadcrumbs=self._neighborhood_trail(brand, neighborhood),
            route_params={
                "brand_id": str(brand.id),
                "neighborhood_id": str(neighborhood.id),
                "city_id": str(city.id),
            },
        )

    def neighborhood_vehicle_url(
        self, vehicle: VehicleSource, neighborhood: NeighborhoodSource
    ) -> GeneratedUrl:
        brand = vehicle.brand
        city = neighborhood.city
        path = f"{brand.slug}/{vehicle.slug}/{neighborhood.slug}"
        return GeneratedUrl(
            path=path,
            type=PageType.VEHICLE_DETAIL,
            title=f"{vehicle.title} em {neighborhood.name}",
            meta_description=(
                f"Veja o {vehicle.title} disponível no bairro {neighborhood.name} em {city.name}"
            ),
            breadcrumbs=(
                *self._neighborhood_trail(brand, neighborhood),
                Breadcrumb(vehicle.title, f"/{path}"),
            ),
            route_params={
                "vehicle_id": str(vehicle.id),
                "neighborhood_id": str(neighborhood.id),
                "city_id": str(city.id),
            },
        )

    # Catalog walks --------------------------------------------------------

    def iter_brand_urls(self, brands: Iterable[BrandSource]) -> Iterator[GeneratedUrl]:
        for brand in brands:
            yield from self.brand_urls(brand)

    def iter_vehicle_urls(self, vehicles: Iterable[VehicleSource]) -> Iterator[GeneratedUrl]:
        for vehicle in vehicles:
            yield self.vehicle_url(vehicle)

    def iter_city_urls(
        self,
        brands: Sequence[BrandSource],
        vehicles: Sequence[VehicleSource],
        cities: Iterable[CitySource],
    ) -> Iterator[GeneratedUrl]:
        """Every brand and every vehicle, once per served city."""
        for city in cities:
            for brand in brands:
                yield self.city_brand_url(brand, city)
            for vehicle in vehicles:
                yield self.city_vehicle_url(vehicle, city)

    def iter_neighborhood_urls(
        self,
        brands: Sequence[BrandSource],
        vehicles: Sequence[VehicleSource],
        neighborhoods: Iterable[NeighborhoodSource],
    ) -> Iterator[GeneratedUrl]:
        """Every brand and every vehicle, once per served neighborhood."""
        for neighborhood in neighborhoods:
            for brand in brands:
                yield self.neighborhood_brand_url(brand, neighborhood)
            for vehicle in vehicles:
                yield self.neighborhood_vehicle_url(vehicle, neighborhood)
