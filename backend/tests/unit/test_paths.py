"""Unit tests for the hierarchical path builder."""

from uuid import uuid4

import pytest

from autolisting.modules.catalog.models import City, Neighborhood, Vehicle
from autolisting.modules.urls.paths import (
    BrandSource,
    CitySource,
    HierarchicalPathBuilder,
    NeighborhoodSource,
    PageType,
    VehicleSource,
)


@pytest.fixture
def builder() -> HierarchicalPathBuilder:
    return HierarchicalPathBuilder("comprar-carro")


class TestSources:
    """Tests for source snapshots and their slugs."""

    @pytest.mark.unit
    def test_city_slug_includes_state_code(self, city_source: CitySource) -> None:
        assert city_source.slug == "sao-paulo-sp"

    @pytest.mark.unit
    def test_neighborhood_slug_is_qualified_by_city(
        self, neighborhood_source: NeighborhoodSource
    ) -> None:
        assert neighborhood_source.slug == "vila-madalena-sao-paulo-sp"

    @pytest.mark.unit
    def test_vehicle_slug_prefers_stored_url(self, brand_source: BrandSource) -> None:
        vehicle = VehicleSource(id=uuid4(), title="Onix 1.0", brand=brand_source, url="onix-10-2")
        assert vehicle.slug == "onix-10-2"

    @pytest.mark.unit
    def test_vehicle_slug_falls_back_to_title(self, brand_source: BrandSource) -> None:
        vehicle = VehicleSource(id=uuid4(), title="Onix 1.0", brand=brand_source)
        assert vehicle.slug == "onix-10"

    @pytest.mark.unit
    def test_from_models(self, vehicle: Vehicle, vila_madalena: Neighborhood) -> None:
        vehicle_source = VehicleSource.from_model(vehicle)
        neighborhood_source = NeighborhoodSource.from_model(vila_madalena)

        assert vehicle_source.brand.name == "Chevrolet"
        assert vehicle_source.url == "onix-10"
        assert neighborhood_source.city.state_code == "SP"
        assert neighborhood_source.slug == "vila-madalena-sao-paulo-sp"

    @pytest.mark.unit
    def test_city_from_model(self, sao_paulo: City) -> None:
        source = CitySource.from_model(sao_paulo)
        assert (source.name, source.state_name, source.state_code) == (
            "São Paulo",
            "São Paulo",
            "SP",
        )


class TestBrandUrls:
    """Tests for brand collection pages."""

    @pytest.mark.unit
    def test_brand_and_purchase_paths(
        self, builder: HierarchicalPathBuilder, brand_source: BrandSource
    ) -> None:
        urls = builder.brand_urls(brand_source)

        assert [url.path for url in urls] == ["chevrolet", "comprar-carro/chevrolet"]
        assert {url.type for url in urls} == {PageType.COLLECTION}
        assert {url.sitemap_priority for url in urls} == {0.6}

    @pytest.mark.unit
    def test_purchase_breadcrumbs(
        self, builder: HierarchicalPathBuilder, brand_source: BrandSource
    ) -> None:
        purchase = builder.brand_urls(brand_source)[1]

        assert [crumb.to_dict() for crumb in purchase.breadcrumbs] == [
            {"name": "Início", "path": "/"},
            {"name": "Comprar Carro", "path": "/comprar-carro"},
            {"name": "Chevrolet", "path": "/comprar-carro/chevrolet"},
        ]

    @pytest.mark.unit
    def test_purchase_prefix_is_slugified(self, brand_source: BrandSource) -> None:
        builder = HierarchicalPathBuilder("Comprar Moto")
        assert builder.brand_urls(brand_source)[1].path == "comprar-moto/chevrolet"


class TestVehicleUrls:
    """Tests for vehicle detail pages."""

    @pytest.mark.unit
    def test_vehicle_detail(
        self, builder: HierarchicalPathBuilder, vehicle_source: VehicleSource
    ) -> None:
        url = builder.vehicle_url(vehicle_source)

        assert url.path == "chevrolet/onix-10-turbo"
        assert url.canonical_url == "/chevrolet/onix-10-turbo"
        assert url.type is PageType.VEHICLE_DETAIL
        assert url.sitemap_priority == 0.8
        assert url.sitemap_changefreq == "weekly"
        assert url.route_params == {"vehicle_id": str(vehicle_source.id)}
        assert url.meta_description == "Veja detalhes do Onix 1.0 Turbo"
        assert [crumb.path for crumb in url.breadcrumbs] == [
            "/",
            "/chevrolet",
            "/chevrolet/onix-10-turbo",
        ]

    @pytest.mark.unit
    def test_vehicle_description_is_used_when_present(
        self, builder: HierarchicalPathBuilder, brand_source: BrandSource
    ) -> None:
        vehicle = VehicleSource(
            id=uuid4(), title="Onix", brand=brand_source, description="Único dono"
        )
        assert builder.vehicle_url(vehicle).meta_description == "Único dono"

    @pytest.mark.unit
    def test_city_vehicle(
        self,
        builder: HierarchicalPathBuilder,
        vehicle_source: VehicleSource,
        city_source: CitySource,
    ) -> None:
        url = builder.city_vehicle_url(vehicle_source, city_source)

        assert url.path == "chevrolet/onix-10-turbo/sao-paulo-sp"
        assert url.title == "Onix 1.0 Turbo em São Paulo"
        assert [crumb.path for crumb in url.breadcrumbs] == [
            "/",
            "/chevrolet",
            "/chevrolet/sao-paulo-sp",
            "/chevrolet/onix-10-turbo/sao-paulo-sp",
        ]

    @pytest.mark.unit
    def test_neighborhood_vehicle(
        self,
        builder: HierarchicalPathBuilder,
        vehicle_source: VehicleSource,
        neighborhood_source: NeighborhoodSource,
    ) -> None:
        url = builder.neighborhood_vehicle_url(vehicle_source, neighborhood_source)

        assert url.path == "chevrolet/onix-10-turbo/vila-madalena-sao-paulo-sp"
        assert url.type is PageType.VEHICLE_DETAIL
        assert [crumb.name for crumb in url.breadcrumbs] == [
            "Início",
            "Chevrolet",
            "Bairros",
            "São Paulo",
            "Vila Madalena",
            "Onix 1.0 Turbo",
        ]
        assert all(crumb.path.startswith("/") for crumb in url.breadcrumbs)
        assert url.breadcrumbs[-1].path == url.canonical_url


class TestLocationUrls:
    """Tests for city and neighborhood collections."""

    @pytest.mark.unit
    def test_city_brand(
        self,
        builder: HierarchicalPathBuilder,
        brand_source: BrandSource,
        city_source: CitySource,
    ) -> None:
        url = builder.city_brand_url(brand_source, city_source)

        assert url.path == "chevrolet/sao-paulo-sp"
        assert url.type is PageType.COLLECTION
        assert url.route_params == {
            "brand_id": str(brand_source.id),
            "city_id": str(city_source.id),
        }

    @pytest.mark.unit
    def test_neighborhood_brand(
        self,
        builder: HierarchicalPathBuilder,
        brand_source: BrandSource,
        neighborhood_source: NeighborhoodSource,
    ) -> None:
        url = builder.neighborhood_brand_url(brand_source, neighborhood_source)

        assert url.path == "chevrolet/vila-madalena-sao-paulo-sp"
        assert url.breadcrumbs[2].path == "/chevrolet/bairros"
        assert url.breadcrumbs[3].path == "/chevrolet/bairros/sao-paulo-sp"

    @pytest.mark.unit
    def test_location_walks_cover_every_brand_and_vehicle(
        self,
        builder: HierarchicalPathBuilder,
        brand_source: BrandSource,
        vehicle_source: VehicleSource,
    ) -> None:
        cities = [
            CitySource(id=uuid4(), name="Campinas", state_name="São Paulo", state_code="SP"),
            CitySource(id=uuid4(), name="Curitiba", state_name="Paraná", state_code="PR"),
        ]
        neighborhoods = [NeighborhoodSource(id=uuid4(), name="Centro", city=cities[0])]

        city_urls = list(builder.iter_city_urls([brand_source], [vehicle_source], cities))
        neighborhood_urls = list(
            builder.iter_neighborhood_urls([brand_source], [vehicle_source], neighborhoods)
        )

        assert len(city_urls) == 4
        assert len(neighborhood_urls) == 2
        assert neighborhood_urls[0].path == "chevrolet/centro-campinas-sp"


class TestGeneratedUrlContent:
    """Tests for the stored column values."""

    @pytest.mark.unit
    def test_content(
        self, builder: HierarchicalPathBuilder, brand_source: BrandSource
    ) -> None:
        content = builder.brand_urls(brand_source)[0].content()

        assert content["type"] == "collection"
        assert content["canonical_url"] == "/chevrolet"
        assert content["breadcrumbs"] == [
            {"name": "Início", "path": "/"},
            {"name": "Chevrolet", "path": "/chevrolet"},
        ]
        assert content["route_params"] == {"brand_id": str(brand_source.id)}
        assert content["is_indexable"] is True
        assert content["include_in_sitemap"] is True
        assert "path" not in content
