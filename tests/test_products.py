"""
Tests for catalog browsing
"""

from decimal import Decimal

import pytest

from storefront.core.exceptions import NotFoundException
from storefront.api.v1.products.schemas import ProductSort
from storefront.api.v1.products.services import ProductService


class TestProductService:
    """Tests for ProductService"""

    @pytest.mark.asyncio
    async def test_listing_ordered_by_name(self, db, products):
        listing = await ProductService(db).list_products()

        assert [p.name for p in listing["items"]] == ["Anna Karenina", "Beowulf", "Dune", "Emma"]
        assert listing["total"] == 4
        assert listing["pages"] == 1

    @pytest.mark.asyncio
    async def test_pagination(self, db, products):
        service = ProductService(db)

        first = await service.list_products(page=1, size=3)
        second = await service.list_products(page=2, size=3)
        beyond = await service.list_products(page=3, size=3)

        assert [p.name for p in first["items"]] == ["Anna Karenina", "Beowulf", "Dune"]
        assert [p.name for p in second["items"]] == ["Emma"]
        assert beyond["items"] == []
        assert first["pages"] == 2

    @pytest.mark.asyncio
    async def test_sort_by_price(self, db, products):
        service = ProductService(db)

        ascending = await service.list_products(sort_by=ProductSort.PRICE_ASC)
        descending = await service.list_products(sort_by=ProductSort.PRICE_DESC)

        assert [p.name for p in ascending["items"]] == ["Emma", "Anna Karenina", "Dune", "Beowulf"]
        assert [p.name for p in descending["items"]] == ["Beowulf", "Dune", "Anna Karenina", "Emma"]

    @pytest.mark.asyncio
    async def test_sort_newest(self, db, products):
        listing = await ProductService(db).list_products(sort_by=ProductSort.NEWEST)

        assert [p.id for p in listing["items"]] == sorted(products.values(), reverse=True)

    @pytest.mark.asyncio
    async def test_empty_catalog(self, db):
        listing = await ProductService(db).list_products()

        assert listing["items"] == []
        assert listing["total"] == 0
        assert listing["pages"] == 0

    @pytest.mark.asyncio
    async def test_get_product(self, db, products):
        product = await ProductService(db).get_product(products["dune"])

        assert product.name == "Dune"
        assert product.price == Decimal("9.99")
        assert product.stock_quantity == 5

    @pytest.mark.asyncio
    async def test_unknown_product(self, db, products):
        with pytest.raises(NotFoundException):
            await ProductService(db).get_product(987654)


class TestProductsApi:
    """Browsing through HTTP"""

    @pytest.mark.asyncio
    async def test_list(self, client, products):
        response = await client.get("/api/v1/products/", params={"size": 2})

        assert response.status_code == 200
        body = response.json()
        assert [item["name"] for item in body["items"]] == ["Anna Karenina", "Beowulf"]
        assert body["total"] == 4
        assert body["pages"] == 2
        assert body["items"][1]["in_stock"] is False

    @pytest.mark.asyncio
    async def test_detail(self, client, products):
        response = await client.get(f"/api/v1/products/{products['emma']}")

        assert response.status_code == 200
        body = response.json()
        assert body["id"] == products["emma"]
        assert body["stock_quantity"] == 200
        assert body["in_stock"] is True

    @pytest.mark.asyncio
    async def test_detail_not_found(self, client, products):
        response = await client.get("/api/v1/products/987654")

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "NOT_FOUND"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("params", [{"page": 0}, {"size": 0}, {"size": 101}, {"sort_by": "rating"}])
    async def test_invalid_query(self, client, products, params):
        response = await client.get("/api/v1/products/", params=params)

        assert response.status_code == 422
