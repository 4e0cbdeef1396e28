"""
Shop repository and resolver tests against a real (SQLite) database.

Run with: pytest tests/test_repository.py -v
"""

import pytest

from storefront.tenancy import DomainMap, ShopNotFound, ShopRepository, ShopResolver


@pytest.fixture
def repository(session_factory, seeded_shops):
    return ShopRepository(session_factory)


class TestShopRepository:

    @pytest.mark.asyncio
    async def test_find_by_text_id_loads_seller(self, repository):
        shop = await repository.find_by_text_id("florea")
        assert shop.id == 1
        assert shop.website_name == "Florea"
        assert shop.seller.company_name == "VUK objekt s.r.o."

    @pytest.mark.asyncio
    async def test_find_by_id(self, repository):
        shop = await repository.find_by_id(2)
        assert shop.text_id == "velke-vence"

    @pytest.mark.asyncio
    async def test_misses_return_none(self, repository):
        assert await repository.find_by_text_id("nobody") is None
        assert await repository.find_by_id(404) is None


class TestResolverWithDatabase:

    @pytest.mark.asyncio
    async def test_resolve_full_context(self, repository):
        resolver = ShopResolver(DomainMap({"www.florea.cz": "florea", "ghost.cz": "ghost"}), repository)

        ctx = await resolver.resolve_from_host("www.florea.cz")
        assert ctx.shop_id == 1
        assert ctx.email == "obchod@florea.cz"
        assert ctx.phone == "+420 555 000 111"
        assert ctx.seller.vat_payer is True
        assert ctx.seller.payment_gateway_config == {"goid": 8123456789, "client_id": "1234"}

        with pytest.raises(ShopNotFound):
            await resolver.resolve_from_host("ghost.cz")
