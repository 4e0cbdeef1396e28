"""
Shop repository.

Thin read access to the shops table. Each lookup opens its own session from
the injected session factory, so the repository can live for the whole
process while sessions stay short.
"""

import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ..models import Shop


logger = logging.getLogger(__name__)


class ShopRepository:
    """Loads one shop row (with its seller) by text id or numeric id."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def find_by_text_id(self, text_id: str) -> Optional[Shop]:
        async with self.session_factory() as session:
            result = await session.execute(select(Shop).where(Shop.text_id == text_id))
            shop = result.unique().scalar_one_or_none()
        logger.debug(f"Shop lookup by text_id={text_id!r}: {'hit' if shop else 'miss'}")
        return shop

    async def find_by_id(self, shop_id: int) -> Optional[Shop]:
        async with self.session_factory() as session:
            result = await session.execute(select(Shop).where(Shop.id == shop_id))
            shop = result.unique().scalar_one_or_none()
        logger.debug(f"Shop lookup by id={shop_id}: {'hit' if shop else 'miss'}")
        return shop
