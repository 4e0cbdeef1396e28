"""
Pytest configuration and fixtures.

Database tests run against an in-memory SQLite database (aiosqlite) created
fresh per test, so no external server is needed. HTTP tests drive the app
through httpx's ASGI transport with services built from the repository's
own config/ directory.
"""
from pathlib import Path

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from storefront.core.config import Settings
from storefront.core.db import Base
from storefront.models import Seller, Shop


TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

REPO_CONFIG_DIR = Path(__file__).resolve().parents[2] / "config"


@pytest.fixture
def repo_config_dir() -> Path:
    """The config/ directory shipped with the repository."""
    return REPO_CONFIG_DIR


@pytest.fixture
def write_yaml(tmp_path):
    """Write a YAML document under tmp_path and return its path."""
    def _write(relative: str, content: str) -> Path:
        path = tmp_path / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path
    return _write


@pytest.fixture(scope="function")
async def async_engine():
    """
    Create an async SQLAlchemy engine with the schema in place.

    StaticPool keeps the single in-memory connection alive across sessions.
    """
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as connection:
        await connection.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture(scope="function")
def session_factory(async_engine):
    return async_sessionmaker(async_engine, class_=AsyncSession, expire_on_commit=False)


def make_seller(**overrides) -> Seller:
    values = dict(
        name="Jana Nováková",
        email="jana@vuk.cz",
        phone_number="+420 777 123 456",
        notification_email="objednavky@vuk.cz",
        company_name="VUK objekt s.r.o.",
        street="Květinová 12",
        city="Brno",
        postal_code="602 00",
        registration_number="12345678",
        vat_number="CZ12345678",
        vat_payer=True,
        registry_city="Brno",
        registry_number="C 1234",
        bank_account="123456789/0100",
        bank_account_iban="CZ6501000000000123456789",
        bank_account_bic="KOMBCZPP",
        gopay_config='{"goid": 8123456789, "client_id": "1234"}',
        external_sale=False,
    )
    values.update(overrides)
    return Seller(**values)


@pytest.fixture(scope="function")
async def seeded_shops(session_factory):
    """Insert the florea (id=1) and velke-vence (id=2) shops with their sellers."""
    async with session_factory() as session:
        florea_seller = make_seller()
        vence_seller = make_seller(
            company_name="Velké Vence s.r.o.",
            email="info@velke-vence.cz",
            gopay_config=None,
            vat_payer=False,
            vat_number="",
        )
        session.add_all([florea_seller, vence_seller])
        await session.flush()

        session.add_all(
            [
                Shop(
                    id=1,
                    text_id="florea",
                    domain="www.florea.cz",
                    website_name="Florea",
                    email="obchod@florea.cz",
                    phone_number="+420 555 000 111",
                    seller_id=florea_seller.id,
                ),
                Shop(
                    id=2,
                    text_id="velke-vence",
                    domain="www.velke-vence.cz",
                    website_name="Velké Vence",
                    email="obchod@velke-vence.cz",
                    seller_id=vence_seller.id,
                ),
            ]
        )
        await session.commit()


@pytest.fixture
def test_settings(repo_config_dir) -> Settings:
    return Settings(
        DATABASE_URL=TEST_DATABASE_URL,
        CONFIG_DIR=str(repo_config_dir),
        ALLOWED_ORIGINS="http://test",
    )


@pytest.fixture
def services(test_settings, session_factory, seeded_shops):
    from storefront.services import build_services

    return build_services(test_settings, session_factory=session_factory)


@pytest.fixture(scope="function")
async def client(test_settings, services):
    """
    Create a FastAPI AsyncClient for the storefront app.

    The app receives prebuilt services, so the lifespan never touches the
    production database.
    """
    # Import here so collection does not build the module-level app first
    from storefront.main import create_app

    app = create_app(settings=test_settings, services=services)
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as ac:
        yield ac
