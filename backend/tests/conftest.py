"""Pytest 配置：每个测试使用独立的 SQLite 文件库"""

import os

os.environ.setdefault("LOG_TO_FILE", "false")

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.pool import NullPool

from ecom_api.core.deps import get_db
from ecom_api.db.init_db import ensure_tables_exist
from ecom_api.db.session import build_engine, build_sessionmaker
from ecom_api.main import app
from ecom_api.repositories import ProductRepository
from ecom_api.services.catalog import CatalogService
from tests.helpers import build_sample_tree

SAMPLE_SKUS = ["WATER", "SOIL", "SAND", "X", "Y"]


@pytest_asyncio.fixture
async def engine(tmp_path):
    eng = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'catalog_test.db'}", poolclass=NullPool)
    await ensure_tables_exist(eng)
    yield eng
    await eng.dispose()


@pytest.fixture
def session_factory(engine):
    return build_sessionmaker(engine)


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def service(db):
    return CatalogService(db)


@pytest_asyncio.fixture
async def products(db):
    repo = ProductRepository(db)
    for sku in SAMPLE_SKUS:
        await repo.create_product(sku, f"Product {sku}")
    return SAMPLE_SKUS


@pytest_asyncio.fixture
async def published(service, products):
    """已发布样例目录并准备好商品"""
    return await service.publish_catalog(build_sample_tree())


@pytest_asyncio.fixture
async def client(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
