import pytest
from unittest.mock import AsyncMock
from httpx import AsyncClient, ASGITransport
from sqlalchemy import func, select

from cashier.config import Settings
from cashier.db.database import Database
from cashier.main import create_app
from cashier.models import Product, Transaction, TransactionDetail
from cashier.services.checkout_service import CheckoutService
from cashier.services.deps import get_checkout_service, get_product_service, get_report_service
from cashier.services.product_service import ProductService
from cashier.services.report_service import ReportService


def make_settings(tmp_path, **overrides) -> Settings:
    values = {
        "app_env": "test",
        "database_url": f"sqlite:///{tmp_path / 'cashier.db'}",
        "api_key": "",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def settings_factory(tmp_path):
    """Build Settings pointing at this test's database file."""
    return lambda **overrides: make_settings(tmp_path, **overrides)


@pytest.fixture
def settings(settings_factory):
    return settings_factory()


@pytest.fixture
async def db(settings):
    """Fresh SQLite database file per test."""
    database = Database(settings)
    await database.connect()
    await database.create_all()
    yield database
    await database.disconnect()


@pytest.fixture
async def client(settings, db):
    """Async test client backed by the real test database."""
    app = create_app(settings, db)

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as ac:
        yield ac


@pytest.fixture
def mock_services():
    """Mocked services for testing routes without a database."""
    return {
        "products": AsyncMock(spec=ProductService),
        "checkout": AsyncMock(spec=CheckoutService),
        "reports": AsyncMock(spec=ReportService),
    }


@pytest.fixture
async def mock_client(settings, mock_services):
    """Async test client whose services are mocks."""
    app = create_app(settings)
    app.dependency_overrides[get_product_service] = lambda: mock_services["products"]
    app.dependency_overrides[get_checkout_service] = lambda: mock_services["checkout"]
    app.dependency_overrides[get_report_service] = lambda: mock_services["reports"]

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as ac:
        yield ac


@pytest.fixture
def add_product(db):
    """Insert a product directly and return its id."""
    async def _add(name: str = "Indomie", price: int = 3000, stock: int = 50) -> int:
        async with db.session() as session, session.begin():
            product = Product(name=name, price=price, stock=stock)
            session.add(product)
            await session.flush()
            return product.id

    return _add


@pytest.fixture
def stock_of(db):
    async def _stock(product_id: int) -> int:
        async with db.session() as session:
            return await session.scalar(select(Product.stock).where(Product.id == product_id))

    return _stock


@pytest.fixture
def ledger_counts(db):
    """Return (transactions, details) row counts."""
    async def _counts() -> tuple[int, int]:
        async with db.session() as session:
            transactions = await session.scalar(select(func.count(Transaction.id)))
            details = await session.scalar(select(func.count(TransactionDetail.id)))
            return transactions, details

    return _counts
