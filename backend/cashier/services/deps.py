from fastapi import Depends, Header, Request

from cashier.config import Settings
from cashier.db.database import Database
from cashier.exceptions import UnauthorizedError
from cashier.services.checkout_service import CheckoutService
from cashier.services.product_service import ProductService
from cashier.services.report_service import ReportService


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_db(request: Request) -> Database:
    return request.app.state.db


def require_api_key(
    x_api_key: str | None = Header(default=None),
    settings: Settings = Depends(get_settings),
):
    """Check X-API-Key when an API key is configured."""
    if not settings.api_key:
        return
    if x_api_key != settings.api_key:
        raise UnauthorizedError("invalid or missing API key")


def get_product_service(db: Database = Depends(get_db)) -> ProductService:
    return ProductService(db)


def get_checkout_service(db: Database = Depends(get_db)) -> CheckoutService:
    return CheckoutService(db)


def get_report_service(db: Database = Depends(get_db)) -> ReportService:
    return ReportService(db)
