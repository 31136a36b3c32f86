from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse

from cashier.config import Settings
from cashier.services.deps import get_settings

router = APIRouter(tags=["health"])

ENDPOINTS = [
    ("GET", "/health", "Health check"),
    ("GET", "/api/product", "List products (filter: ?name=)"),
    ("POST", "/api/product", "Create product"),
    ("GET", "/api/product/{id}", "Get product by ID"),
    ("PUT", "/api/product/{id}", "Update product"),
    ("DELETE", "/api/product/{id}", "Delete product"),
    ("POST", "/api/checkout", "Checkout transaction"),
    ("GET", "/api/report/today", "Today's sales report"),
    ("GET", "/api/report", "Sales report by date (?start_date=&end_date=)"),
]


@router.get("/health")
async def health(settings: Settings = Depends(get_settings)):
    """Health check endpoint."""
    return {
        "status": "healthy",
        "service": settings.app_name,
        "version": settings.app_version,
        "env": settings.app_env,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@router.get("/", response_class=PlainTextResponse)
async def home(settings: Settings = Depends(get_settings)):
    lines = [
        f"{settings.app_name} v{settings.app_version} ({settings.app_env})",
        "",
        "ENDPOINTS:",
    ]
    lines += [f"  {method:<7}{path:<22}{description}" for method, path, description in ENDPOINTS]
    return "\n".join(lines) + "\n"
