from fastapi import APIRouter, Depends

from cashier.schemas.report import SalesSummary
from cashier.services.deps import get_report_service, require_api_key
from cashier.services.report_service import ReportService, parse_report_date

router = APIRouter(prefix="/api/report", tags=["reports"], dependencies=[Depends(require_api_key)])


@router.get("/today", response_model=SalesSummary)
async def today_report(service: ReportService = Depends(get_report_service)):
    return await service.today_summary()


# Indonesian path still used by older clients
@router.get("/hari-ini", response_model=SalesSummary, include_in_schema=False)
async def today_report_legacy(service: ReportService = Depends(get_report_service)):
    return await service.today_summary()


@router.get("", response_model=SalesSummary)
async def range_report(
    start_date: str | None = None,
    end_date: str | None = None,
    service: ReportService = Depends(get_report_service)
):
    start = parse_report_date(start_date, "start_date")
    end = parse_report_date(end_date, "end_date")
    return await service.range_summary(start, end)
