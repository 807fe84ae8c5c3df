"""FastAPI endpoints for the admin dashboard."""

from datetime import date

from fastapi import APIRouter, Depends, Query

from storefront.identity.auth import require_admin
from storefront.reporting.api.schemas import DashboardStatsResponse, SalesReportResponse, TopProductResponse
from storefront.reporting.dashboard import dashboard_stats, sales_report, top_selling_products
from storefront.shared.errors import BusinessRuleError
from storefront.shared.api import ApiResponse

router = APIRouter(prefix="/dashboard", tags=["dashboard"], dependencies=[Depends(require_admin)])


@router.get("/stats", response_model=ApiResponse[DashboardStatsResponse])
async def get_dashboard_stats() -> ApiResponse[DashboardStatsResponse]:
    return ApiResponse(data=DashboardStatsResponse(**dashboard_stats()))


@router.get("/sales-report", response_model=ApiResponse[SalesReportResponse])
async def get_sales_report(
    start_date: date = Query(...),
    end_date: date = Query(...),
) -> ApiResponse[SalesReportResponse]:
    if start_date > end_date:
        raise BusinessRuleError({"start_date": ["start_date must not be after end_date"]})
    return ApiResponse(data=SalesReportResponse.from_report(sales_report(start_date, end_date)))


@router.get("/top-products", response_model=ApiResponse[list[TopProductResponse]])
async def get_top_products(limit: int = Query(10, ge=1, le=100)) -> ApiResponse[list[TopProductResponse]]:
    return ApiResponse(data=[TopProductResponse.from_row(row) for row in top_selling_products(limit)])
