from fastapi import APIRouter, Depends

from ..application.services.catalog_service import CatalogService
from ..dependencies import get_catalog_service, get_current_admin
from ..schemas import DashboardStatsResponse

router = APIRouter(prefix="/dashboard", tags=["Dashboard"], dependencies=[Depends(get_current_admin)])


@router.get("/stats", response_model=DashboardStatsResponse)
def dashboard_stats(service: CatalogService = Depends(get_catalog_service)):
    return DashboardStatsResponse.model_validate(service.dashboard_stats())
