import logging

from fastapi import APIRouter, Depends

from seasonal_wind.api.dependencies import get_service
from seasonal_wind.models import StrategyInfo
from seasonal_wind.services import SeasonalReportService

logger = logging.getLogger(__name__)
router = APIRouter(tags=["Metadata"])


@router.get(
    "/api/metadata/strategies",
    response_model=list[StrategyInfo],
    summary="List the available seasonal aggregation strategies",
    description="Returns each strategy with its required observation fields, report columns and parameter defaults.",
)
def list_strategies(service: SeasonalReportService = Depends(get_service)) -> list[StrategyInfo]:
    return service.list_strategies()


@router.get("/api/health", include_in_schema=False)
def health() -> dict[str, str]:
    return {"status": "ok"}
