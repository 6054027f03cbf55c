from seasonal_wind.services.ndbc_client import NdbcClient
from seasonal_wind.services.report_service import SeasonalReportService
from seasonal_wind.services.report_table import render_report

__all__ = ["NdbcClient", "SeasonalReportService", "render_report"]
