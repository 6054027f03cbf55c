from seasonal_wind.api.dependencies import get_service
from seasonal_wind.api.routes import router

__all__ = ["get_service", "router"]
