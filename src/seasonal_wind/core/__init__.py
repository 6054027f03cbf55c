from seasonal_wind.core.config import Settings, get_settings
from seasonal_wind.core.exceptions import AppValidationError, UpstreamServiceError
from seasonal_wind.core.logging import configure_logging

__all__ = [
    "Settings",
    "get_settings",
    "AppValidationError",
    "UpstreamServiceError",
    "configure_logging",
]
