"""Seasonal wind statistics from NOAA NDBC historical buoy archives."""

__version__ = "1.0.0"
