"""Weather loading and overlay alignment."""

from .loader import OVERLAY_COLUMNS, load_weather, weather_overlay

__all__ = ["OVERLAY_COLUMNS", "load_weather", "weather_overlay"]
