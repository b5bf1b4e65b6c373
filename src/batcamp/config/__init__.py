"""Public configuration API."""

from .loader import ConfigFiles, load_config_bundle
from .models import (
    ConfigBundle,
    CountsConfig,
    CutoffConfig,
    ReportConfig,
    ReportWindow,
    ScalingConfig,
)

__all__ = [
    "ConfigFiles",
    "ConfigBundle",
    "CountsConfig",
    "CutoffConfig",
    "ReportConfig",
    "ReportWindow",
    "ScalingConfig",
    "load_config_bundle",
]
