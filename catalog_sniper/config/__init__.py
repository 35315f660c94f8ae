"""Configuration package exports."""

from .loader import ConfigLocator, ConfigRepository
from .models import CATALOG_SEARCH_URL, ApiSourceConfig, FetchSettings, GlobalConfig

__all__ = [
    "ApiSourceConfig",
    "CATALOG_SEARCH_URL",
    "ConfigLocator",
    "ConfigRepository",
    "FetchSettings",
    "GlobalConfig",
]
