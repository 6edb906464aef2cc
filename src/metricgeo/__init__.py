"""GeoIP enrichment processor for metric pipelines."""

from metricgeo.config import GeoIPConfig, LookupConfig, load_config, validate_config
from metricgeo.errors import (
    AddressNotFoundError,
    DatabaseOpenError,
    GeoIPError,
    GeoLookupError,
    InvalidConfigError,
)
from metricgeo.models import DatabaseKind, Metric
from metricgeo.processor import GeoIPProcessor
from metricgeo import registry

__version__ = "0.1.0"

__all__ = [
    "GeoIPConfig",
    "LookupConfig",
    "load_config",
    "validate_config",
    "GeoIPError",
    "InvalidConfigError",
    "DatabaseOpenError",
    "GeoLookupError",
    "AddressNotFoundError",
    "DatabaseKind",
    "Metric",
    "GeoIPProcessor",
    "registry",
]
