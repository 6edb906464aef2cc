"""Data model for metric points, database kinds and lookup records."""

from .metrics import (
    ASNRecord,
    CityRecord,
    CountryRecord,
    DatabaseKind,
    FieldValue,
    GeoRecord,
    Metric,
    MetricPoint,
    Timestamp,
    parse_timestamp,
)

__all__ = [
    "ASNRecord",
    "CityRecord",
    "CountryRecord",
    "DatabaseKind",
    "FieldValue",
    "GeoRecord",
    "Metric",
    "MetricPoint",
    "Timestamp",
    "parse_timestamp",
]
