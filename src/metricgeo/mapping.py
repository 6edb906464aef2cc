"""Mapping engine - resolves lookup entries against the open database."""

import logging
from typing import Any, Callable, Optional

from metricgeo.config import LookupConfig
from metricgeo.errors import AddressNotFoundError, GeoLookupError, InvalidConfigError
from metricgeo.geo.address import parse_address
from metricgeo.geo.reader import GeoDatabase
from metricgeo.models import (
    ASNRecord,
    CityRecord,
    CountryRecord,
    DatabaseKind,
    MetricPoint,
)

logger = logging.getLogger(__name__)


def _write_city(point: MetricPoint, lookup: LookupConfig, record: CityRecord) -> None:
    if lookup.dest_country:
        point.add_field(lookup.dest_country, record.country_iso_code)
    if lookup.dest_city:
        point.add_field(lookup.dest_city, record.city_name)
    if lookup.dest_lat:
        point.add_field(lookup.dest_lat, record.latitude)
    if lookup.dest_lon:
        point.add_field(lookup.dest_lon, record.longitude)


def _write_country(point: MetricPoint, lookup: LookupConfig, record: CountryRecord) -> None:
    if lookup.dest_country:
        point.add_field(lookup.dest_country, record.country_iso_code)


def _write_asn(point: MetricPoint, lookup: LookupConfig, record: ASNRecord) -> None:
    if lookup.asn:
        point.add_field(lookup.asn, record.asn)
    if lookup.asn_org:
        point.add_field(lookup.asn_org, record.organization)


# Each writer receives the record type produced by the reader of its kind
FieldWriter = Callable[[MetricPoint, LookupConfig, Any], None]

FIELD_WRITERS: dict[DatabaseKind, FieldWriter] = {
    DatabaseKind.CITY: _write_city,
    DatabaseKind.COUNTRY: _write_country,
    DatabaseKind.ASN: _write_asn,
}


class MappingEngine:
    """Applies lookup entries to metric points.

    Each entry is resolved independently: a miss or failure on one entry never
    keeps another entry, or another point, from being processed.
    """

    def __init__(
        self,
        reader: GeoDatabase,
        lookups: list[LookupConfig],
        log: Optional[logging.Logger] = None,
    ):
        """Initialize the engine.

        Args:
            reader: Open database; its kind selects how records map to fields.
            lookups: Lookup entries, applied in this order.
            log: Logger for lookup errors. Defaults to this module's logger.
        """
        self.reader = reader
        self.kind = reader.kind
        self.lookups = list(lookups)
        self.log = log or logger

    def apply_all(self, point: MetricPoint) -> None:
        """Run every lookup entry against one point, in declaration order."""
        for lookup in self.lookups:
            self.apply(point, lookup)

    def apply(self, point: MetricPoint, lookup: LookupConfig) -> None:
        """Resolve one lookup entry on one point.

        Adds the configured destination fields when the address is found.
        Missing source fields, values that are not IP address strings and
        addresses absent from the database are skipped without logging.
        Other lookup failures are logged at error level and skipped.
        """
        if not lookup.field:
            return

        value, present = point.get_field(lookup.field)
        if not present:
            return

        address = parse_address(value)
        if address is None:
            return

        writer = FIELD_WRITERS.get(self.kind)
        if writer is None:
            error = InvalidConfigError(f"Invalid GeoIP database type specified: {self.kind}")
            self.log.error(f"GeoIP configuration error: {error}")
            return

        try:
            record = self.reader.lookup(address)
        except AddressNotFoundError:
            return
        except GeoLookupError as e:
            self.log.error(f"GeoIP lookup error: {e}")
            return

        writer(point, lookup, record)
