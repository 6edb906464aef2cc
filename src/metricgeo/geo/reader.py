"""MaxMind database readers, one per database kind."""

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Callable, Protocol, Union

import geoip2.database
import geoip2.errors

from metricgeo.errors import AddressNotFoundError, DatabaseOpenError, GeoLookupError
from metricgeo.geo.address import IPAddress
from metricgeo.models import ASNRecord, CityRecord, CountryRecord, DatabaseKind, GeoRecord

logger = logging.getLogger(__name__)

CITY_LOCALE = "en"


class GeoDatabase(Protocol):
    """An open database of exactly one kind."""

    kind: DatabaseKind

    def lookup(self, address: IPAddress) -> GeoRecord:
        """Look up an address.

        Raises:
            AddressNotFoundError: If the address is not in the database.
            GeoLookupError: On any other lookup failure.
        """
        ...

    def close(self) -> None:
        ...

    def __enter__(self) -> "GeoDatabase":
        ...

    def __exit__(self, *args) -> None:
        ...


class _MMDBReader(ABC):
    """Shared open/close/error translation for geoip2-backed readers.

    Subclasses set ``kind`` and ``type_marker`` (a substring the MMDB
    ``database_type`` must contain) and implement ``_query``.
    """

    kind: DatabaseKind
    type_marker: str

    def __init__(self, db_path: Union[Path, str]):
        """Open the database file.

        Args:
            db_path: Path to a .mmdb file of the matching kind.

        Raises:
            DatabaseOpenError: If the file is missing, unreadable, or of another type.
        """
        path = Path(db_path)
        if not path.exists():
            raise DatabaseOpenError(
                f"Error opening GeoIP database: file not found: {path}"
            ) from FileNotFoundError(str(path))

        try:
            self._reader = geoip2.database.Reader(str(path))
        except Exception as e:
            raise DatabaseOpenError(f"Error opening GeoIP database: {e}") from e

        database_type = self._reader.metadata().database_type
        if self.type_marker not in database_type:
            self._reader.close()
            raise DatabaseOpenError(
                f"Error opening GeoIP database: {path} is a {database_type} database, "
                f"expected a {self.kind.value} database"
            )

        self.db_path = path
        self.database_type = database_type
        logger.debug(f"Opened {database_type} database at {path}")

    def lookup(self, address: IPAddress) -> GeoRecord:
        try:
            return self._query(address)
        except geoip2.errors.AddressNotFoundError as e:
            raise AddressNotFoundError(f"{address} not found") from e
        except Exception as e:
            raise GeoLookupError(f"lookup of {address} failed: {e}") from e

    @abstractmethod
    def _query(self, address: IPAddress) -> GeoRecord:
        ...

    def close(self) -> None:
        """Close the underlying database reader."""
        self._reader.close()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()


class CityReader(_MMDBReader):
    kind = DatabaseKind.CITY
    type_marker = "City"

    def _query(self, address: IPAddress) -> CityRecord:
        response = self._reader.city(address)
        return CityRecord(
            country_iso_code=response.country.iso_code or "",
            city_name=response.city.names.get(CITY_LOCALE, ""),
            latitude=response.location.latitude or 0.0,
            longitude=response.location.longitude or 0.0,
        )


class CountryReader(_MMDBReader):
    kind = DatabaseKind.COUNTRY
    type_marker = "Country"

    def _query(self, address: IPAddress) -> CountryRecord:
        response = self._reader.country(address)
        return CountryRecord(country_iso_code=response.country.iso_code or "")


class ASNReader(_MMDBReader):
    kind = DatabaseKind.ASN
    type_marker = "ASN"

    def _query(self, address: IPAddress) -> ASNRecord:
        response = self._reader.asn(address)
        return ASNRecord(
            asn=response.autonomous_system_number or 0,
            organization=response.autonomous_system_organization or "",
        )


def open_city_reader(db_path: Union[Path, str]) -> CityReader:
    return CityReader(db_path)


def open_country_reader(db_path: Union[Path, str]) -> CountryReader:
    return CountryReader(db_path)


def open_asn_reader(db_path: Union[Path, str]) -> ASNReader:
    return ASNReader(db_path)


READER_FACTORIES: dict[DatabaseKind, Callable[[Union[Path, str]], GeoDatabase]] = {
    DatabaseKind.CITY: open_city_reader,
    DatabaseKind.COUNTRY: open_country_reader,
    DatabaseKind.ASN: open_asn_reader,
}


def open_reader(db_path: Union[Path, str], kind: DatabaseKind) -> GeoDatabase:
    """Open the database at db_path with the factory matching kind.

    Raises:
        DatabaseOpenError: If the database cannot be opened.
    """
    return READER_FACTORIES[kind](db_path)
