"""GeoIP database access and address parsing."""

from .address import IPAddress, parse_address
from .reader import (
    ASNReader,
    CityReader,
    CountryReader,
    GeoDatabase,
    open_asn_reader,
    open_city_reader,
    open_country_reader,
    open_reader,
)

__all__ = [
    "IPAddress",
    "parse_address",
    "GeoDatabase",
    "CityReader",
    "CountryReader",
    "ASNReader",
    "open_city_reader",
    "open_country_reader",
    "open_asn_reader",
    "open_reader",
]
