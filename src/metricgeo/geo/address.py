"""Parsing of metric field values into IP addresses."""

import ipaddress
from typing import Optional, Union

from metricgeo.models import FieldValue

IPAddress = Union[ipaddress.IPv4Address, ipaddress.IPv6Address]


def parse_address(value: Optional[FieldValue]) -> Optional[IPAddress]:
    """Parse a field value as an IPv4 or IPv6 address.

    Only string values are considered: ipaddress would otherwise turn an
    integer field such as 134744072 into 8.8.8.8.

    Args:
        value: Field value read from a metric point.

    Returns:
        Parsed address, or None if the value is not a string holding a valid address.
    """
    if not isinstance(value, str):
        return None
    try:
        return ipaddress.ip_address(value.strip())
    except ValueError:
        return None
