"""Exception hierarchy for the GeoIP processor."""


class GeoIPError(Exception):
    """Base class for all metricgeo errors."""


class InvalidConfigError(GeoIPError):
    """Configuration names an unknown database type or reaches an unsupported kind."""


class DatabaseOpenError(GeoIPError):
    """The GeoIP database could not be opened or does not match the selected kind."""


class GeoLookupError(GeoIPError):
    """A database lookup failed for a reason other than a missing address."""


class AddressNotFoundError(GeoLookupError):
    """The address has no entry in the database.

    This is an expected miss, not a failure: callers skip it without logging.
    """
