from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional, Protocol, Union

from metricgeo.errors import InvalidConfigError

FieldValue = Union[str, int, float, bool]


class MetricPoint(Protocol):
    """Field accessors the processor needs from a metric point."""

    def get_field(self, name: str) -> tuple[Optional[FieldValue], bool]:
        ...

    def add_field(self, name: str, value: FieldValue) -> None:
        ...


class DatabaseKind(Enum):
    CITY = "city"
    COUNTRY = "country"
    ASN = "asn"

    @classmethod
    def resolve(cls, db_type: Optional[str]) -> "DatabaseKind":
        """Map a configured ``db_type`` string to a kind.

        An empty or missing value selects the city database.

        Raises:
            InvalidConfigError: If db_type is not one of "city", "country", "asn".
        """
        if not db_type:
            return cls.CITY
        try:
            return cls(db_type)
        except ValueError:
            raise InvalidConfigError(
                f"Invalid GeoIP database type specified: {db_type}"
            ) from None


@dataclass(frozen=True)
class CityRecord:
    country_iso_code: str = ""
    city_name: str = ""   # "en" locale
    latitude: float = 0.0
    longitude: float = 0.0


@dataclass(frozen=True)
class CountryRecord:
    country_iso_code: str = ""


@dataclass(frozen=True)
class ASNRecord:
    asn: int = 0
    organization: str = ""


GeoRecord = Union[CityRecord, CountryRecord, ASNRecord]


Timestamp = Union[int, float, str]


def parse_timestamp(value: Timestamp) -> datetime:
    """Convert an epoch number or ISO 8601 string to a datetime.

    Epoch values are seconds since the epoch in UTC.

    Raises:
        ValueError: If the value is not a valid or representable timestamp.
    """
    if isinstance(value, bool):
        raise ValueError(f"Invalid timestamp: {value!r}")
    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value, tz=timezone.utc)
        except (OverflowError, OSError, ValueError) as e:
            raise ValueError(f"Timestamp out of range: {value!r}") from e
    if isinstance(value, str):
        return datetime.fromisoformat(value)
    raise ValueError(f"Invalid timestamp: {value!r}")


@dataclass
class Metric:
    """A single metric point: a name, tags, typed fields and a timestamp.

    The timestamp is kept in the form it was received (epoch number or ISO
    string) so it is written back unchanged; ``time`` gives it as a datetime.
    """
    name: str
    tags: dict[str, str] = field(default_factory=dict)
    fields: dict[str, FieldValue] = field(default_factory=dict)
    timestamp: Optional[Timestamp] = None

    @property
    def time(self) -> Optional[datetime]:
        if self.timestamp is None:
            return None
        return parse_timestamp(self.timestamp)

    def get_field(self, name: str) -> tuple[Optional[FieldValue], bool]:
        """Return (value, present) for a field."""
        if name in self.fields:
            return self.fields[name], True
        return None, False

    def add_field(self, name: str, value: FieldValue) -> None:
        """Set a field, replacing any existing value with the same name."""
        self.fields[name] = value

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Metric":
        """Build a Metric from its JSON representation.

        Raises:
            ValueError: If the name is missing, fields/tags are not objects,
                a tag value is not a string or the timestamp is invalid.
        """
        name = data.get("name")
        if not isinstance(name, str) or not name:
            raise ValueError("Metric is missing a 'name'")

        tags = data.get("tags", {})
        fields = data.get("fields", {})
        if not isinstance(tags, dict) or not isinstance(fields, dict):
            raise ValueError(f"Metric '{name}' has malformed tags or fields")

        for key, value in tags.items():
            if not isinstance(value, str):
                raise ValueError(f"Metric '{name}' tag '{key}' must be a string, got {value!r}")

        timestamp = data.get("timestamp")
        if timestamp is not None:
            parse_timestamp(timestamp)

        return cls(
            name=name,
            tags=dict(tags),
            fields=dict(fields),
            timestamp=timestamp,
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "name": self.name,
            "tags": dict(self.tags),
            "fields": dict(self.fields),
        }
        if self.timestamp is not None:
            data["timestamp"] = self.timestamp
        return data
