"""Configuration management for the GeoIP processor.

Loads and validates TOML configuration files with dataclass-based structure.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any
import tomllib  # Python 3.11+ stdlib

DEFAULT_DB_PATH = "/var/lib/GeoIP/GeoLite2-Country.mmdb"
VALID_DB_TYPES = ("", "city", "country", "asn")

# Destinations each database kind can fill; anything else on a lookup is ignored
KIND_DESTINATIONS = {
    "city": ("dest_country", "dest_city", "dest_lat", "dest_lon"),
    "country": ("dest_country",),
    "asn": ("asn", "asn_org"),
}

SAMPLE_CONFIG = """\
## db_path is the location of the MaxMind GeoIP2 database
db_path = "/var/lib/GeoIP/GeoLite2-City.mmdb"

## db_type is one of "city", "country" or "asn" (default "city")
db_type = "city"

[[lookup]]
# get the ip from the field "source_ip" and put the lookup results in the
# respective destination fields (if specified)
field = "source_ip"
dest_country = "source_country"
dest_city = "source_city"
dest_lat = "source_lat"
dest_lon = "source_lon"

## with db_type = "asn" use the asn destinations instead
# asn = "source_asn"
# asn_org = "source_asn_org"
"""


@dataclass
class LookupConfig:
    """One mapping from a source field to destination fields.

    Empty destinations are not written.
    """
    field: str = ""
    dest_country: str = ""
    dest_city: str = ""
    dest_lat: str = ""
    dest_lon: str = ""
    asn: str = ""
    asn_org: str = ""

    def destinations(self) -> dict[str, str]:
        """Configured (non-empty) destinations keyed by option name."""
        options = {
            "dest_country": self.dest_country,
            "dest_city": self.dest_city,
            "dest_lat": self.dest_lat,
            "dest_lon": self.dest_lon,
            "asn": self.asn,
            "asn_org": self.asn_org,
        }
        return {name: dest for name, dest in options.items() if dest}


@dataclass
class GeoIPConfig:
    """Main configuration container for the GeoIP processor."""
    db_path: str = DEFAULT_DB_PATH
    db_type: str = ""
    lookups: list[LookupConfig] = field(default_factory=list)


def load_config(path: Path | str | None = None) -> GeoIPConfig:
    """Load config from TOML file, or return defaults if not found.

    Args:
        path: Path to TOML config file. If None, returns default config.

    Returns:
        GeoIPConfig instance with loaded or default values.

    Raises:
        FileNotFoundError: If path is provided but file doesn't exist.
        ValueError: If TOML parsing fails or config is invalid.
    """
    if path is None:
        return GeoIPConfig()

    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except Exception as e:
        raise ValueError(f"Failed to parse TOML config: {e}") from e

    return _build_config(data)


def _build_config(data: dict[str, Any]) -> GeoIPConfig:
    """Build GeoIPConfig from parsed TOML data.

    The processor table may sit at the top level or, as in a pipeline host's
    config file, under ``[[processors.geoip]]`` (the first entry is used).
    """
    processors = data.get("processors", {})
    if "geoip" in processors:
        section = processors["geoip"]
        if isinstance(section, list):
            if not section:
                raise ValueError("Empty [[processors.geoip]] section")
            section = section[0]
        data = section

    if not isinstance(data, dict):
        raise ValueError("GeoIP configuration must be a table")

    config = GeoIPConfig(
        db_path=str(data.get("db_path", DEFAULT_DB_PATH)),
        db_type=str(data.get("db_type", "")),
    )

    lookups = data.get("lookup", [])
    if isinstance(lookups, dict):
        lookups = [lookups]

    for i, entry in enumerate(lookups):
        if not isinstance(entry, dict):
            raise ValueError(f"lookup entry {i} must be a table")
        config.lookups.append(LookupConfig(
            field=str(entry.get("field", "")),
            dest_country=str(entry.get("dest_country", "")),
            dest_city=str(entry.get("dest_city", "")),
            dest_lat=str(entry.get("dest_lat", "")),
            dest_lon=str(entry.get("dest_lon", "")),
            asn=str(entry.get("asn", "")),
            asn_org=str(entry.get("asn_org", "")),
        ))

    return config


def validate_config(config: GeoIPConfig) -> list[str]:
    """Validate config and return list of warnings/errors.

    Args:
        config: GeoIPConfig instance to validate.

    Returns:
        List of warning/error messages. Empty list if config is valid.
    """
    warnings = []

    if config.db_type not in VALID_DB_TYPES:
        warnings.append(
            f"db_type '{config.db_type}' is not valid (use 'city', 'country' or 'asn')"
        )
        kind = None
    else:
        kind = config.db_type or "city"

    if not config.db_path:
        warnings.append("db_path must not be empty")

    if not config.lookups:
        warnings.append("No lookup entries configured, processor will not add any fields")

    for i, lookup in enumerate(config.lookups):
        label = f"lookup[{i}]"
        if not lookup.field:
            warnings.append(f"{label}.field is empty, entry will be ignored")
            continue

        destinations = lookup.destinations()
        if not destinations:
            warnings.append(f"{label} for field '{lookup.field}' has no destination fields")
            continue

        if kind is None:
            continue

        ignored = sorted(set(destinations) - set(KIND_DESTINATIONS[kind]))
        if ignored:
            warnings.append(
                f"{label} sets {', '.join(ignored)} which a {kind} database does not provide"
            )

    return warnings
