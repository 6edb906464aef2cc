"""Processor registration for pipeline hosts."""

from typing import Callable, Optional

from metricgeo.config import GeoIPConfig
from metricgeo.processor import GeoIPProcessor

ProcessorFactory = Callable[[Optional[GeoIPConfig]], GeoIPProcessor]

_PROCESSORS: dict[str, ProcessorFactory] = {}


def register(name: str, factory: ProcessorFactory) -> None:
    """Register a processor factory under a name.

    Raises:
        ValueError: If the name is empty or already registered.
    """
    if not name:
        raise ValueError("Processor name must not be empty")
    if name in _PROCESSORS:
        raise ValueError(f"Processor already registered: {name}")
    _PROCESSORS[name] = factory


def available() -> list[str]:
    return sorted(_PROCESSORS)


def create(name: str, config: Optional[GeoIPConfig] = None) -> GeoIPProcessor:
    """Create an uninitialized processor by name.

    Args:
        name: Registered processor name, e.g. "geoip".
        config: Processor configuration. The factory's defaults apply if None.

    Returns:
        New processor instance.

    Raises:
        ValueError: If name is not registered.
    """
    if name not in _PROCESSORS:
        raise ValueError(
            f"Unknown processor: {name}. "
            f"Valid processors: {', '.join(available())}"
        )
    return _PROCESSORS[name](config)


# Default db_path points at the country database, as shipped with the host
register("geoip", lambda config=None: GeoIPProcessor(config or GeoIPConfig()))
