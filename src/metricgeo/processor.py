"""GeoIP processor - the pipeline-facing enrichment stage."""

import logging
from typing import Optional, Sequence, TypeVar

from metricgeo.config import SAMPLE_CONFIG, GeoIPConfig
from metricgeo.geo.reader import GeoDatabase, open_reader
from metricgeo.mapping import MappingEngine
from metricgeo.models import DatabaseKind, MetricPoint

logger = logging.getLogger(__name__)

P = TypeVar("P", bound=MetricPoint)


class GeoIPProcessor:
    """Adds country, city, location or ASN fields to metrics from a MaxMind database.

    The processor is created uninitialized. ``initialize`` opens the database
    once; afterwards ``apply`` may be called for any number of batches. The
    open database is owned by this instance, so several processors with
    different databases can live in one process.
    """

    name = "geoip"

    def __init__(self, config: Optional[GeoIPConfig] = None, log: Optional[logging.Logger] = None):
        """Initialize processor with configuration.

        Args:
            config: Processor configuration. Uses defaults if None.
            log: Logger receiving lookup errors. Defaults to this module's logger.
        """
        self.config = config or GeoIPConfig()
        self.log = log or logger
        self.kind: Optional[DatabaseKind] = None
        self._reader: Optional[GeoDatabase] = None
        self._engine: Optional[MappingEngine] = None

    @property
    def ready(self) -> bool:
        return self._engine is not None

    def initialize(self) -> None:
        """Select the database kind and open the database.

        Raises:
            InvalidConfigError: If db_type is unknown. No file is touched.
            DatabaseOpenError: If the database cannot be opened. The processor
                stays uninitialized.
            RuntimeError: If the processor is already initialized.
        """
        if self.ready:
            raise RuntimeError("GeoIP processor is already initialized")

        kind = DatabaseKind.resolve(self.config.db_type)
        reader = open_reader(self.config.db_path, kind)

        self.kind = kind
        self._reader = reader
        self._engine = MappingEngine(reader, self.config.lookups, log=self.log)
        logger.debug(
            f"GeoIP processor ready: {kind.value} database {self.config.db_path}, "
            f"{len(self.config.lookups)} lookup(s)"
        )

    def apply(self, *metrics: P) -> list[P]:
        """Enrich metrics in place and return them.

        The result holds the same metric objects in the same order. Lookup
        failures are logged and skipped, never raised.

        Raises:
            RuntimeError: If called before a successful initialize().
        """
        if self._engine is None:
            raise RuntimeError("GeoIP processor used before initialize()")

        for point in metrics:
            self._engine.apply_all(point)
        return list(metrics)

    def enrich(self, batch: Sequence[P]) -> list[P]:
        """Sequence form of apply()."""
        return self.apply(*batch)

    def close(self) -> None:
        """Close the database. The processor returns to the uninitialized state."""
        if self._reader is not None:
            self._reader.close()
        self._reader = None
        self._engine = None
        self.kind = None

    def __enter__(self):
        if not self.ready:
            self.initialize()
        return self

    def __exit__(self, *args):
        self.close()

    @staticmethod
    def sample_config() -> str:
        return SAMPLE_CONFIG

    @staticmethod
    def description() -> str:
        return (
            "GeoIP looks up the country code, city name, latitude/longitude or "
            "autonomous system for IP addresses in a MaxMind GeoIP database"
        )
