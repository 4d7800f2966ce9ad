from typing import Any, Callable, TypeVar

from loguru import logger
from pydantic import BaseModel, TypeAdapter, ValidationError

from rubrik_stats.core.client import QueryParams, RubrikClient
from rubrik_stats.core.config import settings
from rubrik_stats.core.exceptions import DecodeError, RubrikError
from rubrik_stats.schemas.stats import (
    ArchivalBandwidth,
    DataLocationUsage,
    DataLocationUsageList,
    RunwayRemaining,
    StatsSnapshot,
    StorageGrowth,
    StreamCount,
    SystemStorage,
    TimeStat,
    VmStorage,
    VmStorageList,
)

T = TypeVar("T")

SYSTEM_STORAGE_PATH = "/api/internal/stats/system_storage"
PER_VM_STORAGE_PATH = "/api/internal/stats/per_vm_storage"
STREAM_COUNT_PATH = "/api/internal/stats/streams/count"
DATA_LOCATION_USAGE_PATH = "/api/internal/stats/data_location/usage"
PHYSICAL_INGEST_PATH = "/api/internal/stats/physical_ingest/time_series"
ARCHIVAL_BANDWIDTH_PATH = "/api/internal/stats/archival/bandwidth/time_series"
RUNWAY_REMAINING_PATH = "/api/internal/stats/runway_remaining"
STORAGE_GROWTH_PATH = "/api/internal/stats/average_storage_growth_per_day"

PHYSICAL_INGEST_RANGE = "-10min"
DEFAULT_BANDWIDTH_RANGE = "-1h"

_time_series = TypeAdapter(list[TimeStat])


class StatsService:
    """Read-only accessors for the Rubrik internal stats endpoints.

    Each accessor GETs one fixed path and decodes the body into a typed record.
    By default any failure (network, non-2xx status, malformed body) is logged
    and the zero value of the record is returned, so callers never see a
    partially decoded result. With ``strict`` the ``RubrikError`` is raised
    instead.

    Args:
        client (RubrikClient): Logged-in Rubrik client.
        strict (bool): Raise instead of returning zero values. Defaults to
            ``RUBRIK_STRICT_STATS``.
    """

    def __init__(self, client: RubrikClient, strict: bool | None = None):
        self.client = client
        self.strict = settings.RUBRIK_STRICT_STATS if strict is None else strict

    def _fetch(
        self,
        path: str,
        decode: Callable[[Any], T],
        empty: Callable[[], T],
        params: QueryParams | None = None,
    ) -> T:
        try:
            raw = self.client.get(path, params=params)
            if raw is None:
                return empty()
            try:
                return decode(raw)
            except ValidationError as e:
                raise DecodeError(f"Unexpected payload from {path}: {e.error_count()} validation error(s)") from e
        except RubrikError as e:
            if self.strict:
                raise
            logger.warning(f"Stats request {path} failed, returning empty value: {e}")
            return empty()

    def _fetch_model(self, path: str, model: type[BaseModel], params: QueryParams | None = None):
        return self._fetch(path, model.model_validate, model, params=params)

    def get_system_storage(self) -> SystemStorage:
        """Total, used, available, snapshot, live mount and miscellaneous capacity in bytes."""
        return self._fetch_model(SYSTEM_STORAGE_PATH, SystemStorage)

    def get_per_vm_storage(self) -> list[VmStorage]:
        """Storage used by each protected object."""
        return self._fetch_model(PER_VM_STORAGE_PATH, VmStorageList).data

    def get_stream_count(self) -> int:
        """Number of active backup streams."""
        return self._fetch_model(STREAM_COUNT_PATH, StreamCount).count

    def get_data_location_usage(self) -> list[DataLocationUsage]:
        """Archived object counts and transferred bytes per archive location."""
        return self._fetch_model(DATA_LOCATION_USAGE_PATH, DataLocationUsageList).data

    def get_physical_ingest(self) -> list[TimeStat]:
        """Physical ingest over the last ten minutes."""
        return self._fetch(
            PHYSICAL_INGEST_PATH, _time_series.validate_python, list, params={"range": PHYSICAL_INGEST_RANGE}
        )

    def get_archival_bandwidth(self, location_id: str, timerange: str = "") -> list[TimeStat]:
        """Archival bandwidth of one archive location.

        Args:
            location_id (str): Archive location ID.
            timerange (str): Relative range such as ``-30min``. Empty means ``-1h``.
        """
        if not timerange:
            timerange = DEFAULT_BANDWIDTH_RANGE
        params = {"range": timerange, "data_location_id": location_id}
        return self._fetch(ARCHIVAL_BANDWIDTH_PATH, _time_series.validate_python, list, params=params)

    def get_runway_remaining(self) -> int:
        """Days remaining before the cluster fills up."""
        return self._fetch_model(RUNWAY_REMAINING_PATH, RunwayRemaining).days

    def get_average_storage_growth_per_day(self) -> int:
        """Average storage growth per day in bytes."""
        return self._fetch_model(STORAGE_GROWTH_PATH, StorageGrowth).bytes

    def get_snapshot(self, timerange: str = "") -> StatsSnapshot:
        """Collects every stat in one pass.

        Archival bandwidth is fetched for each location reported by the usage endpoint.
        """
        usage = self.get_data_location_usage()
        bandwidth = [
            ArchivalBandwidth(
                location_id=location.location_id,
                series=self.get_archival_bandwidth(location.location_id, timerange),
            )
            for location in usage
            if location.location_id
        ]
        return StatsSnapshot(
            system_storage=self.get_system_storage(),
            per_vm_storage=self.get_per_vm_storage(),
            stream_count=self.get_stream_count(),
            data_location_usage=usage,
            physical_ingest=self.get_physical_ingest(),
            archival_bandwidth=bandwidth,
            runway_remaining_days=self.get_runway_remaining(),
            average_storage_growth_per_day=self.get_average_storage_growth_per_day(),
        )
