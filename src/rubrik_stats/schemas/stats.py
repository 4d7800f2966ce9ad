"""Pydantic records for the Rubrik internal stats endpoints.

Every record is immutable once decoded, ignores unknown keys, and defaults
each numeric field to zero so an empty record is always well formed. Scalar
fields are strict: a string, bool or fractional value where an integer is
expected fails validation instead of being coerced.

Example (``/api/internal/stats/system_storage``):
    {
        "total": 107374182400000,
        "used": 53687091200000,
        "available": 53687091200000,
        "snapshot": 42949672960000,
        "liveMount": 1073741824,
        "miscellaneous": 9663676416
    }

Example (``/api/internal/stats/per_vm_storage``):
    {
        "hasMore": false,
        "total": 1,
        "data": [
            {
                "id": "VirtualMachine:::4f1c...-vm-101",
                "logicalBytes": 85899345920,
                "ingestedBytes": 42949672960,
                "exclusivePhysicalBytes": 21474836480,
                "sharedPhysicalBytes": 0,
                "indexStorageBytes": 104857600
            }
        ]
    }

Example (``/api/internal/stats/physical_ingest/time_series``):
    [{"time": "2024-03-01T10:00:00.000Z", "stat": 1048576}]
"""

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictFloat, StrictInt, StrictStr


class RubrikRecord(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)


class SystemStorage(RubrikRecord):
    """Cluster-wide capacity summary, in bytes."""

    total: StrictInt = Field(0, json_schema_extra={"example": 107374182400000})
    used: StrictInt = Field(0, json_schema_extra={"example": 53687091200000})
    available: StrictInt = Field(0, json_schema_extra={"example": 53687091200000})
    snapshot: StrictInt = Field(0, json_schema_extra={"example": 42949672960000})
    live_mount: StrictInt = Field(0, alias="liveMount", json_schema_extra={"example": 1073741824})
    miscellaneous: StrictInt = Field(0, json_schema_extra={"example": 9663676416})


class VmStorage(RubrikRecord):
    """Storage used by one protected object."""

    id: StrictStr = Field("", description="Managed object ID")
    logical_bytes: StrictFloat = Field(0, alias="logicalBytes")
    ingested_bytes: StrictFloat = Field(0, alias="ingestedBytes")
    exclusive_physical_bytes: StrictFloat = Field(0, alias="exclusivePhysicalBytes")
    shared_physical_bytes: StrictFloat = Field(0, alias="sharedPhysicalBytes")
    index_storage_bytes: StrictFloat = Field(0, alias="indexStorageBytes")


class DataLocationUsage(RubrikRecord):
    """Archival usage of one archive location."""

    location_id: StrictStr = Field("", alias="locationId")
    data_downloaded: StrictInt = Field(0, alias="dataDownloaded")
    data_archived: StrictInt = Field(0, alias="dataArchived")
    num_vms_archived: StrictInt = Field(0, alias="numVMsArchived")
    num_filesets_archived: StrictInt = Field(0, alias="numFilesetsArchived")
    num_linux_filesets_archived: StrictInt = Field(0, alias="numLinuxFilesetsArchived")
    num_windows_filesets_archived: StrictInt = Field(0, alias="numWindowsFilesetsArchived")
    num_share_filesets_archived: StrictInt = Field(0, alias="numShareFilesetsArchived")
    num_mssql_dbs_archived: StrictInt = Field(0, alias="numMssqlDbsArchived")
    num_hyperv_vms_archived: StrictInt = Field(0, alias="numHypervVmsArchived")
    num_nutanix_vms_archived: StrictInt = Field(0, alias="numNutanixVmsArchived")
    num_managed_volumes_archived: StrictInt = Field(0, alias="numManagedVolumesArchived")


class TimeStat(RubrikRecord):
    """One sample of a time series."""

    time: StrictStr = Field("", json_schema_extra={"example": "2024-03-01T10:00:00.000Z"})
    stat: StrictFloat = Field(0, json_schema_extra={"example": 1048576})


class ResultList(RubrikRecord):
    has_more: StrictBool = Field(False, alias="hasMore")
    total: StrictInt = 0


class VmStorageList(ResultList):
    data: list[VmStorage] = Field(default_factory=list)


class DataLocationUsageList(ResultList):
    data: list[DataLocationUsage] = Field(default_factory=list)


class StreamCount(RubrikRecord):
    count: StrictInt = 0


class RunwayRemaining(RubrikRecord):
    days: StrictInt = 0


class StorageGrowth(RubrikRecord):
    bytes: StrictInt = 0


class ArchivalBandwidth(RubrikRecord):
    location_id: str = Field(..., alias="locationId")
    series: list[TimeStat] = Field(default_factory=list)


class StatsSnapshot(RubrikRecord):
    """All stats endpoints collected in one pass, keyed in camelCase like the records it holds."""

    system_storage: SystemStorage = Field(default_factory=SystemStorage, alias="systemStorage")
    per_vm_storage: list[VmStorage] = Field(default_factory=list, alias="perVmStorage")
    stream_count: int = Field(0, alias="streamCount")
    data_location_usage: list[DataLocationUsage] = Field(default_factory=list, alias="dataLocationUsage")
    physical_ingest: list[TimeStat] = Field(default_factory=list, alias="physicalIngest")
    archival_bandwidth: list[ArchivalBandwidth] = Field(default_factory=list, alias="archivalBandwidth")
    runway_remaining_days: int = Field(0, alias="runwayRemainingDays")
    average_storage_growth_per_day: int = Field(0, alias="averageStorageGrowthPerDay")
