from fastapi import APIRouter, Depends, Query

from rubrik_stats.core.dependencies import get_stats_service, verify_api_token
from rubrik_stats.schemas.stats import (
    DataLocationUsage,
    RunwayRemaining,
    StatsSnapshot,
    StorageGrowth,
    StreamCount,
    SystemStorage,
    TimeStat,
    VmStorage,
)
from rubrik_stats.services.stats_service import StatsService

router = APIRouter(prefix="/stats", tags=["Stats"], dependencies=[Depends(verify_api_token)])


@router.get(
    "/system_storage",
    response_model=SystemStorage,
    summary="System Storage",
    description="Total, used, available, snapshot, live mount and miscellaneous capacity in bytes.",
)
def get_system_storage(service: StatsService = Depends(get_stats_service)):
    return service.get_system_storage()


@router.get(
    "/per_vm_storage",
    response_model=list[VmStorage],
    summary="Per-object Storage",
    description="Logical, ingested, physical and index bytes for each protected object.",
)
def get_per_vm_storage(service: StatsService = Depends(get_stats_service)):
    return service.get_per_vm_storage()


@router.get("/streams/count", response_model=StreamCount, summary="Active Streams")
def get_stream_count(service: StatsService = Depends(get_stats_service)):
    return StreamCount(count=service.get_stream_count())


@router.get(
    "/data_location/usage",
    response_model=list[DataLocationUsage],
    summary="Archive Location Usage",
    description="Archived object counts and downloaded/archived bytes per archive location.",
)
def get_data_location_usage(service: StatsService = Depends(get_stats_service)):
    return service.get_data_location_usage()


@router.get("/physical_ingest", response_model=list[TimeStat], summary="Physical Ingest (last 10 minutes)")
def get_physical_ingest(service: StatsService = Depends(get_stats_service)):
    return service.get_physical_ingest()


@router.get(
    "/archival/bandwidth/{location_id}",
    response_model=list[TimeStat],
    summary="Archival Bandwidth",
    description="Archival bandwidth time series of one archive location.",
)
def get_archival_bandwidth(
    location_id: str,
    timerange: str = Query("", alias="range", description="Relative range, e.g. -30min. Defaults to -1h."),
    service: StatsService = Depends(get_stats_service),
):
    return service.get_archival_bandwidth(location_id, timerange)


@router.get("/runway_remaining", response_model=RunwayRemaining, summary="Runway Remaining (days)")
def get_runway_remaining(service: StatsService = Depends(get_stats_service)):
    return RunwayRemaining(days=service.get_runway_remaining())


@router.get(
    "/average_storage_growth_per_day", response_model=StorageGrowth, summary="Average Storage Growth per Day"
)
def get_average_storage_growth_per_day(service: StatsService = Depends(get_stats_service)):
    return StorageGrowth(bytes=service.get_average_storage_growth_per_day())


@router.get(
    "/snapshot",
    response_model=StatsSnapshot,
    summary="All Stats",
    description="Every stat in one response, including archival bandwidth for each archive location.",
)
def get_snapshot(
    timerange: str = Query("", alias="range", description="Archival bandwidth range. Defaults to -1h."),
    service: StatsService = Depends(get_stats_service),
):
    return service.get_snapshot(timerange)
