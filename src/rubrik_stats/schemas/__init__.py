"""Pydantic records for Rubrik stats and the JSON surface."""

from rubrik_stats.schemas.common import HealthResponse
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

__all__ = [
    # Common
    "HealthResponse",
    # Stats
    "SystemStorage",
    "VmStorage",
    "VmStorageList",
    "DataLocationUsage",
    "DataLocationUsageList",
    "TimeStat",
    "StreamCount",
    "RunwayRemaining",
    "StorageGrowth",
    "ArchivalBandwidth",
    "StatsSnapshot",
]
