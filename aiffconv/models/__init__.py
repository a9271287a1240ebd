"""Data models for aiffconv."""

from aiffconv.models.config import ConversionConfig, Settings
from aiffconv.models.plan import BuildPlan, ConversionJob, CoverSearchResult, TrackResult
from aiffconv.models.profile import PROFILES, FormatProfile, SourceFormat, get_profile
from aiffconv.models.status import CoverStrategy, ErrorCode, JobStatus

__all__ = [
    "BuildPlan",
    "ConversionConfig",
    "ConversionJob",
    "CoverSearchResult",
    "CoverStrategy",
    "ErrorCode",
    "FormatProfile",
    "JobStatus",
    "PROFILES",
    "Settings",
    "SourceFormat",
    "TrackResult",
    "get_profile",
]
