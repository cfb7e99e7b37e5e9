from .platform import PLATFORMS, Platform, RoleType, QueryMode, ConfidenceBucket, SourceStatus
from .hints import HintBundle
from .search import QueryCandidate, RawSearchResult, MatchedResult, RawSearchResponse, SearchOutcome
from .identity import PlatformProfile, ScoreBreakdown, EvidencePointer, DiscoveredIdentity
from .discovery_result import PlatformDiagnostics, SourceResult, SourceError, DiscoveryResult, HealthStatus

__all__ = [
    "PLATFORMS",
    "Platform",
    "RoleType",
    "QueryMode",
    "ConfidenceBucket",
    "SourceStatus",
    "HintBundle",
    "QueryCandidate",
    "RawSearchResult",
    "MatchedResult",
    "RawSearchResponse",
    "SearchOutcome",
    "PlatformProfile",
    "ScoreBreakdown",
    "EvidencePointer",
    "DiscoveredIdentity",
    "PlatformDiagnostics",
    "SourceResult",
    "SourceError",
    "DiscoveryResult",
    "HealthStatus",
]
