"""
Patch History Service Layer

This package provides the REST client for fetching, saving and rolling back
patch history records of a backend project.
"""

from app.services.history.service import (
    fetch_history,
    save_history,
    rollback_patch,
)

from app.services.history.models import (
    PatchSource,
    PatchHistoryRecord,
    ImpactSummary,
    PatchCounts,
    SaveResult,
    make_record,
    impact_from_names,
    counts_from_impact,
)

from app.services.history.exceptions import (
    HistoryClientError,
    TransportError,
    ApplicationError,
    InvalidResponseError,
)

__all__ = [
    "fetch_history",
    "save_history",
    "rollback_patch",
    "PatchSource",
    "PatchHistoryRecord",
    "ImpactSummary",
    "PatchCounts",
    "SaveResult",
    "make_record",
    "impact_from_names",
    "counts_from_impact",
    "HistoryClientError",
    "TransportError",
    "ApplicationError",
    "InvalidResponseError",
]
