"""
Wire shapes for patch history records.

Records travel as plain JSON objects with camelCase keys. patch, beforeSchema
and afterSchema are opaque: the client never inspects them.
"""
import time
import uuid
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, TypedDict, Union


class PatchSource(str, Enum):
    """Provenance of a patch record"""
    AI = "AI"
    MANUAL = "MANUAL"
    IMPORT = "IMPORT"
    ROLLBACK = "ROLLBACK"


class ImpactSummary(TypedDict):
    """Names of affected entities"""
    added: List[str]
    updated: List[str]
    removed: List[str]


class PatchCounts(TypedDict):
    added: int
    updated: int
    removed: int
    validOps: int
    skippedOps: int


class _PatchHistoryRecordRequired(TypedDict):
    id: str
    timestamp: int  # epoch ms
    summary: str
    patch: Any
    beforeSchema: Any
    afterSchema: Any


class PatchHistoryRecord(_PatchHistoryRecordRequired, total=False):
    source: str  # PatchSource value
    baseVersion: int
    toVersion: int
    impact: ImpactSummary
    counts: PatchCounts


class SaveResult(TypedDict):
    version: int


def now_ms() -> int:
    return int(time.time() * 1000)


def impact_from_names(
    added: Sequence[str] = (),
    updated: Sequence[str] = (),
    removed: Sequence[str] = (),
) -> ImpactSummary:
    return {"added": list(added), "updated": list(updated), "removed": list(removed)}


def counts_from_impact(impact: ImpactSummary, valid_ops: int = 0, skipped_ops: int = 0) -> PatchCounts:
    """Aggregate counts for an impact summary plus operation tallies."""
    return {
        "added": len(impact["added"]),
        "updated": len(impact["updated"]),
        "removed": len(impact["removed"]),
        "validOps": valid_ops,
        "skippedOps": skipped_ops,
    }


def make_record(
    summary: str,
    patch: Any,
    before_schema: Any,
    after_schema: Any,
    *,
    source: Optional[Union[PatchSource, str]] = None,
    base_version: Optional[int] = None,
    to_version: Optional[int] = None,
    impact: Optional[ImpactSummary] = None,
    counts: Optional[PatchCounts] = None,
    record_id: Optional[str] = None,
    timestamp: Optional[int] = None,
) -> PatchHistoryRecord:
    """
    Build a PatchHistoryRecord ready to send.

    Args:
        summary: Human-readable description
        patch: Opaque diff/operation payload
        before_schema: Schema snapshot before the patch
        after_schema: Schema snapshot after the patch
        source: Provenance (AI, MANUAL, IMPORT, ROLLBACK)
        base_version: Version the patch applies to
        to_version: Version the patch produces
        impact: Affected entity names
        counts: Aggregate statistics
        record_id: Identifier; a new uuid4 hex string when omitted
        timestamp: Creation time in epoch ms; now when omitted

    Returns:
        Record dict. Optional fields left as None are omitted.

    Raises:
        ValueError: If source is not a known PatchSource
    """
    record: Dict[str, Any] = {
        "id": record_id or uuid.uuid4().hex,
        "timestamp": timestamp if timestamp is not None else now_ms(),
        "summary": summary,
        "patch": patch,
        "beforeSchema": before_schema,
        "afterSchema": after_schema,
    }
    if source is not None:
        record["source"] = PatchSource(source).value
    if base_version is not None:
        record["baseVersion"] = base_version
    if to_version is not None:
        record["toVersion"] = to_version
    if impact is not None:
        record["impact"] = impact
    if counts is not None:
        record["counts"] = counts
    return record  # type: ignore[return-value]
