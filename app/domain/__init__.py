"""
app/domain package marker.
"""

from app.domain.campaigns import (
    CATEGORY_LABELS,
    AuditLogEntry,
    AuditStatus,
    BrandRunOutcome,
    CampaignRecord,
    PipelineRunSummary,
    category_label,
    parse_timestamp,
    resolve_category,
)

__all__ = [
    "CATEGORY_LABELS",
    "AuditLogEntry",
    "AuditStatus",
    "BrandRunOutcome",
    "CampaignRecord",
    "PipelineRunSummary",
    "category_label",
    "parse_timestamp",
    "resolve_category",
]
