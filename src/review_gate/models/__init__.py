"""
Data models for review scoring and reviewer authorization
"""

from .auth_models import (
    CollaboratorPermission,
    PermissionLookupFailure,
    PermissionLookupNotFound,
    PermissionLookupResult,
    PermissionLookupSuccess,
    ReviewerAuth,
)
from .review_models import (
    CodeQualityScore,
    QualityBreakdown,
    ReviewMetrics,
    ReviewRecord,
    SeverityFindings,
)

__all__ = [
    "CodeQualityScore",
    "CollaboratorPermission",
    "PermissionLookupFailure",
    "PermissionLookupNotFound",
    "PermissionLookupResult",
    "PermissionLookupSuccess",
    "QualityBreakdown",
    "ReviewMetrics",
    "ReviewRecord",
    "ReviewerAuth",
    "SeverityFindings",
]
