"""
Review quality scoring and server-verified reviewer authorization
"""

from review_gate.exceptions import (
    InvalidInputException,
    ReviewGateException,
    SecurityException,
)
from review_gate.models import (
    CodeQualityScore,
    ReviewerAuth,
    ReviewMetrics,
    ReviewRecord,
    SeverityFindings,
)
from review_gate.services import (
    GitHubAuthorizationService,
    QualityScoreCalculator,
    ScoringConfig,
    aggregate_review_metrics,
    calculate_quality_score,
    classify_review_severity,
)
from review_gate.utils.auth_cache import AuthorizationCache

__version__ = "1.0.0"

__all__ = [
    "AuthorizationCache",
    "CodeQualityScore",
    "GitHubAuthorizationService",
    "InvalidInputException",
    "QualityScoreCalculator",
    "ReviewGateException",
    "ReviewMetrics",
    "ReviewRecord",
    "ReviewerAuth",
    "ScoringConfig",
    "SecurityException",
    "SeverityFindings",
    "aggregate_review_metrics",
    "calculate_quality_score",
    "classify_review_severity",
]
