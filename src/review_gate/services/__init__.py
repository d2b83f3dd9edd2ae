"""
Review scoring and reviewer authorization services
"""

from .github_service import GitHubAuthorizationService
from .metrics_aggregator import aggregate_review_metrics
from .quality_scorer import (
    QualityScoreCalculator,
    ScoringConfig,
    calculate_quality_score,
)
from .severity_classifier import classify_review_severity

__all__ = [
    "GitHubAuthorizationService",
    "QualityScoreCalculator",
    "ScoringConfig",
    "aggregate_review_metrics",
    "calculate_quality_score",
    "classify_review_severity",
]
