"""
Quality score calculation for review comments
"""

import logging
from dataclasses import dataclass
from typing import Callable, Optional, Sequence

from review_gate.exceptions import SecurityException
from review_gate.models.auth_models import ReviewerAuth
from review_gate.models.review_models import (
    CodeQualityScore,
    QualityBreakdown,
    QualityCategory,
    SeverityFindings,
)
from review_gate.services.severity_classifier import classify_review_severity

logger = logging.getLogger(__name__)

MAX_SCORE = 100
MIN_SCORE = 0


@dataclass(frozen=True)
class ScoringConfig:
    """Weights, thresholds and penalties used by the quality score"""

    critical_base_weight: int = 30
    critical_threshold: int = 3
    # Fraction of the base weight removed for criticals past the threshold
    soften_factor: float = 5 / 30
    warning_weight: int = 15
    suggestion_weight: int = 5
    approval_bonus: int = 10
    approval_with_criticals_penalty: int = 10

    excellent_threshold: int = 90
    good_threshold: int = 70
    needs_improvement_threshold: int = 50

    security_penalty: int = 40
    maintainability_penalty: int = 10
    performance_penalty: int = 20
    testability_penalty: int = 10

    @property
    def critical_softened_weight(self) -> int:
        return round(self.critical_base_weight * (1 - self.soften_factor))


def _clamp(value: int) -> int:
    return max(MIN_SCORE, min(MAX_SCORE, value))


def _count_mentioning(lines: Sequence[str], keyword: str) -> int:
    return sum(1 for line in lines if keyword in line.lower())


class QualityScoreCalculator:
    """Computes bounded quality scores, gating approval bonuses on verified reviewers"""

    def __init__(
        self,
        config: Optional[ScoringConfig] = None,
        classifier: Callable[[str], SeverityFindings] = classify_review_severity,
    ):
        self.config = config or ScoringConfig()
        self.classifier = classifier

    def _check_approval(self, approved: object, auth: Optional[ReviewerAuth]) -> None:
        """
        An approval claim is a security assertion: it must be a real boolean
        and, when true, backed by a verified authorization record.
        """
        if not isinstance(approved, bool):
            raise SecurityException(
                "SECURITY ERROR: approval flag must be a boolean",
                security_context="approval_flag_type",
                details={"received_type": type(approved).__name__},
            )

        if approved and auth is None:
            raise SecurityException(
                "SECURITY ERROR: approval requires verified reviewer authorization. "
                "Verify the reviewer first and pass the result as auth.",
                security_context="approval_without_authorization",
            )

        if approved and not isinstance(auth, ReviewerAuth):
            raise SecurityException(
                "SECURITY ERROR: approval requires a ReviewerAuth from the verifier",
                security_context="approval_invalid_authorization",
                details={"received_type": type(auth).__name__},
            )

        if approved and not auth.is_verified:
            raise SecurityException(
                "SECURITY ERROR: approval requires is_verified=True in auth. "
                "The provided authorization is not verified.",
                security_context="approval_unverified",
                details={"login": auth.login},
            )

    def critical_penalty(self, critical_count: int) -> int:
        """Penalty for critical findings with diminishing returns past the threshold"""
        cfg = self.config
        full = min(critical_count, cfg.critical_threshold)
        softened = max(0, critical_count - cfg.critical_threshold)
        return (
            full * cfg.critical_base_weight
            + softened * cfg.critical_softened_weight
        )

    def categorize(self, score: int) -> QualityCategory:
        cfg = self.config
        if score >= cfg.excellent_threshold:
            return "excellent"
        if score >= cfg.good_threshold:
            return "good"
        if score >= cfg.needs_improvement_threshold:
            return "needs-improvement"
        return "critical"

    def breakdown(
        self,
        critical: Sequence[str],
        warnings: Sequence[str],
        suggestions: Sequence[str],
    ) -> QualityBreakdown:
        """Each dimension starts at 100 and only loses points for relevant findings"""
        cfg = self.config
        return QualityBreakdown(
            security=_clamp(
                MAX_SCORE - _count_mentioning(critical, "security") * cfg.security_penalty
            ),
            maintainability=_clamp(
                MAX_SCORE - len(warnings) * cfg.maintainability_penalty
            ),
            performance=_clamp(
                MAX_SCORE
                - _count_mentioning(warnings, "performance") * cfg.performance_penalty
            ),
            testability=_clamp(
                MAX_SCORE - _count_mentioning(suggestions, "test") * cfg.testability_penalty
            ),
        )

    def score(
        self,
        text: str,
        approved: bool,
        auth: Optional[ReviewerAuth] = None,
    ) -> CodeQualityScore:
        """
        Score a review comment.

        Args:
            text: Review comment body
            approved: Whether the reviewer approved the change
            auth: Verified reviewer authorization, required when approved

        Returns:
            CodeQualityScore with score in [0, 100], category and breakdown

        Raises:
            SecurityException: approval flag is not a bool, or approval is
                claimed without verified authorization
            InvalidInputException: review text failed classifier validation
        """
        self._check_approval(approved, auth)

        findings = self.classifier(text)
        critical = getattr(findings, "critical", None) or ()
        warnings = getattr(findings, "warnings", None) or ()
        suggestions = getattr(findings, "suggestions", None) or ()
        cfg = self.config

        score = MAX_SCORE
        score -= self.critical_penalty(len(critical))
        score -= len(warnings) * cfg.warning_weight
        score -= len(suggestions) * cfg.suggestion_weight

        authorized_approval = (
            approved
            and isinstance(auth, ReviewerAuth)
            and auth.is_verified
            and auth.has_write_access
        )

        if authorized_approval and not critical:
            score = min(MAX_SCORE, score + cfg.approval_bonus)
        elif authorized_approval:
            score -= cfg.approval_with_criticals_penalty

        score = _clamp(score)

        result = CodeQualityScore(
            score=score,
            category=self.categorize(score),
            breakdown=self.breakdown(critical, warnings, suggestions),
        )

        logger.info(
            f"Quality score {result.score} ({result.category})",
            extra={
                "operation": "calculate_quality_score",
                "score": result.score,
                "critical": len(critical),
                "warnings": len(warnings),
                "suggestions": len(suggestions),
                "authorized_approval": authorized_approval,
            },
        )
        return result


_default_calculator = QualityScoreCalculator()


def calculate_quality_score(
    text: str,
    approved: bool,
    auth: Optional[ReviewerAuth] = None,
) -> CodeQualityScore:
    """Score a review comment with the default scoring configuration"""
    return _default_calculator.score(text, approved, auth)
