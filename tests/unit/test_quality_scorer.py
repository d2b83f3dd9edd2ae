"""
Tests for review_gate/services/quality_scorer.py
"""

import pytest

from review_gate.exceptions import InvalidInputException, SecurityException
from review_gate.models.review_models import SeverityFindings
from review_gate.services.quality_scorer import (
    QualityScoreCalculator,
    ScoringConfig,
    calculate_quality_score,
)


def criticals(count: int) -> str:
    return "\n".join(f"Critical bug {i + 1}" for i in range(count))


class TestApprovalPreconditions:
    """Approval claims are security assertions"""

    def test_approval_without_auth_raises(self):
        """approved=True with no auth is forbidden"""
        with pytest.raises(SecurityException) as exc_info:
            calculate_quality_score("Looks good!", True)

        assert exc_info.value.security_context == "approval_without_authorization"
        assert "SECURITY ERROR" in str(exc_info.value)

    def test_approval_with_unverified_auth_raises(self, unverified_auth):
        """approved=True with is_verified=False is forbidden"""
        with pytest.raises(SecurityException) as exc_info:
            calculate_quality_score("Looks good!", True, unverified_auth)

        assert exc_info.value.security_context == "approval_unverified"

    @pytest.mark.parametrize("approved", ["true", 1, None, 0.0])
    def test_non_boolean_approval_raises(self, approved, verified_auth):
        """Truthy or falsy stand-ins are not booleans"""
        with pytest.raises(SecurityException) as exc_info:
            calculate_quality_score("Looks good!", approved, verified_auth)

        assert exc_info.value.security_context == "approval_flag_type"

    @pytest.mark.parametrize(
        "auth",
        [
            {"is_verified": True, "login": "reviewer", "has_write_access": True},
            "verified",
            object(),
        ],
        ids=["mapping", "string", "object"],
    )
    def test_approval_with_non_auth_object_raises(self, auth):
        """Only a ReviewerAuth can back an approval"""
        with pytest.raises(SecurityException) as exc_info:
            calculate_quality_score("Looks good!", True, auth)

        assert exc_info.value.security_context == "approval_invalid_authorization"

    def test_preconditions_checked_before_classification(self):
        """A forbidden approval is reported even when the text is invalid"""
        with pytest.raises(SecurityException):
            calculate_quality_score("", True)

    def test_no_approval_without_auth_is_allowed(self):
        """approved=False needs no authorization"""
        result = calculate_quality_score("Please fix the security issues", False)

        assert result.score == 70

    def test_classifier_errors_propagate(self):
        """Validation errors from the classifier are not wrapped"""
        with pytest.raises(InvalidInputException):
            calculate_quality_score("", False)


class TestCriticalPenaltyCurve:
    """Diminishing returns after the third critical finding"""

    @pytest.mark.parametrize("count,expected", [(0, 100), (1, 70), (2, 40), (3, 10)])
    def test_first_three_criticals(self, count, expected):
        """0..3 criticals score 100, 70, 40, 10"""
        text = criticals(count) if count else "Looks good"

        assert calculate_quality_score(text, False).score == expected

    def test_fourth_critical_uses_softened_weight(self):
        """3 * 30 + 1 * 25 = 115, clamped to 0"""
        calculator = QualityScoreCalculator()

        assert calculator.critical_penalty(4) == 115
        assert calculate_quality_score(criticals(4), False).score == 0

    def test_softened_weight_derives_from_base_weight(self):
        """Changing the base weight rescales the discount"""
        assert ScoringConfig().critical_softened_weight == 25
        assert ScoringConfig(critical_base_weight=40).critical_softened_weight == 33
        assert ScoringConfig(critical_base_weight=4).critical_softened_weight > 0

    def test_penalty_is_monotonic(self):
        """More criticals never lower the penalty"""
        calculator = QualityScoreCalculator()
        penalties = [calculator.critical_penalty(n) for n in range(30)]

        assert penalties == sorted(penalties)

    def test_score_never_increases_with_more_criticals(self):
        """Score is non-increasing in the number of criticals"""
        scores = [calculate_quality_score(criticals(n), False).score for n in range(1, 21)]

        assert all(later <= earlier for earlier, later in zip(scores, scores[1:]))

    @pytest.mark.parametrize(
        "extra",
        ["Warning: flaky retry", "Consider renaming", "Critical bug in parser"],
        ids=["warning", "suggestion", "critical"],
    )
    @pytest.mark.parametrize("approved", [False, True])
    def test_appending_a_finding_never_raises_score(self, extra, approved, verified_auth):
        """Adding a matching line of any severity never increases the score"""
        auth = verified_auth if approved else None
        bases = [
            "All good",
            "Warning: edge case on empty input",
            "Consider caching",
            criticals(2),
            criticals(5),
        ]

        for base in bases:
            before = calculate_quality_score(base, approved, auth).score
            after = calculate_quality_score(f"{base}\n{extra}", approved, auth).score

            assert after <= before, base

    @pytest.mark.parametrize("approved", [False, True])
    def test_score_never_increases_as_findings_accumulate(self, approved, verified_auth):
        """Growing a review line by line across all tiers never raises its score"""
        auth = verified_auth if approved else None
        templates = ["Consider option {}", "Warning: case {}", "Critical bug {}"]
        lines = [templates[i % 3].format(i) for i in range(30)]

        scores = [
            calculate_quality_score("\n".join(lines[: n + 1]), approved, auth).score
            for n in range(len(lines))
        ]

        assert all(later <= earlier for earlier, later in zip(scores, scores[1:]))


class TestScoring:
    """Weights, approval adjustments and clamping"""

    def test_two_warnings(self):
        """Two warnings cost 15 each"""
        result = calculate_quality_score("Warning: x\nWarning: y", False)

        assert result.score == 70
        assert result.category == "good"

    def test_duplicate_warnings_count_once(self):
        """Identical warnings collapse before scoring"""
        assert calculate_quality_score("Warning: x\nWarning: x", False).score == 85

    def test_clean_review(self):
        """No findings is a perfect score"""
        result = calculate_quality_score("All good", False)

        assert result.score == 100
        assert result.category == "excellent"

    def test_suggestions_can_drive_score_to_zero(self):
        """50 suggestions clamp to 0 rather than going negative"""
        text = "\n".join(f"Consider improvement {i}" for i in range(50))

        assert calculate_quality_score(text, False).score == 0

    def test_approval_bonus(self, verified_auth):
        """Authorized approval without criticals adds exactly 10"""
        text = "Warning: minor issue here"

        baseline = calculate_quality_score(text, False).score
        approved = calculate_quality_score(text, True, verified_auth).score

        assert approved == baseline + 10

    def test_approval_bonus_is_capped(self, verified_auth):
        """The bonus never pushes the score above 100"""
        assert calculate_quality_score("Perfect!", True, verified_auth).score == 100

    def test_approval_with_criticals_penalty(self, verified_auth):
        """Authorized approval despite a critical costs 10"""
        baseline = calculate_quality_score("Critical bug found", False).score
        approved = calculate_quality_score("Critical bug found", True, verified_auth).score

        assert baseline - approved == 10

    def test_approval_penalty_respects_floor(self, verified_auth):
        """Penalties never push below 0"""
        assert calculate_quality_score(criticals(10), True, verified_auth).score == 0

    def test_read_only_reviewer_gets_no_bonus(self, read_only_auth):
        """Verified but without write access changes nothing"""
        text = "Consider adding more test coverage."

        baseline = calculate_quality_score(text, False).score

        assert calculate_quality_score(text, True, read_only_auth).score == baseline

    def test_auth_without_approval_changes_nothing(self, verified_auth):
        """Passing auth alone grants no bonus"""
        text = "Consider adding more test coverage."

        assert (
            calculate_quality_score(text, False, verified_auth).score
            == calculate_quality_score(text, False).score
        )

    def test_non_auth_object_without_approval_is_ignored(self):
        """Without an approval claim the auth argument is never read"""
        text = "Consider adding more test coverage."
        fake = {"is_verified": True, "has_write_access": True}

        assert (
            calculate_quality_score(text, False, fake).score
            == calculate_quality_score(text, False).score
        )

    def test_mixed_severities_compound(self):
        """Penalties from all tiers add up"""
        text = "Critical bug 1\nWarning: flaky\nConsider renaming"

        assert calculate_quality_score(text, False).score == 100 - 30 - 15 - 5


class TestCategories:
    """Category is a pure function of the clamped score"""

    @pytest.mark.parametrize(
        "score,category",
        [
            (100, "excellent"),
            (90, "excellent"),
            (89, "good"),
            (70, "good"),
            (69, "needs-improvement"),
            (50, "needs-improvement"),
            (49, "critical"),
            (0, "critical"),
        ],
    )
    def test_thresholds(self, score, category):
        """Boundaries are inclusive at the lower end"""
        assert QualityScoreCalculator().categorize(score) == category


class TestBreakdown:
    """Each dimension is computed independently from 100"""

    def test_security_dimension(self):
        """Only criticals mentioning security reduce security"""
        result = calculate_quality_score(
            "Security hole in login\nCritical bug in parser", False
        )

        assert result.breakdown.security == 60
        assert result.breakdown.maintainability == 100

    def test_maintainability_dimension(self):
        """Every warning costs maintainability 10"""
        result = calculate_quality_score("Warning: a\nWarning: b\nWarning: c", False)

        assert result.breakdown.maintainability == 70
        assert result.breakdown.performance == 100

    def test_performance_dimension(self):
        """Warnings mentioning performance cost 20"""
        result = calculate_quality_score(
            "Warning: performance regression in loop", False
        )

        assert result.breakdown.performance == 80
        assert result.breakdown.maintainability == 90

    def test_testability_dimension(self):
        """Suggestions mentioning tests cost 10"""
        result = calculate_quality_score(
            "Consider adding a test\nConsider renaming", False
        )

        assert result.breakdown.testability == 90

    def test_dimensions_are_clamped(self):
        """Three security criticals floor at 0"""
        text = "\n".join(f"Security flaw {i}" for i in range(3))

        assert calculate_quality_score(text, False).breakdown.security == 0

    def test_breakdown_ignores_overall_penalty(self):
        """A low overall score does not drag untouched dimensions down"""
        result = calculate_quality_score(criticals(4), False)

        assert result.score == 0
        assert result.breakdown.maintainability == 100
        assert result.breakdown.performance == 100
        assert result.breakdown.testability == 100


class TestDefensiveDefaults:
    """Malformed classifier results are treated as empty tiers"""

    def test_none_result(self):
        """A classifier returning None scores as a clean review"""
        calculator = QualityScoreCalculator(classifier=lambda text: None)

        result = calculator.score("anything", False)

        assert result.score == 100

    def test_partial_result(self):
        """Missing tiers default to empty"""

        class Partial:
            critical = ["Critical bug"]
            warnings = None

        calculator = QualityScoreCalculator(classifier=lambda text: Partial())

        assert calculator.score("anything", False).score == 70

    def test_custom_classifier_findings(self):
        """An injected classifier drives the score"""
        findings = SeverityFindings(warnings=("Warning: a",), suggestions=("Consider b",))
        calculator = QualityScoreCalculator(classifier=lambda text: findings)

        assert calculator.score("anything", False).score == 80
