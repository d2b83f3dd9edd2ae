"""
Severity classification of free-text review comments
"""

import logging
from typing import Dict, List, Optional, Sequence, Tuple

from review_gate.exceptions import InvalidInputException
from review_gate.models.review_models import SeverityFindings
from review_gate.utils.text import count_lines

logger = logging.getLogger(__name__)

MAX_REVIEW_LENGTH = 10_000
MAX_REVIEW_LINES = 1_000

# Evaluated top to bottom, first match wins. Plain substring checks only:
# review text is untrusted and must never reach a backtracking regex.
SEVERITY_KEYWORDS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    (
        "critical",
        ("security", "vulnerability", "sql injection", "xss", "critical bug", "data loss"),
    ),
    (
        "warnings",
        ("warning", "potential issue", "might fail", "edge case", "race condition"),
    ),
    (
        "suggestions",
        ("consider", "suggest", "recommend", "could be", "better to"),
    ),
)


def validate_review_text(text: object) -> str:
    """
    Reject review text that is not a non-empty, bounded string.

    Raises:
        InvalidInputException: naming the violated constraint
    """
    if not isinstance(text, str):
        raise InvalidInputException(
            "Invalid input: review comment must be a string",
            constraint="type",
            details={"received_type": type(text).__name__},
        )

    if not text.strip():
        raise InvalidInputException(
            "Invalid input: review comment cannot be empty", constraint="empty"
        )

    if len(text) > MAX_REVIEW_LENGTH:
        raise InvalidInputException(
            f"Invalid input: review comment exceeds maximum length of "
            f"{MAX_REVIEW_LENGTH} characters",
            constraint="max_length",
            details={"length": len(text)},
        )

    if count_lines(text, MAX_REVIEW_LINES) > MAX_REVIEW_LINES:
        raise InvalidInputException(
            f"Invalid input: review comment exceeds maximum of {MAX_REVIEW_LINES} lines",
            constraint="max_lines",
        )

    return text


def _match_severity(line: str) -> Optional[str]:
    lowered = line.lower()
    for category, keywords in SEVERITY_KEYWORDS:
        if any(keyword in lowered for keyword in keywords):
            return category
    return None


def deduplicate_findings(lines: Sequence[str]) -> Tuple[str, ...]:
    """
    Collapse lines that are equal after trimming and lower-casing.

    The longest original variant of each group is kept, in the position the
    group was first seen.
    """
    kept: Dict[str, str] = {}
    for line in lines:
        key = line.strip().lower()
        current = kept.get(key)
        if current is None or len(line) > len(current):
            kept[key] = line
    return tuple(kept.values())


def classify_review_severity(text: str) -> SeverityFindings:
    """
    Classify each line of a review comment as critical, warning or suggestion.

    Lines that match no keyword are dropped. Duplicate findings within a tier
    are collapsed so a single issue repeated many times counts once.

    Args:
        text: Review comment body

    Returns:
        SeverityFindings with de-duplicated lines per tier

    Raises:
        InvalidInputException: if the text is not a string, is blank, or is
            longer than MAX_REVIEW_LENGTH characters or MAX_REVIEW_LINES lines
    """
    validate_review_text(text)

    buckets: Dict[str, List[str]] = {category: [] for category, _ in SEVERITY_KEYWORDS}
    for line in text.split("\n"):
        if not line.strip():
            continue
        category = _match_severity(line)
        if category is not None:
            buckets[category].append(line)

    findings = SeverityFindings(
        critical=deduplicate_findings(buckets["critical"]),
        warnings=deduplicate_findings(buckets["warnings"]),
        suggestions=deduplicate_findings(buckets["suggestions"]),
    )

    logger.debug(
        f"Classified review: {len(findings.critical)} critical, "
        f"{len(findings.warnings)} warnings, {len(findings.suggestions)} suggestions",
        extra={"operation": "classify_review_severity", "findings": findings.total},
    )
    return findings
