"""
Aggregate review metrics over a batch of reviews
"""

import logging
import math
from typing import Any, List, Mapping, Sequence, Union

from review_gate.exceptions import InvalidInputException
from review_gate.models.review_models import ReviewMetrics, ReviewRecord
from review_gate.services.severity_classifier import classify_review_severity

logger = logging.getLogger(__name__)

ReviewInput = Union[ReviewRecord, Mapping[str, Any]]


def _field(review: ReviewInput, name: str, index: int) -> Any:
    if isinstance(review, ReviewRecord):
        return getattr(review, name)
    if isinstance(review, Mapping):
        if name not in review:
            raise InvalidInputException(
                f"Invalid input: review {index} is missing '{name}'",
                constraint=name,
                details={"index": index},
            )
        return review[name]
    raise InvalidInputException(
        f"Invalid input: review {index} must be a ReviewRecord or mapping. "
        f"Received {type(review).__name__}",
        constraint="review",
        details={"index": index},
    )


def _validate_reviews(reviews: Any) -> List[ReviewRecord]:
    if not isinstance(reviews, (list, tuple)):
        raise InvalidInputException(
            "Invalid input: reviews must be a list or tuple",
            constraint="reviews",
            details={"received_type": type(reviews).__name__},
        )

    validated: List[ReviewRecord] = []
    for index, review in enumerate(reviews):
        approved = _field(review, "approved", index)
        if not isinstance(approved, bool):
            raise InvalidInputException(
                f"Invalid input: approved must be a boolean. "
                f"Received {type(approved).__name__}: {approved}",
                constraint="approved",
                details={"index": index},
            )

        elapsed_time = _field(review, "elapsed_time", index)
        if (
            isinstance(elapsed_time, bool)
            or not isinstance(elapsed_time, (int, float))
            or not math.isfinite(elapsed_time)
        ):
            raise InvalidInputException(
                f"Invalid input: elapsed_time must be a finite number. "
                f"Received {type(elapsed_time).__name__}: {elapsed_time}",
                constraint="elapsed_time",
                details={"index": index},
            )

        comment = _field(review, "comment", index)
        if isinstance(review, ReviewRecord):
            validated.append(review)
        else:
            # The classifier validates the comment itself
            validated.append(
                ReviewRecord.model_construct(
                    approved=approved, comment=comment, elapsed_time=float(elapsed_time)
                )
            )
    return validated


def aggregate_review_metrics(reviews: Sequence[ReviewInput]) -> ReviewMetrics:
    """
    Fold a batch of reviews into summary metrics.

    Every review is validated before anything is counted, so a bad row never
    produces a partial aggregate.

    Args:
        reviews: ReviewRecord instances or mappings with approved, comment and
            elapsed_time keys

    Raises:
        InvalidInputException: if the batch or any review is malformed,
            including comments rejected by the severity classifier
    """
    records = _validate_reviews(reviews)
    findings = [classify_review_severity(record.comment) for record in records]

    total = len(records)
    approved_count = sum(1 for record in records if record.approved)
    total_time = sum(record.elapsed_time for record in records)

    metrics = ReviewMetrics(
        total_reviews=total,
        critical_issues=sum(len(f.critical) for f in findings),
        warnings=sum(len(f.warnings) for f in findings),
        suggestions=sum(len(f.suggestions) for f in findings),
        approval_rate=approved_count / total if total else 0.0,
        average_review_time=total_time / total if total else 0.0,
    )

    logger.info(
        f"Aggregated metrics for {total} reviews",
        extra={"operation": "aggregate_review_metrics", "total_reviews": total},
    )
    return metrics
