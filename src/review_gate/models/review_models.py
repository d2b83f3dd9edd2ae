"""
Data models for review scoring operations
"""

from typing import Literal, Tuple

from pydantic import BaseModel, ConfigDict, Field

QualityCategory = Literal["excellent", "good", "needs-improvement", "critical"]


class SeverityFindings(BaseModel):
    """Review lines grouped by severity tier, de-duplicated per tier"""

    model_config = ConfigDict(frozen=True)

    critical: Tuple[str, ...] = Field(
        default=(), description="Lines flagging security issues or critical bugs"
    )
    warnings: Tuple[str, ...] = Field(
        default=(), description="Lines flagging potential issues"
    )
    suggestions: Tuple[str, ...] = Field(
        default=(), description="Lines proposing improvements"
    )

    @property
    def total(self) -> int:
        return len(self.critical) + len(self.warnings) + len(self.suggestions)


class QualityBreakdown(BaseModel):
    """Per-dimension quality scores, each independent of the overall score"""

    model_config = ConfigDict(frozen=True)

    security: int = Field(..., ge=0, le=100)
    maintainability: int = Field(..., ge=0, le=100)
    performance: int = Field(..., ge=0, le=100)
    testability: int = Field(..., ge=0, le=100)


class CodeQualityScore(BaseModel):
    """Bounded quality score with its category and breakdown"""

    model_config = ConfigDict(frozen=True)

    score: int = Field(..., ge=0, le=100, description="Overall quality score")
    category: QualityCategory = Field(..., description="Category derived from score")
    breakdown: QualityBreakdown


class ReviewRecord(BaseModel):
    """A single completed review fed into metrics aggregation"""

    model_config = ConfigDict(frozen=True, strict=True)

    approved: bool
    comment: str
    elapsed_time: float = Field(..., allow_inf_nan=False)


class ReviewMetrics(BaseModel):
    """Summary statistics over a batch of reviews"""

    model_config = ConfigDict(frozen=True)

    total_reviews: int = 0
    critical_issues: int = 0
    warnings: int = 0
    suggestions: int = 0
    approval_rate: float = 0.0
    average_review_time: float = 0.0
