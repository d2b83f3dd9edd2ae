"""
Custom exception hierarchy for the review gate
"""

from typing import Optional, Dict, Any


class ReviewGateException(Exception):
    """Base exception for all review gate errors"""

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        original_error: Optional[Exception] = None
    ):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.original_error = original_error

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} - Details: {self.details}"
        return self.message


class InvalidInputException(ReviewGateException):
    """Malformed, oversized or empty input rejected before processing"""

    def __init__(
        self,
        message: str,
        constraint: Optional[str] = None,
        **kwargs
    ):
        details = kwargs.get('details', {})
        if constraint:
            details['constraint'] = constraint

        super().__init__(message, details, kwargs.get('original_error'))
        self.constraint = constraint


class SecurityException(ReviewGateException):
    """Forbidden operation, e.g. an approval claim without verified authorization"""

    def __init__(
        self,
        message: str,
        security_context: Optional[str] = None,
        **kwargs
    ):
        details = kwargs.get('details', {})
        if security_context:
            details['security_context'] = security_context

        super().__init__(message, details, kwargs.get('original_error'))
        self.security_context = security_context
