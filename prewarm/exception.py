"""
Custom exceptions for the prewarm package.

This module defines a hierarchy of exceptions used throughout the codebase
to provide clear error handling and better debugging information.
"""

from typing import Optional


class PrewarmError(Exception):
    """
    Base exception for all prewarm-related errors.

    All custom exceptions in the package should inherit from this class
    to allow for catch-all error handling when needed.
    """
    pass


class ConfigurationError(PrewarmError):
    """
    Raised when there's an issue with configuration.

    Examples:
        - Negative cooldown period
        - Non-positive poll interval
        - Unknown keys passed to a config update
    """
    pass


class WarmingError(PrewarmError):
    """
    Base class for failures of a single warm cycle.

    These are never raised out of the scheduler; they are handed to the
    error hook instead.
    """
    pass


class HttpStatusError(WarmingError):
    """
    Raised when the warm creation request returns a non-success status.
    """

    def __init__(self, status: int, message: Optional[str] = None):
        self.status = status
        super().__init__(message or f"Warming failed: {status}")


class PollFetchError(WarmingError):
    """
    Raised when the prediction status check request fails.
    """

    def __init__(self, status: Optional[int] = None):
        self.status = status
        super().__init__("Failed to check warming prediction status")


class PredictionFailedError(WarmingError):
    """
    Raised when the warming prediction reaches the failed terminal state.
    """

    def __init__(self, prediction_id: Optional[str], error: Optional[str] = None):
        self.prediction_id = prediction_id
        self.error = error or "Unknown error"
        super().__init__(f"Warming prediction failed: {self.error}")


class PollTimeoutError(WarmingError):
    """
    Raised when the optional poll bound is exhausted before a terminal state.
    """

    def __init__(self, prediction_id: Optional[str], polls: int):
        self.prediction_id = prediction_id
        self.polls = polls
        super().__init__(
            f"Warming prediction {prediction_id} not terminal after {polls} status checks"
        )


class UnexpectedError(WarmingError):
    """
    Wraps any other failure raised during a warm cycle (network errors, bad JSON, ...).
    """

    def __init__(self, original: BaseException):
        self.original = original
        super().__init__(str(original) or original.__class__.__name__)
