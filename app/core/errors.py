from __future__ import annotations


class InvalidEmotion(ValueError):
    """Raised when a raw string does not name one of the supported emotions."""

    def __init__(self, raw: str | None, accepted: str):
        self.raw = raw
        self.accepted = accepted
        super().__init__(f"Invalid emotion value: '{raw}'. Accepted values: {accepted}")


class NoDataError(Exception):
    """The trailing window holds no check-ins, so there is nothing to analyze."""

    def __init__(self, message: str = "no check-ins in the trailing 7-day window to analyze"):
        super().__init__(message)


class ModelInferenceDegraded(Exception):
    """
    The summary model failed, timed out or returned an output we do not trust.
    Never leaves the analysis service; the rule-based fallback takes over.
    """


class ModelBuildError(RuntimeError):
    """Training the summary model failed at startup."""
