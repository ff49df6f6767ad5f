from __future__ import annotations


class AnalysisError(Exception):
    """Base class for failures surfaced by the analysis pipeline."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidInput(AnalysisError):
    pass


class MalformedResponse(AnalysisError):
    pass


class ProviderError(AnalysisError):
    pass


class NotesBackendError(Exception):
    """Non-2xx (or unreachable) notes REST backend."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
