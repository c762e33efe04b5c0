"""Memory source API client."""

from .client import APIError, FetchFailed, MemorySourceClient, SubmissionFailed

__all__ = ["APIError", "FetchFailed", "MemorySourceClient", "SubmissionFailed"]
