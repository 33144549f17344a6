"""Base exception for clusterbench."""

from typing import Any, Mapping, Optional


class ClusterBenchError(Exception):
    """Root of every error clusterbench raises on purpose.

    ``details`` holds short key/value context (repository, algorithm,
    location). Values are stored as strings so an error renders the same in a
    log file, a rich console and a JSON report.
    """

    def __init__(self, message: str, details: Optional[Mapping[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = {key: str(value) for key, value in (details or {}).items()}

    def __str__(self) -> str:
        if not self.details:
            return self.message
        context = ", ".join(f"{key}={value}" for key, value in self.details.items())
        return f"{self.message} ({context})"
