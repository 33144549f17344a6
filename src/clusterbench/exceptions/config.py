"""Settings errors: bad config files, values and plugin paths."""

from pathlib import Path
from typing import Any

from .base import ClusterBenchError


class ConfigurationError(ClusterBenchError):
    """Settings could not be loaded or do not describe a runnable benchmark."""

    pass


class InvalidPathError(ConfigurationError):
    """A configured file or folder is missing or unusable."""

    def __init__(self, path: Path, reason: str):
        super().__init__(f"{reason}: {path}", details={"path": path})
        self.path = path
        self.reason = reason


class InvalidConfigError(ConfigurationError):
    """A setting holds a value clusterbench cannot use."""

    def __init__(self, key: str, value: Any, reason: str):
        super().__init__(f"Invalid {key} = {value!r}: {reason}", details={"key": key})
        self.key = key
        self.value = value
        self.reason = reason
