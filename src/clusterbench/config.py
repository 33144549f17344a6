"""Configuration loading and management for clusterbench.

Configuration sources are merged in priority order:
    1. Defaults (defined in BenchmarkSettings)
    2. Global config (~/.clusterbench.toml)
    3. Project config (./clusterbench.toml)
    4. Explicit config file
    5. Environment variables (CLUSTERBENCH_* prefix)
    6. CLI overrides (passed as kwargs)

A config file looks like::

    parsed_data_location = "data/parsed"
    repo_locations = "data/repos"
    reruns_per_config = 10
    backend = "mybench.backends:make_backend"
    configs = "mybench.configs:CONFIGS"

    [[repositories]]
    owner = "dotnet"
    name = "roslyn"
    solution = "Roslyn.sln"

Example:
    >>> settings = load_settings(reruns_per_config=3)
    >>> settings.reruns_per_config
    3
"""

from __future__ import annotations

import importlib
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Literal, Optional

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from .exceptions import ConfigurationError, InvalidConfigError, InvalidPathError
from .solution.repository import Repository

Verbosity = Literal["quiet", "normal", "verbose"]

ENV_PREFIX = "CLUSTERBENCH_"


@dataclass(frozen=True)
class BenchmarkSettings:
    """Settings for a benchmark session.

    Attributes:
        Data locations:
            parsed_data_location: Root of parsed data, laid out as owner/name/
            repo_locations: Root of checked-out repositories, laid out as name/solution

        Experiment control:
            reruns_per_config: Repeated runs averaged into one score
            max_workers: Thread pool size for concurrent reruns (None = executor default)

        Plugins:
            backend: Dotted ``module:attr`` path of a backend or backend factory
            configs: Dotted ``module:attr`` path of benchmark configurations

        Output control:
            verbosity: Logging verbosity level
            log_file: Also append log records to this file
    """

    # Data locations
    parsed_data_location: str = "parsed"
    repo_locations: str = "repos"

    # Experiment control
    reruns_per_config: int = 5
    max_workers: Optional[int] = None

    # Plugins
    backend: Optional[str] = None
    configs: Optional[str] = None

    # Output control
    verbosity: Verbosity = "normal"
    log_file: Optional[str] = None

    repositories: tuple[Repository, ...] = ()

    def __post_init__(self) -> None:
        """Validate settings after initialization."""
        if self.reruns_per_config < 1:
            raise ValueError("reruns_per_config must be at least 1")
        if self.max_workers is not None and self.max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        if self.verbosity not in ("quiet", "normal", "verbose"):
            raise ValueError("verbosity must be one of quiet, normal, verbose")
        object.__setattr__(self, "repositories", tuple(self.repositories))

    @property
    def parsed_data_path(self) -> Path:
        return Path(self.parsed_data_location).expanduser()

    @property
    def repo_path(self) -> Path:
        return Path(self.repo_locations).expanduser()


def load_settings(config_file: Optional[Path] = None, **overrides) -> BenchmarkSettings:
    """Load settings with auto-discovery and merging.

    Args:
        config_file: Optional explicit config file path
        **overrides: Direct overrides (typically from CLI flags); ``None``
            values are ignored and ``verbose``/``quiet`` set the verbosity

    Returns:
        Validated BenchmarkSettings instance

    Raises:
        InvalidPathError: If ``config_file`` does not exist
        ConfigurationError: If any source holds an unknown key or a bad value
    """
    sources = [Path.home() / ".clusterbench.toml", Path.cwd() / "clusterbench.toml"]
    merged: dict = {}
    for source in sources:
        if source.is_file():
            merged.update(_load_toml_file(source))

    if config_file is not None:
        if not config_file.is_file():
            raise InvalidPathError(config_file, "config file not found")
        merged.update(_load_toml_file(config_file))

    merged.update(_load_env_vars())

    if overrides.pop("quiet", False):
        overrides["verbosity"] = "quiet"
    elif overrides.pop("verbose", False):
        overrides["verbosity"] = "verbose"
    merged.update((key, value) for key, value in overrides.items() if value is not None)

    if "repositories" in merged:
        merged["repositories"] = _parse_repositories(merged["repositories"])

    try:
        return BenchmarkSettings(**merged)
    except TypeError as e:
        # Unknown key in a config file
        raise ConfigurationError(f"Invalid configuration: {e}")
    except ValueError as e:
        raise ConfigurationError(str(e))


def _parse_repositories(entries: Any) -> tuple[Repository, ...]:
    """Turn ``[[repositories]]`` tables into Repository values."""
    if not isinstance(entries, (list, tuple)):
        raise InvalidConfigError("repositories", entries, "expected an array of tables")

    repositories = []
    for entry in entries:
        if isinstance(entry, Repository):
            repositories.append(entry)
            continue
        try:
            repositories.append(
                Repository(owner=entry["owner"], name=entry["name"], solution=entry["solution"])
            )
        except (KeyError, TypeError):
            raise InvalidConfigError(
                "repositories", entry, "each entry needs owner, name and solution"
            )
    return tuple(repositories)


_INT_FIELDS = frozenset({"reruns_per_config", "max_workers"})


def _load_env_vars() -> dict[str, Any]:
    """Read ``CLUSTERBENCH_<FIELD>`` variables, e.g. ``CLUSTERBENCH_RERUNS_PER_CONFIG=10``.

    Repositories can only come from config files.
    """
    values: dict[str, Any] = {}
    for name in BenchmarkSettings.__dataclass_fields__:
        if name == "repositories":
            continue
        key = f"{ENV_PREFIX}{name.upper()}"
        raw = os.environ.get(key)
        if raw is None:
            continue
        if name in _INT_FIELDS:
            try:
                values[name] = int(raw)
            except ValueError:
                raise InvalidConfigError(key, raw, "expected an integer")
        else:
            values[name] = raw
    return values


def _load_toml_file(path: Path) -> dict:
    """Parse one TOML config file.

    Raises:
        ConfigurationError: If the file cannot be read or is not valid TOML
    """
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigurationError(f"Invalid config file '{path}': {e}")


def import_object(dotted_path: str) -> Any:
    """Resolve a ``package.module:attribute`` path to the object it names."""
    module_name, sep, attribute = dotted_path.partition(":")
    if not sep or not module_name or not attribute:
        raise InvalidConfigError("plugin", dotted_path, "expected 'module:attribute'")
    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise InvalidConfigError("plugin", dotted_path, f"cannot import module: {e}")

    target: Any = module
    for part in attribute.split("."):
        try:
            target = getattr(target, part)
        except AttributeError:
            raise InvalidConfigError("plugin", dotted_path, f"no attribute '{part}'")
    return target
