"""Shared CLI helpers: settings, plugin resolution and result display."""

import json
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.table import Table

from ..benchmarking.backend import BenchmarkBackend
from ..benchmarking.config import BenchmarkConfig
from ..benchmarking.results import PerSolutionResultsContainer
from ..config import BenchmarkSettings, import_object, load_settings
from ..exceptions import ConfigurationError, InvalidConfigError

console = Console()


def resolve_settings(
    config: Optional[Path] = None,
    reruns: Optional[int] = None,
    workers: Optional[int] = None,
    verbose: bool = False,
    quiet: bool = False,
) -> BenchmarkSettings:
    """Build settings from CLI options."""
    overrides = {}
    if reruns is not None:
        overrides["reruns_per_config"] = reruns
    if workers is not None:
        overrides["max_workers"] = workers
    if verbose:
        overrides["verbose"] = True
    if quiet:
        overrides["quiet"] = True
    return load_settings(config_file=config, **overrides)


def load_backend(settings: BenchmarkSettings) -> BenchmarkBackend:
    """Instantiate the backend named by ``settings.backend``.

    The dotted path may name a backend instance or a zero-argument factory
    (a class or a function) returning one.
    """
    if not settings.backend:
        raise ConfigurationError("No backend configured (set 'backend' in clusterbench.toml)")
    backend = import_object(settings.backend)
    # Classes satisfy the runtime protocol check too, so test for them first
    if isinstance(backend, type) or (callable(backend) and not isinstance(backend, BenchmarkBackend)):
        backend = backend()
    if not isinstance(backend, BenchmarkBackend):
        raise InvalidConfigError("backend", settings.backend, "does not implement BenchmarkBackend")
    return backend


def load_configs(settings: BenchmarkSettings) -> list[BenchmarkConfig]:
    """Resolve ``settings.configs`` to a non-empty list of configurations."""
    if not settings.configs:
        raise ConfigurationError("No configs configured (set 'configs' in clusterbench.toml)")
    target = import_object(settings.configs)
    configs = list(target() if callable(target) else target)
    if not configs or not all(isinstance(c, BenchmarkConfig) for c in configs):
        raise InvalidConfigError("configs", settings.configs, "expected BenchmarkConfig objects")
    return configs


def pick_config(configs: list[BenchmarkConfig], name: Optional[str]) -> BenchmarkConfig:
    """Select a configuration by display name (first one when name is None)."""
    if name is None:
        return configs[0]
    for config in configs:
        if config.name == name:
            return config
    known = ", ".join(c.name for c in configs)
    raise InvalidConfigError("config", name, f"unknown configuration (known: {known})")


def results_to_dict(results: PerSolutionResultsContainer) -> dict:
    return {
        "reruns_per_config": results.reruns_per_config,
        "results": [
            {
                "repository": str(repository),
                "config": config.name,
                "score": round(result.score, 4),
                "metrics": {k: round(v, 4) for k, v in result.metrics.items()},
            }
            for repository, config, result in results.rows()
        ],
    }


def output_results(results: PerSolutionResultsContainer, title: str, as_json: bool = False) -> None:
    """Print averaged scores as a rich table, or as JSON."""
    if as_json:
        console.print_json(json.dumps(results_to_dict(results)))
        return

    table = Table(title=f"{title} ({results.reruns_per_config} runs per config)")
    table.add_column("Repository", style="cyan")
    table.add_column("Configuration", style="magenta")
    table.add_column("Score", justify="right", style="green")
    metric_names = sorted({name for _, _, r in results.rows() for name in r.metrics})
    for name in metric_names:
        table.add_column(name, justify="right")

    for repository, config, result in results.rows():
        metrics = [
            f"{result.metrics[name]:.3f}" if name in result.metrics else "-"
            for name in metric_names
        ]
        table.add_row(str(repository), config.name, f"{result.score:.4f}", *metrics)

    console.print(table)
