"""Experiment commands: namespaces, projects, ablate, compare, prepare."""

from contextlib import contextmanager
from pathlib import Path
from typing import Callable, Iterator, Optional

import typer

from ..benchmarking.harness import SolutionBenchmark
from ..benchmarking.results import PerSolutionResultsContainer
from ..config import BenchmarkSettings
from ..exceptions import ClusterBenchError, ConfigurationError
from ..logging_config import get_logger, setup_logging
from . import app
from ._common import (
    console,
    load_backend,
    load_configs,
    output_results,
    pick_config,
    resolve_settings,
)

logger = get_logger(__name__)

ConfigOption = typer.Option(
    None,
    "--config",
    "-c",
    help="Configuration file (TOML)",
    exists=True,
    file_okay=True,
    dir_okay=False,
    readable=True,
)
RerunsOption = typer.Option(
    None, "--reruns", "-r", help="Runs per configuration (default from config)", min=1
)
WorkersOption = typer.Option(
    None, "--workers", "-w", help="Thread pool size for concurrent reruns", min=1, max=64
)
JsonOption = typer.Option(False, "--json", help="Output in machine-readable JSON format")
VerboseOption = typer.Option(False, "--verbose", "-v", help="Log every run")
QuietOption = typer.Option(False, "--quiet", "-q", help="Only log errors")


@contextmanager
def _reported_errors() -> Iterator[None]:
    """Turn errors escaping a command into a message and an exit code."""
    try:
        yield

    except typer.Exit:
        raise

    except ClusterBenchError as e:
        logger.error(f"{e.__class__.__name__}: {e}")
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        console.print("\n[yellow]Interrupted[/yellow]")
        raise typer.Exit(130)

    except Exception as e:
        logger.exception("Unexpected error")
        console.print(f"[red]Unexpected error:[/red] {e}")
        raise typer.Exit(1)


def _execute(
    title: str,
    experiment: Callable[[SolutionBenchmark, BenchmarkSettings], PerSolutionResultsContainer],
    config: Optional[Path],
    reruns: Optional[int],
    workers: Optional[int],
    json_output: bool,
    verbose: bool,
    quiet: bool,
) -> None:
    """Load settings and backend, run one experiment and print its results."""
    with _reported_errors():
        settings = resolve_settings(
            config=config, reruns=reruns, workers=workers, verbose=verbose, quiet=quiet
        )
        setup_logging(settings.verbosity, settings.log_file)
        if not settings.repositories:
            raise ConfigurationError("No repositories configured ([[repositories]] tables)")

        harness = SolutionBenchmark(load_backend(settings), settings)
        results = experiment(harness, settings)
        output_results(results, title, as_json=json_output)


@app.command()
def namespaces(
    config: Optional[Path] = ConfigOption,
    reruns: Optional[int] = RerunsOption,
    json_output: bool = JsonOption,
    verbose: bool = VerboseOption,
    quiet: bool = QuietOption,
):
    """
    Benchmark namespace recovery, one project at a time.

    [bold cyan]Examples:[/bold cyan]

      clusterbench namespaces -c bench.toml --reruns 10
    """

    def experiment(harness: SolutionBenchmark, settings: BenchmarkSettings):
        return harness.bench_namespace_recovery(load_configs(settings), settings.repositories)

    _execute("Namespace recovery", experiment, config, reruns, None, json_output, verbose, quiet)


@app.command()
def projects(
    config: Optional[Path] = ConfigOption,
    reruns: Optional[int] = RerunsOption,
    workers: Optional[int] = WorkersOption,
    json_output: bool = JsonOption,
    verbose: bool = VerboseOption,
    quiet: bool = QuietOption,
):
    """
    Benchmark project recovery on each solution-wide namespace graph.
    """

    def experiment(harness: SolutionBenchmark, settings: BenchmarkSettings):
        return harness.bench_project_recovery(load_configs(settings), settings.repositories)

    _execute("Project recovery", experiment, config, reruns, workers, json_output, verbose, quiet)


@app.command()
def ablate(
    fraction: float = typer.Option(
        ..., "--fraction", "-f", help="Share of each cluster's edges to keep", min=0.0, max=1.0
    ),
    name: Optional[str] = typer.Option(
        None, "--name", "-n", help="Configuration to run (default: the first one)"
    ),
    config: Optional[Path] = ConfigOption,
    reruns: Optional[int] = RerunsOption,
    workers: Optional[int] = WorkersOption,
    json_output: bool = JsonOption,
    verbose: bool = VerboseOption,
    quiet: bool = QuietOption,
):
    """
    Benchmark project recovery with part of the dependency edges removed.

    [bold cyan]Examples:[/bold cyan]

      clusterbench ablate -f 0.5 -n "Louvain" -c bench.toml
    """

    def experiment(harness: SolutionBenchmark, settings: BenchmarkSettings):
        selected = pick_config(load_configs(settings), name)
        return harness.bench_project_recovery_with_removed_data(
            selected, settings.repositories, dependency_multiplier=fraction
        )

    _execute("Ablated project recovery", experiment, config, reruns, workers, json_output, verbose, quiet)


@app.command()
def compare(
    first: str = typer.Argument(..., help="Name of the first configuration"),
    second: str = typer.Argument(..., help="Name of the second configuration"),
    label: Optional[str] = typer.Option(None, "--label", "-l", help="Name for the result row"),
    config: Optional[Path] = ConfigOption,
    reruns: Optional[int] = RerunsOption,
    workers: Optional[int] = WorkersOption,
    json_output: bool = JsonOption,
    verbose: bool = VerboseOption,
    quiet: bool = QuietOption,
):
    """
    Measure how closely two clustering algorithms agree on each solution.

    The cutting algorithm and similarity metric of FIRST are used for both.
    """

    def experiment(harness: SolutionBenchmark, settings: BenchmarkSettings):
        configs = load_configs(settings)
        return harness.compare_project_recovery(
            pick_config(configs, first),
            pick_config(configs, second),
            settings.repositories,
            label=label,
        )

    _execute("Algorithm agreement", experiment, config, reruns, workers, json_output, verbose, quiet)


@app.command()
def prepare(
    config: Optional[Path] = ConfigOption,
    verbose: bool = VerboseOption,
    quiet: bool = QuietOption,
):
    """
    Materialise every configured repository into the parsed-data layout.
    """
    with _reported_errors():
        settings = resolve_settings(config=config, verbose=verbose, quiet=quiet)
        setup_logging(settings.verbosity, settings.log_file)
        harness = SolutionBenchmark(load_backend(settings), settings)
        for repository in settings.repositories:
            harness.prepare(repository)
            if not quiet:
                console.print(f"  Prepared [green]{repository}[/green]")
