"""Shared test fixtures: small solution trees, fake strategies and backends."""

import threading
from pathlib import Path

import pytest

from clusterbench.benchmarking.config import BenchmarkConfig
from clusterbench.benchmarking.results import BenchMarkResult
from clusterbench.config import BenchmarkSettings
from clusterbench.graph.builder import ClusterLevel, DependencyTree, root_namespaces
from clusterbench.solution.nodes import Node, ProjectDescriptor
from clusterbench.solution.repository import Repository


def pytest_addoption(parser):
    """Add --run-slow option for slow tests."""
    parser.addoption(
        "--run-slow",
        action="store_true",
        default=False,
        help="run slow tests",
    )


def pytest_configure(config):
    """Configure slow marker."""
    config.addinivalue_line("markers", "slow: mark test as slow to run")


def pytest_collection_modifyitems(config, items):
    """Skip slow tests unless --run-slow is given."""
    if config.getoption("--run-slow"):
        return
    skip_slow = pytest.mark.skip(reason="need --run-slow option to run")
    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip_slow)


# ── Fake strategies ────────────────────────────────────────────────


class ConstantSimilarity:
    def similarity(self, a, b, graph):
        return 1.0


class GroundTruthClustering:
    """Recovers the ground truth exactly; counts its own calls."""

    def __init__(self):
        self.calls = 0

    def cluster(self, graph, similarity):
        self.calls += 1
        groups = {}
        for node in graph.clusters:
            groups.setdefault(graph.ground_truth[node], []).append(node)
        return Node.cluster([Node.cluster(members) for members in groups.values()], name="root")


class SingletonClustering:
    """Puts every cluster in a group of its own."""

    def cluster(self, graph, similarity):
        return Node.cluster([Node.cluster([node]) for node in graph.clusters], name="root")


class TopLevelCut:
    """One group per child of the root."""

    def cut(self, tree):
        return [frozenset(child.members()) for child in tree.children]


class LosingCut:
    """Forgets the last group; never a valid partition."""

    def cut(self, tree):
        return [frozenset(child.members()) for child in tree.children[:-1]]


# ── Fake backend ───────────────────────────────────────────────────


class ScriptedBackend:
    """Backend returning pre-set scores in call order and recording calls."""

    def __init__(self, trees_by_folder=None, projects_by_folder=None, scores=None, fail_on_call=None):
        self.trees_by_folder = trees_by_folder or {}
        self.projects_by_folder = projects_by_folder or {}
        self.scores = list(scores or [])
        self.fail_on_call = fail_on_call
        self.run_calls = []
        self.compare_calls = []
        self.levels = []
        self.graphs = []
        self.prepared = []
        self._calls = 0
        self._lock = threading.Lock()

    def _next_score(self):
        with self._lock:
            index = self._calls
            self._calls += 1
            if self.fail_on_call is not None and index == self.fail_on_call:
                raise RuntimeError("algorithm exploded")
            score = self.scores[index % len(self.scores)] if self.scores else 0.5
            return index, score

    def load_project_graphs_in_folder(self, folder):
        return self.projects_by_folder.get(Path(folder), [])

    def complete_tree_with_dependencies(self, folder):
        return self.trees_by_folder[Path(folder)]

    def root_namespaces(self, tree, level):
        self.levels.append(level)
        graph = root_namespaces(tree, level)
        self.graphs.append(graph)
        return graph

    def run_configuration(self, config, graph):
        _, score = self._next_score()
        with self._lock:
            self.run_calls.append((config, graph))
        return BenchMarkResult(score)

    def compare_two_algorithms(self, clustering_a, clustering_b, cutting, similarity, graph):
        _, score = self._next_score()
        with self._lock:
            self.compare_calls.append((clustering_a, clustering_b, cutting, similarity, graph))
        return BenchMarkResult(score)

    def prepare_repository(self, source, destination):
        self.prepared.append((source, destination))


# ── Trees ──────────────────────────────────────────────────────────


def make_project(name, layout):
    """Build a project from {namespace: [class names]}."""
    namespaces = [
        Node.namespace(ns, [Node.class_(cls) for cls in classes]) for ns, classes in layout.items()
    ]
    return Node.project(ProjectDescriptor(name=name), namespaces)


def class_named(tree, name):
    return next(node for node in tree.classes() if node.name == name)


@pytest.fixture
def two_namespace_tree():
    """One project, two namespaces with two classes each, one cross-namespace edge."""
    project = make_project("App", {"Core": ["Engine", "Gear"], "Ui": ["Window", "Button"]})
    tree = DependencyTree("App", [project])
    engine, window = class_named(tree, "Engine"), class_named(tree, "Window")
    return DependencyTree("App", [project], {window: (engine,)})


@pytest.fixture
def solution_tree():
    """Two projects; namespaces depend on each other within and across projects."""
    app = make_project("App", {"App.Ui": ["Window", "Button"], "App.Cli": ["Shell"]})
    lib = make_project("Lib", {"Lib.Core": ["Engine", "Gear"], "Lib.Io": ["Reader", "Writer"]})
    bare = DependencyTree("Solution", [app, lib])

    def c(name):
        return class_named(bare, name)

    edges = {
        c("Window"): (c("Button"), c("Engine"), c("Reader"), c("Shell")),
        c("Shell"): (c("Engine"), c("Writer")),
        c("Engine"): (c("Gear"), c("Reader"), c("Writer")),
        c("Reader"): (c("Gear"),),
    }
    return DependencyTree("Solution", [app, lib], edges)


@pytest.fixture
def namespace_graph(solution_tree):
    return root_namespaces(solution_tree, ClusterLevel.NAMESPACE)


# ── Harness plumbing ───────────────────────────────────────────────


@pytest.fixture
def repository():
    return Repository(owner="acme", name="widgets", solution="Widgets.sln")


@pytest.fixture
def settings(tmp_path):
    return BenchmarkSettings(
        parsed_data_location=str(tmp_path / "parsed"),
        repo_locations=str(tmp_path / "repos"),
        reruns_per_config=3,
        max_workers=4,
    )


@pytest.fixture
def data_folder(settings, repository):
    folder = repository.parsed_location(settings.parsed_data_path)
    folder.mkdir(parents=True)
    return folder


@pytest.fixture
def perfect_config():
    return BenchmarkConfig("Perfect", GroundTruthClustering(), TopLevelCut(), ConstantSimilarity())


@pytest.fixture
def singleton_config():
    return BenchmarkConfig("Singleton", SingletonClustering(), TopLevelCut(), ConstantSimilarity())


@pytest.fixture
def broken_config():
    return BenchmarkConfig("Broken", GroundTruthClustering(), LosingCut(), ConstantSimilarity())


@pytest.fixture
def scripted_backend():
    return ScriptedBackend
