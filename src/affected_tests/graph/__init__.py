"""Import graph: construction, algorithms and affected-set computation."""

from .affected import compute_affected
from .algorithms import find_cycles, reachable_marks, tarjan_scc
from .builder import BuildResult, DependencyGraphBuilder, build_dependency_graph
from .models import DependencyGraph

__all__ = [
    "DependencyGraph",
    "DependencyGraphBuilder",
    "BuildResult",
    "build_dependency_graph",
    "compute_affected",
    "find_cycles",
    "reachable_marks",
    "tarjan_scc",
]
