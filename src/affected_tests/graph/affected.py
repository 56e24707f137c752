"""Affected-set computation over a built import graph.

An entry is affected when its reachability closure (itself included)
contains a changed module. Two strategies give identical answers:

    reverse   one BFS over reversed edges seeded with every changed module;
              marks everything that transitively imports a change (default)
    forward   one BFS per entry over import edges, stopping at the first
              changed module found

Changed files that never appear in the graph (unrelated, or deleted and
no longer imported by anything) simply match nothing.
"""

from __future__ import annotations

from typing import Iterable, Literal, Sequence

import numpy as np

from ..logging_config import get_logger
from ..models import AffectedResult, ModuleId, ResolutionError
from .algorithms import reachable_marks
from .models import DependencyGraph

logger = get_logger(__name__)

Strategy = Literal["reverse", "forward"]


def _changed_indices(graph: DependencyGraph, changed: Iterable[ModuleId]) -> list[int]:
    indices = []
    for module_id in changed:
        index = graph.index_of(module_id)
        if index is not None:
            indices.append(index)
    return indices


def affected_entries_reverse(
    graph: DependencyGraph, entries: Sequence[int], changed: Sequence[int]
) -> list[int]:
    indptr, importers = graph.csr(reverse=True)
    marks = reachable_marks(indptr, importers, changed, len(graph))
    return [e for e in entries if marks[e]]


def affected_entries_forward(
    graph: DependencyGraph, entries: Sequence[int], changed: Sequence[int]
) -> list[int]:
    indptr, imports = graph.csr()
    is_changed = np.zeros(len(graph), dtype=bool)
    is_changed[list(changed)] = True

    affected = []
    for entry in entries:
        seen = np.zeros(len(graph), dtype=bool)
        seen[entry] = True
        stack = [entry]
        while stack:
            node = stack.pop()
            if is_changed[node]:
                affected.append(entry)
                break
            neighbours = imports[indptr[node] : indptr[node + 1]]
            fresh = neighbours[~seen[neighbours]]
            seen[fresh] = True
            stack.extend(fresh.tolist())
    return affected


def compute_affected(
    graph: DependencyGraph,
    entries: Sequence[int],
    changed: Iterable[ModuleId],
    errors: Sequence[ResolutionError] = (),
    strategy: Strategy = "reverse",
) -> AffectedResult:
    """Select the entries whose closure intersects ``changed``.

    Args:
        graph: Built import graph
        entries: Graph indices of the test entries
        changed: Canonical ids of changed files
        errors: Records collected while building, passed through untouched
        strategy: "reverse" or "forward"; results are identical

    Returns:
        AffectedResult with deduplicated entry paths and all errors
    """
    changed_indices = _changed_indices(graph, changed)
    if not changed_indices:
        selected: list[int] = []
    elif strategy == "reverse":
        selected = affected_entries_reverse(graph, entries, changed_indices)
    elif strategy == "forward":
        selected = affected_entries_forward(graph, entries, changed_indices)
    else:
        raise ValueError(f"Unknown strategy {strategy!r}")

    files = list(dict.fromkeys(graph.nodes[i] for i in selected))
    logger.info(
        f"{len(files)}/{len(entries)} entries affected by "
        f"{len(changed_indices)} changed module(s) present in the graph"
    )
    return AffectedResult(files=files, errors=list(errors))
