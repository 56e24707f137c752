"""Graph algorithms over the index arena: reachability and cycles."""

from __future__ import annotations

from collections import deque
from typing import Iterable

import numpy as np

from .models import DependencyGraph


def reachable_marks(
    indptr: np.ndarray, targets: np.ndarray, seeds: Iterable[int], size: int
) -> np.ndarray:
    """Boolean mark vector of every node reachable from ``seeds`` (seeds included).

    BFS over a CSR adjacency; each node is enqueued at most once.
    """
    marks = np.zeros(size, dtype=bool)
    queue: deque[int] = deque()
    for seed in seeds:
        if not marks[seed]:
            marks[seed] = True
            queue.append(seed)
    while queue:
        node = queue.popleft()
        neighbours = targets[indptr[node] : indptr[node + 1]]
        fresh = neighbours[~marks[neighbours]]
        if fresh.size:
            marks[fresh] = True
            queue.extend(fresh.tolist())
    return marks


def tarjan_scc(graph: DependencyGraph) -> list[list[int]]:
    """Tarjan's algorithm for strongly connected components (iterative).

    Uses an explicit call stack to avoid Python recursion limits on deep
    import chains. Components come out in reverse topological order; members
    are listed in discovery order.
    """
    indptr, targets = graph.csr()
    size = len(graph)
    counter = 0
    scc_stack: list[int] = []
    on_stack = np.zeros(size, dtype=bool)
    index = np.full(size, -1, dtype=np.int64)
    lowlink = np.zeros(size, dtype=np.int64)
    result: list[list[int]] = []

    for root in range(size):
        if index[root] >= 0:
            continue

        index[root] = lowlink[root] = counter
        counter += 1
        scc_stack.append(root)
        on_stack[root] = True
        call_stack = [(root, iter(targets[indptr[root] : indptr[root + 1]].tolist()))]

        while call_stack:
            v, it = call_stack[-1]
            pushed = False
            for w in it:
                if index[w] < 0:
                    index[w] = lowlink[w] = counter
                    counter += 1
                    scc_stack.append(w)
                    on_stack[w] = True
                    call_stack.append((w, iter(targets[indptr[w] : indptr[w + 1]].tolist())))
                    pushed = True
                    break
                elif on_stack[w]:
                    lowlink[v] = min(lowlink[v], index[w])

            if not pushed:
                call_stack.pop()
                if call_stack:
                    caller = call_stack[-1][0]
                    lowlink[caller] = min(lowlink[caller], lowlink[v])

                if lowlink[v] == index[v]:
                    component: list[int] = []
                    while True:
                        w = scc_stack.pop()
                        on_stack[w] = False
                        component.append(w)
                        if w == v:
                            break
                    component.reverse()
                    result.append(component)

    return result


def find_cycles(graph: DependencyGraph) -> list[list[int]]:
    """Components that form an import cycle (more than one module)."""
    return [component for component in tarjan_scc(graph) if len(component) > 1]
