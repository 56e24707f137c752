"""Dependency graph as an arena of indices.

Each ModuleId gets a stable integer index on first discovery. Edges are
stored as index pairs, so import cycles never become object cycles, and
the scanned marks are a bitset over indices.

Edges are directed: (a, b) means module a imports module b.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from threading import Lock
from typing import Optional

import numpy as np

from ..models import ModuleId


@dataclass
class DependencyGraph:
    """Import graph owned by one affected-test computation.

    Attributes:
        nodes: ModuleId per index
        edges: (importer, imported) index pairs, unique
        leaves: Indices deliberately not scanned (non-source files, module
            directories); they still take part in reachability
    """

    nodes: list[ModuleId] = field(default_factory=list)
    edges: list[tuple[int, int]] = field(default_factory=list)
    leaves: set[int] = field(default_factory=set)

    _index: dict[str, int] = field(default_factory=dict, repr=False, compare=False)
    _edge_set: set[tuple[int, int]] = field(default_factory=set, repr=False, compare=False)
    _scanned: bytearray = field(default_factory=bytearray, repr=False, compare=False)
    _lock: Lock = field(default_factory=Lock, repr=False, compare=False)

    def __len__(self) -> int:
        return len(self.nodes)

    def __contains__(self, module_id: object) -> bool:
        return module_id in self._index

    @property
    def edge_count(self) -> int:
        return len(self.edges)

    def index_of(self, module_id: str) -> Optional[int]:
        return self._index.get(module_id)

    def add_node(self, module_id: ModuleId) -> int:
        """Index for ``module_id``, assigning the next one on first sight."""
        with self._lock:
            index = self._index.get(module_id)
            if index is None:
                index = len(self.nodes)
                self._index[module_id] = index
                self.nodes.append(module_id)
                self._scanned.append(0)
            return index

    def add_edge(self, importer: int, imported: int) -> bool:
        """Add ``importer -> imported``; False if it was already present."""
        edge = (importer, imported)
        with self._lock:
            if edge in self._edge_set:
                return False
            self._edge_set.add(edge)
            self.edges.append(edge)
            return True

    def mark_scanned(self, index: int) -> bool:
        """Compare-and-set the scanned bit. True only for the first caller."""
        with self._lock:
            if self._scanned[index]:
                return False
            self._scanned[index] = 1
            return True

    def is_scanned(self, index: int) -> bool:
        return bool(self._scanned[index])

    @property
    def scanned_count(self) -> int:
        return sum(self._scanned)

    def adjacency(self) -> dict[ModuleId, list[ModuleId]]:
        """Plain ``importer -> [imported]`` mapping, for display and tests."""
        result: dict[ModuleId, list[ModuleId]] = {m: [] for m in self.nodes}
        for importer, imported in self.edges:
            result[self.nodes[importer]].append(self.nodes[imported])
        return result

    def edge_arrays(self) -> tuple[np.ndarray, np.ndarray]:
        """Importer and imported index vectors, one entry per edge."""
        if not self.edges:
            empty = np.zeros(0, dtype=np.int64)
            return empty, empty.copy()
        pairs = np.asarray(self.edges, dtype=np.int64)
        return pairs[:, 0], pairs[:, 1]

    def csr(self, reverse: bool = False) -> tuple[np.ndarray, np.ndarray]:
        """Compressed adjacency: neighbours of i are ``targets[indptr[i]:indptr[i+1]]``.

        With ``reverse`` the neighbours are importers instead of imports.
        """
        sources, targets = self.edge_arrays()
        if reverse:
            sources, targets = targets, sources
        order = np.argsort(sources, kind="stable")
        counts = np.bincount(sources, minlength=len(self.nodes))
        indptr = np.zeros(len(self.nodes) + 1, dtype=np.int64)
        np.cumsum(counts, out=indptr[1:])
        return indptr, targets[order]
