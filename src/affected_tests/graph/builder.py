"""Dependency graph construction by breadth-first traversal from test entries.

The walk starts at the known entry files rather than at changed files:
the set of all files is unbounded, entries are not. For each unvisited
module: mark it scanned, scan it, resolve every specifier relative to its
directory, add an edge per resolved target and enqueue unscanned targets.
Failures become collected records; nothing raised by a single module stops
the walk.

With ``workers > 1`` each BFS frontier is scanned on a thread pool.
``executor.map`` hands results back in frontier order and all graph
mutation happens on the calling thread, so error order matches the
sequential walk.
"""

from __future__ import annotations

import os
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Optional, Protocol, Sequence

from ..exceptions import ComputationCancelled, UnresolvedImportError
from ..logging_config import get_logger
from ..models import CyclicButHandled, ModuleId, ResolutionError, UnresolvedSpecifier
from ..resolution import ModuleResolver
from ..scanning import ScanResult, SourceScanner, is_scannable
from .algorithms import find_cycles
from .models import DependencyGraph

logger = get_logger(__name__)


class ScanStore(Protocol):
    """Anything that can hand back earlier scan results for a path."""

    def get(self, path: str) -> Optional[ScanResult]: ...

    def set(self, path: str, result: ScanResult) -> None: ...


@dataclass
class FileVisit:
    """Outcome of visiting one module, produced off the calling thread."""

    index: int
    module_id: ModuleId
    scan: Optional[ScanResult] = None
    targets: list[ModuleId] = field(default_factory=list)
    errors: list[ResolutionError] = field(default_factory=list)

    @property
    def leaf(self) -> bool:
        return self.scan is None


@dataclass
class BuildResult:
    """Graph plus everything collected while building it.

    Attributes:
        graph: The import graph
        entries: Graph index of each distinct entry file, in input order
        errors: Collected records in traversal order
        scans: Memoized scan result per scanned module
    """

    graph: DependencyGraph
    entries: list[int] = field(default_factory=list)
    errors: list[ResolutionError] = field(default_factory=list)
    scans: dict[ModuleId, ScanResult] = field(default_factory=dict)


class DependencyGraphBuilder:
    """Builds the import graph reachable from a set of entry files.

    Attributes:
        resolver: Maps specifiers to ModuleIds
        scanner: Extracts specifiers from file contents
        workers: Parallel scan workers (1 = sequential)
        cancel_event: Checked between module visits
        scan_store: Optional cross-call store of scan results
        report_cycles: Append CyclicButHandled records after the walk
    """

    def __init__(
        self,
        resolver: ModuleResolver,
        scanner: Optional[SourceScanner] = None,
        workers: int = 1,
        cancel_event: Optional[threading.Event] = None,
        scan_store: Optional[ScanStore] = None,
        report_cycles: bool = False,
    ):
        self.resolver = resolver
        self.scanner = scanner or SourceScanner()
        self.workers = max(1, workers)
        self.cancel_event = cancel_event
        self.scan_store = scan_store
        self.report_cycles = report_cycles

    def build(self, entry_files: Sequence[str]) -> BuildResult:
        """Walk outward from ``entry_files`` and return the graph.

        Raises:
            ComputationCancelled: If the cancel flag is set mid-walk
        """
        graph = DependencyGraph()
        result = BuildResult(graph=graph)

        entry_ids: set[ModuleId] = set()
        for path in entry_files:
            module_id = self.resolver.canonicalize(path)
            if module_id not in entry_ids:
                entry_ids.add(module_id)
                result.entries.append(graph.add_node(module_id))

        frontier = list(result.entries)
        depth = 0
        executor = ThreadPoolExecutor(max_workers=self.workers) if self.workers > 1 else None
        try:
            while frontier:
                self._check_cancelled(graph)
                pending = [i for i in frontier if graph.mark_scanned(i)]
                jobs = [(i, graph.nodes[i], graph.nodes[i] in entry_ids) for i in pending]
                if executor is not None and len(jobs) > 1:
                    visits = executor.map(lambda job: self._visit(*job), jobs)
                else:
                    visits = map(lambda job: self._visit(*job), jobs)

                next_frontier: list[int] = []
                for visit in visits:
                    self._merge(visit, result, next_frontier)
                frontier = next_frontier
                depth += 1
        except ComputationCancelled:
            logger.info(f"Cancelled after scanning {graph.scanned_count} modules")
            raise ComputationCancelled(visited=graph.scanned_count) from None
        finally:
            if executor is not None:
                executor.shutdown(wait=True, cancel_futures=True)

        if self.report_cycles:
            for component in find_cycles(graph):
                modules = tuple(graph.nodes[i] for i in component)
                result.errors.append(CyclicButHandled(modules=modules))

        logger.info(
            f"Import graph: {len(graph)} modules, {graph.edge_count} edges, "
            f"{len(result.scans)} scanned, {len(graph.leaves)} leaves, depth {depth}, "
            f"{len(result.errors)} errors"
        )
        return result

    def _merge(self, visit: FileVisit, result: BuildResult, next_frontier: list[int]) -> None:
        graph = result.graph
        result.errors.extend(visit.errors)
        if visit.leaf:
            graph.leaves.add(visit.index)
            return
        result.scans[visit.module_id] = visit.scan
        for target in visit.targets:
            t = graph.add_node(target)
            if t == visit.index:
                continue
            graph.add_edge(visit.index, t)
            if not graph.is_scanned(t):
                next_frontier.append(t)

    def _check_cancelled(self, graph: DependencyGraph) -> None:
        if self.cancel_event is not None and self.cancel_event.is_set():
            raise ComputationCancelled(visited=graph.scanned_count)

    def _is_leaf(self, module_id: ModuleId, is_entry: bool) -> bool:
        if not is_scannable(module_id):
            return True
        if is_entry or self.resolver.config.traverse_module_directories:
            return False
        return self.resolver.in_module_directory(module_id)

    def _visit(self, index: int, module_id: ModuleId, is_entry: bool) -> FileVisit:
        if self.cancel_event is not None and self.cancel_event.is_set():
            raise ComputationCancelled(visited=0)

        visit = FileVisit(index=index, module_id=module_id)
        if self._is_leaf(module_id, is_entry):
            return visit

        scan = self._scan(module_id)
        visit.scan = scan
        if scan.error is not None:
            visit.errors.append(scan.error)
            return visit

        importer_dir = os.path.dirname(module_id)
        located: list[tuple[int, ResolutionError]] = []
        reported: set[str] = set()
        for i, spec in enumerate(scan.specifiers):
            if self.resolver.is_builtin(spec.value):
                scan.annotate(i, None)
                continue
            try:
                target = self.resolver.resolve(importer_dir, spec.value)
            except UnresolvedImportError as e:
                error = UnresolvedSpecifier(
                    specifier=spec.value,
                    importer=module_id,
                    reason=f"{len(e.tried)} candidates tried",
                )
                scan.annotate(i, error)
                if spec.value not in reported:
                    reported.add(spec.value)
                    located.append((spec.line, error))
                continue
            scan.annotate(i, target)
            if target not in visit.targets:
                visit.targets.append(target)

        for computed in scan.computed:
            located.append((computed.line, computed.to_error(module_id)))
        for issue in scan.issues:
            located.append((issue.line, issue.to_error(module_id)))
        located.sort(key=lambda item: item[0])
        visit.errors.extend(error for _, error in located)
        return visit

    def _scan(self, module_id: ModuleId) -> ScanResult:
        if self.scan_store is not None:
            cached = self.scan_store.get(module_id)
            if cached is not None:
                return cached
        scan = self.scanner.scan(module_id)
        if self.scan_store is not None and scan.readable:
            self.scan_store.set(module_id, scan)
        return scan


def build_dependency_graph(
    entry_files: Sequence[str], resolver: ModuleResolver, **kwargs
) -> BuildResult:
    """Convenience wrapper around DependencyGraphBuilder.build()."""
    return DependencyGraphBuilder(resolver, **kwargs).build(entry_files)
