"""
affected-tests - Static affected-test selection for JavaScript/TypeScript

Builds the import graph reachable from a set of test entry files, resolving
specifiers the way Node-style tooling does, and reports which entries
transitively import any of a set of changed files.
"""

__version__ = "0.1.0"

from .api import get_affected
from .config import AffectedConfig, ResolverConfig, load_config
from .exceptions import (
    AffectedTestsError,
    ComputationCancelled,
    InvalidConfigError,
    InvalidInputError,
    InvalidPathError,
)
from .models import (
    AffectedResult,
    CyclicButHandled,
    DynamicSpecifier,
    MalformedSource,
    ModuleId,
    ResolutionError,
    UnreadableFile,
    UnresolvedSpecifier,
)

__all__ = [
    "get_affected",  # Main entry point
    "AffectedResult",
    "ResolverConfig",
    "AffectedConfig",
    "load_config",
    "ModuleId",
    "ResolutionError",
    "UnresolvedSpecifier",
    "UnreadableFile",
    "DynamicSpecifier",
    "MalformedSource",
    "CyclicButHandled",
    "AffectedTestsError",
    "InvalidInputError",
    "InvalidPathError",
    "InvalidConfigError",
    "ComputationCancelled",
]
