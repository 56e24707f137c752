"""Module resolution: specifier -> canonical file path."""

from .builtins import NODE_BUILTINS, is_builtin
from .cache import ResolutionCache
from .resolver import ModuleResolver, is_relative
from .tsconfig import TsconfigPaths, load_tsconfig_paths

__all__ = [
    "ModuleResolver",
    "ResolutionCache",
    "TsconfigPaths",
    "load_tsconfig_paths",
    "NODE_BUILTINS",
    "is_builtin",
    "is_relative",
]
