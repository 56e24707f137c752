"""Source scanning: file contents -> ordered import specifiers."""

from .models import ComputedImport, ScanResult, Specifier, SyntaxIssue
from .scanner import SCANNER_VERSION, SOURCE_EXTENSIONS, SourceScanner, is_scannable
from .treesitter_parser import TreeSitterParser, detect_language

__all__ = [
    "SourceScanner",
    "TreeSitterParser",
    "ScanResult",
    "Specifier",
    "ComputedImport",
    "SyntaxIssue",
    "SCANNER_VERSION",
    "SOURCE_EXTENSIONS",
    "detect_language",
    "is_scannable",
]
