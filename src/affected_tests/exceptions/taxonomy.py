"""Error codes shared by fatal exceptions and collected records.

Error Code Convention:
    AT1xx - Per-module problems collected during traversal (never fatal)
    AT2xx - Call-level problems (fatal, raised)
"""

from enum import Enum


class ErrorCode(Enum):
    """Structured error codes for diagnostics and machine-readable output."""

    # Collected during traversal (AT1xx)
    AT100 = "AT100"  # Unresolved specifier
    AT101 = "AT101"  # Unreadable file
    AT102 = "AT102"  # Dynamic (computed) specifier
    AT103 = "AT103"  # Import cycle traversed
    AT104 = "AT104"  # Source has syntax errors

    # Call-level (AT2xx)
    AT200 = "AT200"  # Invalid input
    AT201 = "AT201"  # Cancelled

    @property
    def fatal(self) -> bool:
        return self.value.startswith("AT2")
