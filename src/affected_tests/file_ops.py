"""
Safe file operations for affected-tests.

Provides timeout-protected and size-limited reads of source files.
"""

import signal
import threading
from collections.abc import Generator
from contextlib import contextmanager
from typing import Optional

from .exceptions import FileAccessError

# Bytes inspected for NUL when deciding a file is binary
_BINARY_SNIFF_BYTES = 8192


class ReadTimeoutError(Exception):
    """Raised when a read exceeds its time limit."""

    pass


def _timeout_handler(signum, frame):
    raise ReadTimeoutError("Operation timed out")


def _alarm_supported() -> bool:
    return hasattr(signal, "SIGALRM") and threading.current_thread() is threading.main_thread()


@contextmanager
def timeout(seconds: Optional[int]) -> Generator[None, None, None]:
    """
    Context manager for timeout protection.

    SIGALRM only exists on POSIX and only fires in the main thread; anywhere
    else this is a no-op and the OS I/O semantics apply.

    Args:
        seconds: Timeout in seconds (None or 0 disables)

    Raises:
        ReadTimeoutError: If operation exceeds timeout
    """
    if not seconds or not _alarm_supported():
        yield
        return

    old_handler = signal.signal(signal.SIGALRM, _timeout_handler)
    signal.alarm(seconds)
    try:
        yield
    finally:
        signal.alarm(0)
        signal.signal(signal.SIGALRM, old_handler)


def safe_read_file(
    filepath: str,
    max_size: Optional[int] = None,
    timeout_seconds: Optional[int] = 10,
    encoding: str = "utf-8",
    errors: str = "replace",
) -> str:
    """
    Read a source file with size, binary-content and timeout checks.

    Args:
        filepath: File to read
        max_size: Maximum size in bytes (None skips the check)
        timeout_seconds: Timeout in seconds
        encoding: Text encoding
        errors: How to handle encoding errors

    Returns:
        File contents as string

    Raises:
        FileAccessError: If the file cannot be read, is too large, or is binary
    """
    try:
        with timeout(timeout_seconds):
            with open(filepath, "rb") as f:
                if max_size is not None:
                    data = f.read(max_size + 1)
                    if len(data) > max_size:
                        raise FileAccessError(
                            filepath, f"File exceeds size limit ({max_size} bytes)"
                        )
                else:
                    data = f.read()
    except ReadTimeoutError:
        raise FileAccessError(filepath, f"Read operation timed out after {timeout_seconds}s")
    except IsADirectoryError:
        raise FileAccessError(filepath, "Is a directory")
    except OSError as e:
        raise FileAccessError(filepath, f"OS error: {e.strerror or e}")

    if b"\x00" in data[:_BINARY_SNIFF_BYTES]:
        raise FileAccessError(filepath, "Binary content")

    try:
        return data.decode(encoding, errors=errors)
    except (LookupError, UnicodeDecodeError) as e:
        raise FileAccessError(filepath, f"Encoding error: {e}")
