"""
Console Utilities - Helper functions for safe console output.
Handles platform-specific encoding issues (e.g., Windows GBK vs Unicode)
and the JSON envelope printed by the run_*.py scripts.
"""

import json
import os
import sys
from typing import Any, Optional

from pydantic import BaseModel


def is_windows():
    return os.name == 'nt'


class Symbol:
    """
    Console symbols that adapt to the platform.
    Uses Unicode checks/crosses on Posix (Mac/Linux) and terminals that support it.
    Uses ASCII [OK]/[X] on Windows to avoid UnicodeEncodeError.
    """

    @property
    def OK(self) -> str:
        return "[OK]" if is_windows() else "✓"

    @property
    def FAIL(self) -> str:
        return "[ERROR]" if is_windows() else "✗"

    @property
    def WARN(self) -> str:
        return "[WARN]" if is_windows() else "!"

    @property
    def UP(self) -> str:
        return "[+]" if is_windows() else "▲"

    @property
    def DOWN(self) -> str:
        return "[-]" if is_windows() else "▼"


# Global instance
symbol = Symbol()


def print_header(title: str):
    print("\n" + "=" * 80)
    print(f"  {title}")
    print("=" * 80)


def print_step(step: int, total: int, message: str):
    """Print a formatted step header."""
    header = f"[{step}/{total}] {message}"
    print(f"\n{header}")
    print("-" * len(header))


def _to_jsonable(data: Any) -> Any:
    if isinstance(data, BaseModel):
        return data.model_dump()
    if isinstance(data, (list, tuple)):
        return [_to_jsonable(item) for item in data]
    if isinstance(data, dict):
        return {key: _to_jsonable(value) for key, value in data.items()}
    return data


def print_envelope(data: Any = None, error: Optional[str] = None):
    """
    Print the `{success, data}` or `{success, error}` envelope as JSON on stdout.
    Logs go to stderr, so stdout stays machine-readable.
    """
    if error is not None:
        payload = {'success': False, 'error': error}
    else:
        payload = {'success': True, 'data': _to_jsonable(data)}
    json.dump(payload, sys.stdout, indent=2, ensure_ascii=False, default=str)
    sys.stdout.write("\n")
