"""Common base class for errors the CLI reports to the user.

WHY: The CLI turns every expected failure into ``error: <message>`` and
exit code 1. Each module defines its own exception types next to the
code that raises them; deriving them from one base lets the CLI catch
them all without listing every type.
"""

from __future__ import annotations


class F4MergeError(Exception):
    """Base class for all expected f4merge failures."""
