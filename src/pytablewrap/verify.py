"""
Post-write verification of updated rows.
"""

from collections.abc import Callable, Mapping
from typing import Any


def verify_changes(read_fields: Callable[[list[str]], dict[str, Any]], intended: Mapping[str, Any]) -> bool:
    """
    Check whether the stored values match the values an update intended to write.

    Re-reads exactly the columns in ``intended`` and compares by value. A True
    result only means the row currently holds these values; it does not prove the
    preceding statement wrote them (an earlier write may already have matched).

    Args:
        read_fields: Callable returning a column -> value mapping for the given columns
        intended: Column -> value mapping that was written

    Returns:
        True if the re-read values equal the intended values
    """
    current = read_fields(list(intended.keys()))
    return current == dict(intended)
