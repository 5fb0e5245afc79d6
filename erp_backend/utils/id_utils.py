"""
Integer conversion utilities for path ids and query parameters
"""
from typing import Any, Optional


def to_int(value: Any) -> Optional[int]:
    """
    Convert a query/body value to an integer.

    Args:
        value: int, numeric string, or None

    Returns:
        Integer, or None when the value is missing or not a whole number
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, int):
        return value

    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None

    return None


def to_int_id(id_value: Any) -> Optional[int]:
    """
    Convert a record ID to a positive integer.

    Args:
        id_value: ID as string, int, or None

    Returns:
        Integer ID or None
    """
    value = to_int(id_value)
    if value is None or value < 1:
        return None
    return value
