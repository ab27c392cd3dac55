"""
SOLIDserver Query Filters

The server filters list services with a WHERE parameter written in its own
SQL-like mini-language. This module only assembles such strings: field
comparisons joined by AND, with field names checked and values quoted.
"""

import re
from typing import Any, List

_FIELD_RE = re.compile(r"[a-z][a-z0-9_]*")
_OPERATORS = ("=", "!=", "<", "<=", ">", ">=")


def quote(value: Any) -> str:
    """Quote a value for a WHERE clause, doubling embedded single quotes"""
    return "'" + str(value).replace("'", "''") + "'"


def _check_field(field: str) -> str:
    if not _FIELD_RE.fullmatch(field or ""):
        raise ValueError(f"Invalid WHERE field name: {field!r}")
    return field


def _check_operator(operator: str) -> str:
    if operator not in _OPERATORS:
        raise ValueError(f"Invalid WHERE operator: {operator!r}")
    return operator


class WhereClause:
    """Builder for WHERE expressions

    Usage:
        where = (WhereClause()
                 .compare_fields("free_start_ip_addr", "!=", "free_end_ip_addr")
                 .equals("subnet_id", subnet_id))
        parameters["WHERE"] = str(where)
    """

    def __init__(self):
        self._terms: List[str] = []

    def equals(self, field: str, value: Any, lower: bool = False) -> "WhereClause":
        """Add `field='value'`, optionally lower-casing the value"""
        return self.compare(field, "=", value, lower=lower)

    def compare(self, field: str, operator: str, value: Any, lower: bool = False) -> "WhereClause":
        """Add `field <operator> 'value'`"""
        if lower:
            value = str(value).lower()
        self._terms.append(f"{_check_field(field)}{_check_operator(operator)}{quote(value)}")
        return self

    def compare_fields(self, left: str, operator: str, right: str) -> "WhereClause":
        """Add a comparison between two fields of the same row"""
        self._terms.append(f"{_check_field(left)} {_check_operator(operator)} {_check_field(right)}")
        return self

    def __bool__(self) -> bool:
        return bool(self._terms)

    def __str__(self) -> str:
        return " AND ".join(self._terms)
