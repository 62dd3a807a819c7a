"""Identifier quoting and where-clause rendering for PostgreSQL."""

from typing import Any, List, Mapping, Optional, Sequence, Tuple

from common.interfaces.storage import NOT_NULL


def quote_identifier(identifier: str) -> str:
    """Double-quote an identifier, escaping embedded quotes."""
    return '"' + str(identifier).replace('"', '""') + '"'


def qualified_table(table: str, schema: Optional[str]) -> str:
    if schema:
        return f"{quote_identifier(schema)}.{quote_identifier(table)}"
    return quote_identifier(table)


def render_where(
    where: Optional[Mapping[str, Any]], start: int = 1
) -> Tuple[str, List[Any]]:
    """Render an equality map to ``WHERE ...`` with ``$n`` placeholders.

    Sequence values render as ``= ANY($n)``, None as ``IS NULL`` and
    NOT_NULL as ``IS NOT NULL``. An empty sequence matches nothing.
    """
    if not where:
        return "", []
    clauses: List[str] = []
    params: List[Any] = []
    for column, value in where.items():
        ident = quote_identifier(column)
        if value is None:
            clauses.append(f"{ident} IS NULL")
        elif value is NOT_NULL:
            clauses.append(f"{ident} IS NOT NULL")
        elif isinstance(value, (list, tuple, set, frozenset)):
            params.append(list(value))
            clauses.append(f"{ident} = ANY(${start + len(params) - 1})")
        else:
            params.append(value)
            clauses.append(f"{ident} = ${start + len(params) - 1}")
    return " WHERE " + " AND ".join(clauses), params


def render_columns(columns: Optional[Sequence[str]]) -> str:
    if not columns:
        return "*"
    return ", ".join(quote_identifier(c) for c in columns)


def render_order_by(order_by: Optional[Sequence[str]]) -> str:
    """Render ``ORDER BY``; a leading ``-`` sorts a column descending."""
    if not order_by:
        return ""
    parts = []
    for column in order_by:
        if column.startswith("-"):
            parts.append(f"{quote_identifier(column[1:])} DESC")
        else:
            parts.append(f"{quote_identifier(column)} ASC")
    return " ORDER BY " + ", ".join(parts)
