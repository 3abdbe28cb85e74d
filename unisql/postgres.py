"""Helpers for PostgreSQL connections: COPY, notices and connection options."""

from __future__ import annotations

from collections.abc import Mapping, Sequence

__all__ = [
    "copy_column_query",
    "copy_in_sql",
    "change_password_sql",
    "format_notice",
    "force_params",
    "needs_ssl_retry",
]


def copy_column_query(table: str) -> tuple[str, str]:
    """Return a query yielding the target columns of ``table`` and its bare name.

    ``table`` may carry a parenthesised column list, as in ``t(a, b)``; the
    listed expressions are then evaluated against the table.
    """
    left = table.find("(")
    if left == -1:
        return f"SELECT * FROM {table} WHERE 1=0", table
    name = table[:left]
    return f"SELECT {table[left + 1:-1]} FROM {name} WHERE 1=0", name


def _quote_identifier(name: str) -> str:
    end = name.find("\x00")
    if end != -1:
        name = name[:end]
    return '"' + name.replace('"', '""') + '"'


def copy_in_sql(table: str, columns: Sequence[str]) -> str:
    """Return the ``COPY ... FROM STDIN`` statement for ``table`` and ``columns``.

    A ``schema.table`` name is split at its first dot.
    """
    schema, dot, name = table.partition(".")
    if dot:
        target = _quote_identifier(schema) + "." + _quote_identifier(name)
    else:
        target = _quote_identifier(table)
    cols = ", ".join(_quote_identifier(c) for c in columns)
    return f"COPY {target} ({cols}) FROM STDIN"


def change_password_sql(user: str, new_password: str) -> str:
    """Return the statement that changes ``user``'s password."""
    return f"ALTER USER {user} PASSWORD '{new_password}'"


def format_notice(severity: str, message: str, hint: str = "") -> str:
    """Render a server notice, with its hint on a second line when present."""
    out = f"{severity}:  {message}\n"
    if hint:
        out += f"HINT:  {hint}\n"
    return out


def force_params(scheme: str, query: Mapping[str, str]) -> dict[str, str]:
    """Return the connection options with those the scheme requires forced.

    CockroachDB connections always get ``sslmode=disable``.
    """
    params = dict(query)
    if scheme == "cockroachdb":
        params["sslmode"] = "disable"
    return params


def needs_ssl_retry(sslmode: str, query: Mapping[str, object]) -> bool:
    """Report whether a refused SSL connection should be retried without SSL.

    This applies when the ``SSLMODE`` setting is ``retry`` and the URL gave
    no ``sslmode`` of its own; the retry prefixes ``sslmode=disable`` to the
    connection string.
    """
    return sslmode == "retry" and "sslmode" not in query