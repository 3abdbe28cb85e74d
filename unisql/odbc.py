"""Statement handling and password error detection for ODBC connections."""

from __future__ import annotations

from unisql.oracle import trim_terminator
from unisql.querytype import query_exec_type

__all__ = ["process", "is_password_error"]

_OFF_WORDS = frozenset({"", "off", "0", "false"})


def process(trim: str, prefix: str, sqlstr: str) -> tuple[str, str, bool]:
    """Prepare ``sqlstr``; ``trim`` is the connection's ``usql_trim`` option.

    When trimming is enabled, a trailing ``;`` is dropped unless the
    statement ends in ``END;``. Returns the statement type, the statement
    and whether it returns rows.
    """
    if trim.lower() not in _OFF_WORDS:
        sqlstr = trim_terminator(sqlstr)
    typ, is_query = query_exec_type(prefix, sqlstr)
    return typ, sqlstr, is_query


def is_password_error(message: str) -> bool:
    """Report whether an error message looks like a failed login."""
    msg = message.lower()
    return "failed" in msg and any(
        word in msg for word in ("login", "authentication", "password")
    )