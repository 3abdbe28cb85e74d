"""Statement handling, error and password helpers for Oracle Database."""

from __future__ import annotations

import re

from unisql.querytype import query_exec_type
from unisql.shell import getenv

__all__ = [
    "trim_terminator",
    "process",
    "service_path",
    "split_error",
    "is_password_error",
    "change_password_sql",
    "placeholder",
]

_WS = r"[\t\n\f\r ]"
_END_RE = re.compile(rf";?{_WS}*\Z")
_END_ANCHOR_RE = re.compile(rf"{_WS}end{_WS}*;{_WS}*\Z", re.IGNORECASE)


def trim_terminator(sqlstr: str) -> str:
    """Drop a trailing ``;`` and whitespace, unless the statement ends in ``END;``."""
    if _END_ANCHOR_RE.search(sqlstr):
        return sqlstr
    return _END_RE.sub("", sqlstr)


def process(prefix: str, sqlstr: str) -> tuple[str, str, bool]:
    """Prepare ``sqlstr`` for execution.

    Returns the statement type, the statement to send and whether it
    returns rows.
    """
    sqlstr = trim_terminator(sqlstr)
    typ, is_query = query_exec_type(prefix, sqlstr)
    return typ, sqlstr, is_query


def service_path(path: str, host: str) -> tuple[str, str]:
    """Fill in the service name from ``ORACLE_SID``/``ORASID`` when missing.

    Returns the possibly updated URL path and host.
    """
    if path.lstrip("/") == "" if path.startswith("/") else path == "":
        sid = getenv("ORACLE_SID", "ORASID")
        if sid:
            path = "/" + sid
            if not host:
                host = "localhost"
    return path, host


def split_error(message: str, code: int | None = None) -> tuple[str, str]:
    """Return the ``ORA-NNNNN`` code (empty when unknown) and the message."""
    code_text = f"ORA-{code:05d}" if code is not None else ""
    return code_text, message.strip()


def is_password_error(message: str) -> bool:
    """Report whether an error message means the password was missing."""
    return "empty password" in message


def change_password_sql(user: str, new_password: str) -> str:
    """Return the statement that changes ``user``'s password."""
    return f"ALTER USER {user} IDENTIFIED BY {new_password}"


def placeholder(n: int) -> str:
    """Return the bind placeholder for parameter ``n``."""
    return f":{n}"