"""Error, password and TLS helpers for Vertica connections."""

from __future__ import annotations

import re
from urllib.parse import parse_qs, urlsplit

__all__ = [
    "split_error",
    "is_password_error",
    "change_password_sql",
    "check_tls_mode",
]

_ERR_CODE_RE = re.compile(r"^\[([0-9a-z]+)\]\s+(.+)", re.IGNORECASE)


def split_error(message: str) -> tuple[str, str]:
    """Split an error message into its ``[CODE]`` and the remaining text.

    The code is empty when the message does not start with one.
    """
    msg = message.removeprefix("Error:").strip()
    m = _ERR_CODE_RE.match(msg)
    if m is not None:
        return m.group(1), m.group(2).strip()
    return "", msg


def is_password_error(message: str) -> bool:
    """Report whether an error message is a rejected login."""
    return message.strip().endswith("Invalid username or password")


def change_password_sql(user: str, new_password: str) -> str:
    """Return the statement that changes ``user``'s password."""
    return f"ALTER USER {user} IDENTIFIED BY '{new_password}'"


def _hostname(netloc: str) -> str:
    """Return the host of ``netloc`` without user info, port or brackets."""
    host = netloc.rpartition("@")[2]
    if host.startswith("["):
        end = host.find("]")
        return host[1:end] if end != -1 else host[1:]
    return host.partition(":")[0]


def check_tls_mode(dsn: str) -> tuple[str, str]:
    """Validate the TLS options of ``dsn``.

    Returns the ``ca_path`` option (empty when unset) and the host name the
    server certificate must match. A ``ca_path`` requires
    ``tlsmode=server-strict``; otherwise :class:`ValueError` is raised.
    """
    parts = urlsplit(dsn)
    query = parse_qs(parts.query, keep_blank_values=True)
    ca_path = query.get("ca_path", [""])[0]
    if ca_path and query.get("tlsmode", [""])[0] != "server-strict":
        raise ValueError("tlsmode must be set to server-strict: ca_path is set")
    return ca_path, _hostname(parts.netloc)