"""Statement handling, error and password helpers for SAP ASE."""

from __future__ import annotations

from unisql.trino import process as _trim_and_classify

__all__ = ["process", "error_message", "is_password_error", "change_password_sql"]


def process(prefix: str, sqlstr: str) -> tuple[str, str, bool]:
    """Drop a trailing ``;`` and whitespace, then classify the statement.

    Returns the statement type, the statement to send and whether it
    returns rows.
    """
    return _trim_and_classify(prefix, sqlstr)


def error_message(message: str) -> str:
    """Strip everything before the last ``tds:`` marker."""
    i = message.rfind("tds:")
    return message[i:] if i != -1 else message


def is_password_error(message: str) -> bool:
    """Report whether an error message is a failed login."""
    return "Login failed" in message


def change_password_sql(user: str, new_password: str, old_password: str) -> str:
    """Return the statement that changes the current user's password.

    Raises :class:`ValueError` when ``user`` names another user.
    """
    if user:
        raise ValueError("Cannot change password for another user")
    return f"exec sp_password '{old_password}', '{new_password}'"