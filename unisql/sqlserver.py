"""Helpers for Microsoft SQL Server: types, errors and metadata queries."""

from __future__ import annotations

from collections.abc import Sequence

__all__ = [
    "SYSTEM_SCHEMAS",
    "data_type_formatter",
    "placeholder",
    "error_message",
    "is_password_error",
    "change_password_sql",
    "build_query",
    "index_conditions",
]

SYSTEM_SCHEMAS = (
    "db_accessadmin",
    "db_backupoperator",
    "db_datareader",
    "db_datawriter",
    "db_ddladmin",
    "db_denydatareader",
    "db_denydatawriter",
    "db_owner",
    "db_securityadmin",
    "INFORMATION_SCHEMA",
    "sys",
)

_NOT_SYSTEM_COND = "s.name NOT IN ({})".format(
    ", ".join(f"'{name}'" for name in SYSTEM_SCHEMAS)
)


def data_type_formatter(data_type: str, column_size: int, decimal_digits: int) -> str:
    """Render a column type the way it would be declared, omitting defaults."""
    if data_type in ("numeric", "decimal"):
        if column_size == 18 and decimal_digits == 0:
            return data_type
        return f"{data_type}({column_size},{decimal_digits})"
    if data_type in ("datetimeoffset", "datetime2", "time"):
        if column_size == 7:
            return data_type
        return f"{data_type}({column_size})"
    if data_type in ("char", "nchar", "binary"):
        if column_size == 1:
            return data_type
        return f"{data_type}({column_size})"
    if data_type in ("varchar", "nvarchar", "varbinary"):
        if column_size == -1:
            return data_type + "(max)"
        if column_size == 1:
            return data_type
        return f"{data_type}({column_size})"
    return data_type


def placeholder(n: int) -> str:
    """Return the bind placeholder for parameter ``n``."""
    return f"@p{n}"


def error_message(message: str) -> str:
    """Strip everything before the last ``sqlserver:`` marker."""
    i = message.rfind("sqlserver:")
    return message[i:] if i != -1 else message


def is_password_error(message: str) -> bool:
    """Report whether an error message is a failed login."""
    return "Login failed for" in message


def change_password_sql(user: str, new_password: str, old_password: str) -> str:
    """Return the statement that changes ``user``'s login password."""
    return (
        f"ALTER LOGIN {user} WITH password = '{new_password}' "
        f"old_password = '{old_password}'"
    )


def build_query(qstr: str, conds: Sequence[str], order: str, limit: int = 0) -> str:
    """Append conditions, ordering and a row limit to ``qstr``."""
    if conds:
        qstr += "\nWHERE " + " AND ".join(conds)
    if order:
        qstr += "\nORDER BY " + order
    if limit:
        qstr += f"\nFETCH FIRST {limit} ROWS ONLY"
    return qstr


def index_conditions(
    schema: str = "",
    parent: str = "",
    name: str = "",
    only_visible: bool = False,
    with_system: bool = False,
) -> tuple[list[str], list[str]]:
    """Return the WHERE conditions and bind values for index queries."""
    conds: list[str] = []
    vals: list[str] = []
    if only_visible:
        conds.append("s.name = schema_name()")
    if not with_system:
        conds.append(_NOT_SYSTEM_COND)
    for column, value in (("s.name", schema), ("t.name", parent), ("i.name", name)):
        if value:
            vals.append(value)
            conds.append(f"{column} LIKE {placeholder(len(vals))}")
    return conds, vals