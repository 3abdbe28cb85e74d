"""Building blocks for a command-line SQL client: statement classification,
settings, shell helpers, SQLite metadata and per-database dialect helpers."""

__version__ = "0.1.0"

__all__ = [
    "errors",
    "odbc",
    "oracle",
    "postgres",
    "querytype",
    "sapase",
    "settings",
    "shell",
    "sqlitemeta",
    "sqlitetime",
    "sqlserver",
    "trino",
    "vertica",
]