"""Classify SQL statements as row-returning queries or executed statements."""

from __future__ import annotations

__all__ = ["query_exec_type"]

# Leading keywords of statements that return rows.
_QUERY_PREFIXES = frozenset(
    {
        "WITH",
        "PRAGMA",
        "EXPLAIN",  # show the execution plan of a statement
        "DESCRIBE",  # describe (mysql)
        "DESC",  # describe (mysql)
        "FETCH",  # retrieve rows from a query using a cursor
        "SELECT",  # retrieve rows from a table or view
        "SHOW",  # show the value of a run-time parameter
        "ADMIN SHOW",
        "VALUES",  # compute a set of rows
        "LIST",  # list permissions, roles, users (cassandra)
        "EXEC",  # execute a stored procedure that returns rows (not postgres)
        "TABLE",  # shortcut for select * from <table> (postgresql)
        "CALL",
        "FROM",
    }
)

# Statement prefixes that are executed rather than queried.
_EXEC_PREFIXES = frozenset(
    {
        # cassandra
        "ALTER KEYSPACE",
        "CREATE KEYSPACE",
        "DROP KEYSPACE",
        "BEGIN BATCH",
        "APPLY BATCH",
        # sqlserver
        "CREATE LOGIN",
        "CREATE PROCEDURE",
        "DROP LOGIN",
        "DROP PROCEDURE",
        # ql
        "BEGIN TRANSACTION",
        # postgresql
        "ABORT",
        "ALTER AGGREGATE",
        "ALTER COLLATION",
        "ALTER CONVERSION",
        "ALTER DATABASE",
        "ALTER DEFAULT PRIVILEGES",
        "ALTER DOMAIN",
        "ALTER EVENT TRIGGER",
        "ALTER EXTENSION",
        "ALTER FOREIGN DATA WRAPPER",
        "ALTER FOREIGN TABLE",
        "ALTER FUNCTION",
        "ALTER GROUP",
        "ALTER INDEX",
        "ALTER LANGUAGE",
        "ALTER LARGE OBJECT",
        "ALTER MATERIALIZED VIEW",
        "ALTER OPERATOR CLASS",
        "ALTER OPERATOR FAMILY",
        "ALTER OPERATOR",
        "ALTER POLICY",
        "ALTER ROLE",
        "ALTER RULE",
        "ALTER SCHEMA",
        "ALTER SEQUENCE",
        "ALTER SERVER",
        "ALTER SYSTEM",
        "ALTER TABLESPACE",
        "ALTER TABLE",
        "ALTER TEXT SEARCH CONFIGURATION",
        "ALTER TEXT SEARCH DICTIONARY",
        "ALTER TEXT SEARCH PARSER",
        "ALTER TEXT SEARCH TEMPLATE",
        "ALTER TRIGGER",
        "ALTER TYPE",
        "ALTER USER MAPPING",
        "ALTER USER",
        "ALTER VIEW",
        "ANALYZE",
        "BEGIN",
        "CHECKPOINT",
        "CLOSE",
        "CLUSTER",
        "COMMENT",
        "COMMIT PREPARED",
        "COMMIT",
        "COPY",
        "CREATE ACCESS METHOD",
        "CREATE AGGREGATE",
        "CREATE CAST",
        "CREATE COLLATION",
        "CREATE CONVERSION",
        "CREATE DATABASE",
        "CREATE DOMAIN",
        "CREATE EVENT TRIGGER",
        "CREATE EXTENSION",
        "CREATE FOREIGN DATA WRAPPER",
        "CREATE FOREIGN TABLE",
        "CREATE FUNCTION",
        "CREATE GROUP",
        "CREATE INDEX",
        "CREATE LANGUAGE",
        "CREATE MATERIALIZED VIEW",
        "CREATE OPERATOR CLASS",
        "CREATE OPERATOR FAMILY",
        "CREATE OPERATOR",
        "CREATE POLICY",
        "CREATE ROLE",
        "CREATE RULE",
        "CREATE SCHEMA",
        "CREATE SEQUENCE",
        "CREATE SERVER",
        "CREATE STATISTICS",
        "CREATE SUBSCRIPTION",
        "CREATE TABLE AS",
        "CREATE TABLESPACE",
        "CREATE TABLE",
        "CREATE TEXT SEARCH CONFIGURATION",
        "CREATE TEXT SEARCH DICTIONARY",
        "CREATE TEXT SEARCH PARSER",
        "CREATE TEXT SEARCH TEMPLATE",
        "CREATE TRANSFORM",
        "CREATE TRIGGER",
        "CREATE TYPE",
        "CREATE USER MAPPING",
        "CREATE USER",
        "CREATE VIEW",
        "DEALLOCATE ALL",
        "DEALLOCATE",
        "DECLARE",
        "DELETE",
        "DISCARD",
        "DO",
        "DROP ACCESS METHOD",
        "DROP AGGREGATE",
        "DROP CAST",
        "DROP COLLATION",
        "DROP CONVERSION",
        "DROP DATABASE",
        "DROP DOMAIN",
        "DROP EVENT TRIGGER",
        "DROP EXTENSION",
        "DROP FOREIGN DATA WRAPPER",
        "DROP FOREIGN TABLE",
        "DROP FUNCTION",
        "DROP GROUP",
        "DROP INDEX",
        "DROP LANGUAGE",
        "DROP MATERIALIZED VIEW",
        "DROP OPERATOR CLASS",
        "DROP OPERATOR FAMILY",
        "DROP OPERATOR",
        "DROP OWNED",
        "DROP POLICY",
        "DROP PUBLICATION",
        "DROP ROLE",
        "DROP RULE",
        "DROP SCHEMA",
        "DROP SEQUENCE",
        "DROP SERVER",
        "DROP STATISTICS",
        "DROP SUBSCRIPTION",
        "DROP TABLESPACE",
        "DROP TABLE",
        "DROP TEXT SEARCH CONFIGURATION",
        "DROP TEXT SEARCH DICTIONARY",
        "DROP TEXT SEARCH PARSER",
        "DROP TEXT SEARCH TEMPLATE",
        "DROP TRANSFORM",
        "DROP TRIGGER",
        "DROP TYPE",
        "DROP USER MAPPING",
        "DROP USER",
        "DROP VIEW",
        "END",
        "EXECUTE",
        "GRANT",
        "IMPORT FOREIGN SCHEMA",
        "INSERT",
        "LISTEN",
        "LOAD",
        "LOCK",
        "MOVE",
        "NOTIFY",
        "PREPARE TRANSACTION",
        "PREPARE",
        "REASSIGN OWNED",
        "REFRESH MATERIALIZED VIEW",
        "REINDEX",
        "RELEASE",
        "RESET",
        "REVOKE",
        "ROLLBACK PREPARED",
        "ROLLBACK TO SAVEPOINT",
        "ROLLBACK",
        "SAVEPOINT",
        "SECURITY LABEL",
        "SELECT INTO",
        "SET CONSTRAINTS",
        "SET ROLE",
        "SET SESSION AUTHORIZATION",
        "SET TRANSACTION",
        "SET",
        "START TRANSACTION",
        "TRUNCATE",
        "UNLISTEN",
        "UPDATE",
        "VACUUM",
        # oracle
        "ADMINISTER KEY MANAGEMENT",
        "ALTER ANALYTIC VIEW",
        "ALTER ATTRIBUTE DIMENSION",
        "ALTER AUDIT POLICY",
        "ALTER CLUSTER",
        "ALTER DATABASE DICTIONARY",
        "ALTER DATABASE LINK",
        "ALTER DIMENSION",
        "ALTER DISKGROUP",
        "ALTER FLASHBACK ARCHIVE",
        "ALTER HEIRARCHY",
        "ALTER INMEMORY JOIN GROUP",
        "ALTER JAVA",
        "ALTER LIBRARY",
        "ALTER LOCKDOWN PROFILE",
        "ALTER MATERIALIZED VIEW LOG",
        "ALTER MATERIALIZED ZONEMAP",
        "ALTER PACKAGE",
        "ALTER PLUGGABLE DATABASE",
        "ALTER PROCEDURE",
        "ALTER PROFILE",
        "ALTER RESOURCE COST",
        "ALTER ROLLBACK SEGMENT",
        "ALTER SESSION",
        "ALTER SYNONYM",
        "ALTER TABLESPACE SET",
        "ASSOCIATE STATISTICS",
    }
)

# Words following CREATE that do not change the kind of statement.
_CREATE_IGNORE = frozenset(
    {
        "DEFAULT",
        "GLOBAL",
        "LOCAL",
        "OR",
        "PROCEDURAL",
        "RECURSIVE",
        "REPLACE",
        "TEMPORARY",
        "TEMP",
        "TRUSTED",
        "UNIQUE",
        "UNLOGGED",
    }
)


def _normalize(words: list[str]) -> list[str]:
    """Drop modifiers that do not affect the statement type."""
    head, rest = words[0], words[1:]
    if head == "CREATE":
        return [head, *(w for w in rest if w not in _CREATE_IGNORE)]
    if head == "DROP":
        # "DROP [PROCEDURAL] LANGUAGE" => "DROP LANGUAGE"
        return [head, *(w for w in rest if w != "PROCEDURAL")]
    return words


def query_exec_type(prefix: str, sqlstr: str) -> tuple[str, bool]:
    """Return the statement type for ``prefix`` and whether it returns rows.

    ``prefix`` is the upper-cased, space-separated leading words of the
    statement; ``sqlstr`` is the full statement text.
    """
    if prefix == "":
        return "EXEC", False
    words = prefix.split(" ")
    head = words[0]
    if head in _QUERY_PREFIXES:
        if head == "SELECT" and len(words) >= 2 and words[1] == "INTO":
            return "SELECT INTO", False
        if head == "PRAGMA":
            return head, "=" not in sqlstr
        return head, True
    words = _normalize(words)
    for end in range(len(words), 0, -1):
        candidate = " ".join(words[:end])
        if candidate in _EXEC_PREFIXES:
            return candidate, False
    return words[0], False