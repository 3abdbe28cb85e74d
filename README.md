# unisql

The pieces of a command-line SQL client that do not depend on a live
database connection: deciding whether a statement returns rows, keeping the
client's variables and display settings, talking to the user's shell and
editor, and the small dialect rules each database family needs.

The package uses only the Python standard library and supports Python 3.10
and later.

## Classifying statements

`unisql.querytype.query_exec_type(prefix, sqlstr)` takes the upper-cased,
space-separated leading words of a statement and the statement itself. It
returns the statement type and whether the statement should be run as a
query (returning rows) rather than executed:

```python
from unisql.querytype import query_exec_type

query_exec_type("SELECT", "select * from film")           # ("SELECT", True)
query_exec_type("SELECT INTO", "select * into t from s")   # ("SELECT INTO", False)
query_exec_type("CREATE OR REPLACE VIEW", "...")           # ("CREATE VIEW", False)
query_exec_type("PRAGMA", "pragma foreign_keys = on")      # ("PRAGMA", False)
query_exec_type("", "")                                    # ("EXEC", False)
```

Modifiers such as `OR REPLACE`, `TEMPORARY` or `UNIQUE` after `CREATE`, and
`PROCEDURAL` after `DROP`, are ignored; the longest known prefix wins.

## Variables, display settings and named connections

`unisql.settings.Settings` is a dataclass holding three groups of values:

* variables (`vars`): `ON_ERROR_STOP`, `QUIET`, `PROMPT1`, `PAGER`, ...
* display settings (`pvars`): `format`, `border`, `expanded`, `pager`, ...
* named connections (`cvars`).

```python
import sys
from unisql.settings import Settings

settings = Settings.from_environment()   # or Settings() for plain defaults
settings.set("ON_ERROR_STOP", "true")
settings.get("ON_ERROR_STOP")            # "on"

settings.pset("format", "csv")           # "csv"
settings.ptoggle("expanded", "")         # "on"
settings.pwrite(sys.stdout)              # sorted "name value" lines

settings.cset("sakila", "sqlite3", "sakila.db")
settings.cget("sakila")                  # ["sqlite3", "sakila.db"]

settings.go_time()                       # layout for the "time" setting
settings.listing(sys.stdout)             # help text for special variables
```

`from_environment` reads `UNISQL_SHOW_HOST_INFORMATION`, `NO_COLOR`,
`UNISQL_PAGER`/`PAGER`, `UNISQL_EDITOR`/`EDITOR`/`VISUAL`,
`UNISQL_SSLMODE`/`SSLMODE` and the terminal's colour support.

The module also offers `valid_identifier`, `parse_bool`,
`parse_keyword_bool` and `build_config_dir`. Invalid names and values raise
exceptions from `unisql.errors`, all derived from `UsqlError`
(`InvalidIdentifierError`, `InvalidValueError`, `UnknownFieldError`, ...).

## Quoting, the shell and the editor

`unisql.shell` covers what a backslash command needs from the environment:

```python
from unisql.shell import dequote, get_var, exec_shell

dequote("'it''s'", "'")             # "it's"
get_var("name", {"name": "x"})      # (True, "x")
get_var("'name'", {"name": "x"})    # (True, "'x'")
exec_shell("echo hello")            # "hello"
```

`make_unquoter(home, execute, variables)` builds the function used while
parsing backslash command arguments: single and double quoted strings are
unquoted, variables are looked up, and backtick strings are run through the
user's shell when `execute` is true. `get_shell`, `shell` and `pipe` start
the user's shell (`SHELL`, `COMSPEC`, or `sh`/`cmd.exe` from the path).
`edit_file`, `history_file`, `rc_file`, `open_file` and `chdir` take the
user's home directory and expand `~` paths against it; `history_file` and
`rc_file` honour `UNISQL_HISTORY` and `UNISQLRC`.

## SQLite timestamps

`unisql.sqlitetime` understands the timestamp shapes SQLite drivers store
and formats times with reference-time layouts (`2006-01-02T15:04:05Z07:00`
and the like):

```python
from unisql.sqlitetime import convert_bytes, parse_time

parse_time("2006-01-02 15:04:05")        # datetime in UTC
convert_bytes(b"2006-01-02", "2006-01-02T15:04:05Z07:00")
# "2006-01-02T00:00:00Z"
convert_bytes(b"hello", "2006-01-02")    # "hello"
```

## Database dialect helpers

* `unisql.sqlitemeta` – `SqliteMetadataReader` lists tables, columns,
  schemas, functions, indexes and index columns of a `sqlite3` connection,
  returning `Table`, `Column`, `Schema`, `Function`, `Index` and
  `IndexColumn` records.
* `unisql.sqlserver` – `data_type_formatter`, `@pN` placeholders, error
  text, password changes, `build_query` and `index_conditions`.
* `unisql.oracle` – `trim_terminator` (drops a trailing `;` except after
  `END;`), `process`, `service_path` (default service from
  `ORACLE_SID`/`ORASID`), `split_error`, `is_password_error`,
  `change_password_sql` and `:N` placeholders.
* `unisql.odbc` – optional trailing `;` trimming and login failure detection.
* `unisql.trino` – statement processing for Trino and Presto, and column
  statistics for `SHOW STATS FOR` (`stats_query`, `parse_stats_rows`,
  `ColumnStat`).
* `unisql.sapase` – SAP ASE statement processing, error text and
  `sp_password`.
* `unisql.vertica` – `[CODE] message` error splitting, password helpers and
  `check_tls_mode`, which requires `tlsmode=server-strict` when `ca_path` is
  set.
* `unisql.postgres` – `COPY` helpers, notice formatting, CockroachDB
  parameters and the `sslmode` retry rule.

## What the package does not do

There is no interactive command or prompt, and no command-line entry point.
The package does not open connections to any database except through the
`sqlite3` connection you pass to `SqliteMetadataReader`; the other dialect
modules only build statements and interpret error messages. It does not
render result tables: display settings are stored and validated, not
applied to output.

## Running the tests

Install the `test` extra and run `pytest` from the project directory.