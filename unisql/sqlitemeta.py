"""Read catalog metadata (tables, columns, functions, indexes) from SQLite."""

from __future__ import annotations

import logging
import sqlite3
from collections.abc import Sequence
from dataclasses import dataclass, field

__all__ = [
    "Table",
    "Column",
    "Schema",
    "Function",
    "Index",
    "IndexColumn",
    "SqliteMetadataReader",
]

_log = logging.getLogger(__name__)

_TABLES_QUERY = r"""SELECT
  '' AS table_catalog,
  '' AS table_schem,
  table_name,
  table_type
FROM (
    SELECT
      name AS table_name,
      UPPER(type) AS table_type
    FROM sqlite_master
    WHERE name NOT LIKE 'sqlite\_%' ESCAPE '\' AND UPPER(type) IN ('TABLE', 'VIEW')
    UNION ALL
    SELECT
      name AS table_name,
      'GLOBAL TEMPORARY' AS table_type
    FROM sqlite_temp_master
    UNION ALL
    SELECT
      name AS table_name,
      'SYSTEM TABLE' AS table_type
    FROM sqlite_master
    WHERE name LIKE 'sqlite\_%' ESCAPE '\' AND UPPER(type) IN ('TABLE', 'VIEW')
    UNION ALL
    SELECT
      name AS table_name,
      'SYSTEM TABLE' AS table_type
    FROM pragma_module_list
)"""

_COLUMNS_QUERY = """SELECT
  cid,
  name,
  type,
  CASE WHEN "notnull" = 1 THEN 'NO' ELSE 'YES' END,
  COALESCE(dflt_value, '')
FROM pragma_table_info(?)"""

_SCHEMAS_QUERY = """SELECT
  name AS schema_name,
  '' AS catalog_name
FROM pragma_database_list"""

_FUNCTIONS_QUERY = """SELECT
  name AS specific_name,
  name AS routine_name,
  type AS routine_type
FROM pragma_function_list"""

_INDEXES_QUERY = """SELECT
  m.name,
  i.name,
  CASE WHEN i."unique" = 1 THEN 'YES' ELSE 'NO' END,
  CASE WHEN i.origin = 'pk' THEN 'YES' ELSE 'NO' END
FROM sqlite_master m
JOIN pragma_index_list(m.name) i"""

_INDEX_COLUMNS_QUERY = """SELECT
  m.name,
  i.name,
  ic.name,
  ic.seqno
FROM sqlite_master m
JOIN pragma_index_list(m.name) i
JOIN pragma_index_xinfo(i.name) ic"""


@dataclass
class Table:
    """A table or view."""

    catalog: str = ""
    schema: str = ""
    name: str = ""
    type: str = ""
    rows: int = 0
    size: str = ""
    comment: str = ""


@dataclass
class Column:
    """A column of a table or view."""

    catalog: str = ""
    schema: str = ""
    table: str = ""
    name: str = ""
    ordinal_position: int = 0
    data_type: str = ""
    is_nullable: str = ""
    default: str = ""
    column_size: int = 0
    decimal_digits: int = 0
    num_prec_radix: int = 0
    char_octet_length: int = 0


@dataclass
class Schema:
    """An attached database."""

    schema: str = ""
    catalog: str = ""


@dataclass
class Function:
    """A SQL function known to the connection."""

    specific_name: str = ""
    name: str = ""
    type: str = ""
    catalog: str = ""
    schema: str = ""
    result_type: str = ""
    arg_types: str = ""


@dataclass
class Index:
    """An index on a table."""

    table: str = ""
    name: str = ""
    is_unique: str = ""
    is_primary: str = ""
    catalog: str = ""
    schema: str = ""
    type: str = ""
    columns: str = ""


@dataclass
class IndexColumn:
    """A column that is part of an index."""

    table: str = ""
    index_name: str = ""
    name: str = ""
    ordinal_position: int = 0
    catalog: str = ""
    schema: str = ""
    data_type: str = ""


@dataclass
class SqliteMetadataReader:
    """Query catalog metadata from an open SQLite connection."""

    conn: sqlite3.Connection
    limit: int = 0
    _unused: list = field(default_factory=list, repr=False)

    def _query(
        self,
        qstr: str,
        conds: Sequence[str],
        order: str,
        vals: Sequence[object] = (),
    ) -> list[tuple]:
        if conds:
            qstr += "\nWHERE " + " AND ".join(conds)
        if order:
            qstr += "\nORDER BY " + order
        if self.limit:
            qstr += f"\nLIMIT {self.limit}"
        _log.debug("%s %r", qstr, list(vals))
        return self.conn.execute(qstr, list(vals)).fetchall()

    def tables(
        self,
        catalog: str = "",
        schema: str = "",
        name: str = "",
        types: Sequence[str] = (),
    ) -> list[Table]:
        """Return tables matching the LIKE patterns and the given types."""
        conds: list[str] = []
        vals: list[object] = []
        if catalog:
            vals.append(catalog)
            conds.append("table_catalog = ?")
        if schema:
            vals.append(schema)
            conds.append("table_schema LIKE ?")
        if name:
            vals.append(name)
            conds.append("table_name LIKE ?")
        if types:
            vals.extend(types)
            conds.append("table_type IN (" + ", ".join("?" for _ in types) + ")")
        rows = self._query(_TABLES_QUERY, conds, "table_type, table_name", vals)
        return [Table(catalog=c, schema=s, name=n, type=t) for c, s, n, t in rows]

    def columns(self, catalog: str = "", schema: str = "", parent: str = "") -> list[Column]:
        """Return the columns of every table whose name matches ``parent``."""
        results: list[Column] = []
        for table in self.tables(catalog=catalog, schema=schema, name=parent):
            rows = self._query(_COLUMNS_QUERY, [], "name", [table.name])
            results.extend(
                Column(
                    catalog=table.catalog,
                    schema=table.schema,
                    table=table.name,
                    ordinal_position=cid,
                    name=col_name,
                    data_type=data_type,
                    is_nullable=nullable,
                    default=default,
                )
                for cid, col_name, data_type, nullable, default in rows
            )
        return results

    def schemas(self, name: str = "") -> list[Schema]:
        """Return attached databases whose name matches ``name``."""
        conds: list[str] = []
        vals: list[object] = []
        if name:
            vals.append(name)
            conds.append("schema_name LIKE ?")
        rows = self._query(_SCHEMAS_QUERY, conds, "seq", vals)
        return [Schema(schema=s, catalog=c) for s, c in rows]

    def functions(self, name: str = "", types: Sequence[str] = ()) -> list[Function]:
        """Return functions matching ``name`` and of the given types."""
        conds: list[str] = []
        vals: list[object] = []
        if name:
            vals.append(name)
            conds.append("name LIKE ?")
        if types:
            vals.extend(types)
            conds.append("type IN (" + ", ".join("?" for _ in types) + ")")
        rows = self._query(_FUNCTIONS_QUERY, conds, "name, type", vals)
        return [Function(specific_name=s, name=n, type=t) for s, n, t in rows]

    def function_columns(self) -> list:
        """Return function arguments; SQLite does not expose any."""
        return []

    def indexes(self, parent: str = "", name: str = "") -> list[Index]:
        """Return indexes of tables matching ``parent`` and named like ``name``."""
        conds = ["m.type = 'table'"]
        vals: list[object] = []
        if parent:
            vals.append(parent)
            conds.append("m.name LIKE ?")
        if name:
            vals.append(name)
            conds.append("i.name LIKE ?")
        rows = self._query(_INDEXES_QUERY, conds, "m.name, i.seq", vals)
        return [
            Index(table=t, name=n, is_unique=u, is_primary=p) for t, n, u, p in rows
        ]

    def index_columns(self, parent: str = "", name: str = "") -> list[IndexColumn]:
        """Return the columns of matching indexes, in key order."""
        conds = ["m.type = 'table' AND ic.cid >= 0"]
        vals: list[object] = []
        if parent:
            vals.append(parent)
            conds.append("m.name LIKE ?")
        if name:
            vals.append(name)
            conds.append("i.name LIKE ?")
        rows = self._query(_INDEX_COLUMNS_QUERY, conds, "m.name, i.seq, ic.seqno", vals)
        return [
            IndexColumn(table=t, index_name=i, name=n, ordinal_position=pos)
            for t, i, n, pos in rows
        ]