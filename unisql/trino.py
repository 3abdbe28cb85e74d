"""Statement handling and column statistics for Presto and Trino."""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from unisql.querytype import query_exec_type

__all__ = ["ColumnStat", "process", "stats_query", "parse_stats_rows"]

_END_RE = re.compile(r";?[\t\n\f\r ]*\Z")


@dataclass
class ColumnStat:
    """Statistics for one column of a table."""

    catalog: str = ""
    schema: str = ""
    table: str = ""
    name: str = ""
    avg_width: int = 0
    null_frac: float = 0.0
    num_distinct: int = 0
    min: str = ""
    max: str = ""
    mean: str = ""
    top_n: list[str] = field(default_factory=list)
    top_n_freqs: list[float] = field(default_factory=list)


def process(prefix: str, sqlstr: str) -> tuple[str, str, bool]:
    """Drop a trailing ``;`` and whitespace, then classify the statement.

    Returns the statement type, the statement to send and whether it
    returns rows.
    """
    sqlstr = _END_RE.sub("", sqlstr)
    typ, is_query = query_exec_type(prefix, sqlstr)
    return typ, sqlstr, is_query


def stats_query(catalog: str, schema: str, table: str) -> str:
    """Return the statement that reports statistics for ``table``."""
    names = []
    if catalog:
        names.append(catalog + ".")
    if schema:
        names.append(schema + ".")
    names.append(table)
    return "SHOW STATS FOR " + "".join(names)


def parse_stats_rows(
    rows: Iterable[Sequence[object]], catalog: str, schema: str, table: str
) -> list[ColumnStat]:
    """Convert rows of a stats query into :class:`ColumnStat` records.

    Each row holds the column name, data size, distinct count, nulls
    fraction, row count, low and high value. Rows without a column name
    (the table summary) are skipped.
    """
    results = []
    for name, avg_width, num_distinct, null_frac, _num_rows, low, high in rows:
        if name is None:
            continue
        results.append(
            ColumnStat(
                catalog=catalog,
                schema=schema,
                table=table,
                name=str(name),
                avg_width=int(avg_width) if avg_width is not None else 0,
                num_distinct=int(num_distinct) if num_distinct is not None else 0,
                null_frac=float(null_frac) if null_frac is not None else 0.0,
                min=str(low) if low is not None else "",
                max=str(high) if high is not None else "",
            )
        )
    return results