from unisql.postgres import (
    change_password_sql,
    copy_column_query,
    copy_in_sql,
    force_params,
    format_notice,
    needs_ssl_retry,
)


def test_copy_column_query_whole_table():
    query, name = copy_column_query("public.films")
    assert query == "SELECT * FROM public.films WHERE 1=0"
    assert name == "public.films"


def test_copy_column_query_with_columns():
    query, name = copy_column_query("films(id, title)")
    assert query == "SELECT id, title FROM films WHERE 1=0"
    assert name == "films"


def test_copy_in_sql_plain_table():
    assert copy_in_sql("films", ["id", "title"]) == 'COPY "films" ("id", "title") FROM STDIN'


def test_copy_in_sql_with_schema():
    assert copy_in_sql("public.films", ["id"]) == 'COPY "public"."films" ("id") FROM STDIN'


def test_copy_in_sql_quotes_identifiers():
    sql = copy_in_sql("t", ['we"ird', "cut\x00off"])
    assert '"we""ird"' in sql
    assert '"cut"' in sql
    assert "off" not in sql


def test_change_password_sql():
    new_password = "password"
    assert change_password_sql("bob", new_password) == "ALTER USER bob PASSWORD 'password'"


def test_format_notice_without_hint():
    out = format_notice("NOTICE", "table created")
    assert out.splitlines() == ["NOTICE:  table created"]


def test_format_notice_with_hint():
    out = format_notice("WARNING", "deprecated", "use the new form")
    lines = out.splitlines()
    assert len(lines) == 2
    assert lines[1] == "HINT:  use the new form"
    assert out.endswith("\n")


def test_force_params_cockroach():
    original = {"sslmode": "require", "application_name": "x"}
    forced = force_params("cockroachdb", original)
    assert forced["sslmode"] == "disable"
    assert forced["application_name"] == "x"
    assert original["sslmode"] == "require"


def test_force_params_other_schemes_unchanged():
    original = {"sslmode": "require"}
    assert force_params("postgres", original) == original
    assert force_params("redshift", {}) == {}


def test_needs_ssl_retry():
    assert needs_ssl_retry("retry", {})
    assert not needs_ssl_retry("retry", {"sslmode": "require"})
    assert not needs_ssl_retry("disable", {})