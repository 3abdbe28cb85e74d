import pytest

from unisql.querytype import query_exec_type


def test_empty_prefix_is_exec():
    assert query_exec_type("", "") == ("EXEC", False)


@pytest.mark.parametrize(
    "keyword",
    ["WITH", "EXPLAIN", "DESCRIBE", "DESC", "FETCH", "SELECT", "SHOW",
     "VALUES", "LIST", "EXEC", "TABLE", "CALL", "FROM"],
)
def test_query_keywords_return_rows(keyword):
    assert query_exec_type(keyword + " X Y", keyword + " x y") == (keyword, True)


def test_select_into_is_executed():
    assert query_exec_type("SELECT INTO FOO", "select into foo") == ("SELECT INTO", False)


def test_select_without_into_is_query():
    assert query_exec_type("SELECT A", "select a") == ("SELECT", True)


def test_pragma_with_assignment_is_executed():
    assert query_exec_type("PRAGMA FOREIGN_KEYS", "pragma foreign_keys = on") == ("PRAGMA", False)


def test_pragma_without_assignment_is_query():
    assert query_exec_type("PRAGMA TABLE_INFO", "pragma table_info(t)") == ("PRAGMA", True)


def test_create_or_replace_view_normalized():
    assert query_exec_type("CREATE OR REPLACE VIEW", "") == ("CREATE VIEW", False)


def test_create_unique_index_normalized():
    assert query_exec_type("CREATE UNIQUE INDEX IDX", "") == ("CREATE INDEX", False)


def test_create_temporary_table_normalized():
    assert query_exec_type("CREATE TEMPORARY TABLE T", "") == ("CREATE TABLE", False)


def test_create_table_as_longest_match():
    assert query_exec_type("CREATE TABLE AS", "") == ("CREATE TABLE AS", False)


def test_drop_procedural_language_normalized():
    assert query_exec_type("DROP PROCEDURAL LANGUAGE", "") == ("DROP LANGUAGE", False)


def test_longest_match_wins():
    assert query_exec_type("ALTER MATERIALIZED VIEW LOG", "") == (
        "ALTER MATERIALIZED VIEW LOG",
        False,
    )
    assert query_exec_type("ALTER MATERIALIZED VIEW X", "") == (
        "ALTER MATERIALIZED VIEW",
        False,
    )


def test_insert_is_executed():
    assert query_exec_type("INSERT INTO T", "insert into t values (1)") == ("INSERT", False)


def test_rollback_to_savepoint():
    assert query_exec_type("ROLLBACK TO SAVEPOINT SP", "") == ("ROLLBACK TO SAVEPOINT", False)


def test_unknown_prefix_returns_first_word():
    assert query_exec_type("FOOBAR BAZ", "foobar baz") == ("FOOBAR", False)


def test_unknown_create_returns_create():
    assert query_exec_type("CREATE WIDGET", "") == ("CREATE", False)


def test_executed_statements_never_return_rows():
    prefixes = ["BEGIN", "COMMIT", "DELETE FROM T", "UPDATE T", "VACUUM", "GRANT ALL"]
    for prefix in prefixes:
        typ, is_query = query_exec_type(prefix, prefix.lower())
        assert is_query is False
        assert prefix.startswith(typ)