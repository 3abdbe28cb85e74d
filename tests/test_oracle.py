import pytest

from unisql import oracle


def test_trim_terminator_removes_semicolon_and_space():
    assert oracle.trim_terminator("select 1 from dual;  \n") == "select 1 from dual"


def test_trim_terminator_keeps_end_block():
    block = "begin\n  null;\nend;"
    assert oracle.trim_terminator(block) == block


def test_trim_terminator_keeps_end_case_insensitive():
    block = "BEGIN NULL; END ;  "
    assert oracle.trim_terminator(block) == block


def test_process_query():
    assert oracle.process("SELECT", "select 1 from dual;") == (
        "SELECT",
        "select 1 from dual",
        True,
    )


def test_process_exec():
    typ, sql, is_query = oracle.process("CREATE TABLE", "create table t (a int);")
    assert typ == "CREATE TABLE"
    assert sql == "create table t (a int)"
    assert is_query is False


def test_service_path_from_environment(monkeypatch):
    monkeypatch.delenv("ORACLE_SID", raising=False)
    monkeypatch.setenv("ORASID", "orcl")
    assert oracle.service_path("", "") == ("/orcl", "localhost")


def test_service_path_keeps_host(monkeypatch):
    monkeypatch.setenv("ORACLE_SID", "orcl")
    assert oracle.service_path("/", "db.example.com") == ("/orcl", "db.example.com")


def test_service_path_unchanged_when_set(monkeypatch):
    monkeypatch.setenv("ORACLE_SID", "orcl")
    assert oracle.service_path("/xe", "") == ("/xe", "")


def test_service_path_without_environment(monkeypatch):
    monkeypatch.delenv("ORACLE_SID", raising=False)
    monkeypatch.delenv("ORASID", raising=False)
    assert oracle.service_path("", "") == ("", "")


def test_split_error_with_code():
    assert oracle.split_error("  table does not exist ", 942) == (
        "ORA-00942",
        "table does not exist",
    )


def test_split_error_without_code():
    assert oracle.split_error("boom") == ("", "boom")


def test_is_password_error():
    assert oracle.is_password_error("ORA-01005: empty password given")
    assert not oracle.is_password_error("invalid username")


def test_change_password_sql():
    new_password = "password"
    assert (
        oracle.change_password_sql("scott", new_password)
        == "ALTER USER scott IDENTIFIED BY password"
    )


def test_placeholder():
    assert oracle.placeholder(3) == ":3"