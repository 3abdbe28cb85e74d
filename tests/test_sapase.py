import pytest

from unisql.sapase import change_password_sql, error_message, is_password_error, process


def test_process_trims_and_classifies():
    assert process("SELECT", "select 1;\n") == ("SELECT", "select 1", True)


def test_process_exec_statement():
    typ, sqlstr, is_query = process("INSERT", "insert into t values (1)")
    assert (typ, sqlstr, is_query) == ("INSERT", "insert into t values (1)", False)


def test_error_message_keeps_last_marker():
    assert error_message("driver: tds: first tds: Msg 102") == "tds: Msg 102"


def test_error_message_without_marker():
    msg = "connection refused"
    assert error_message(msg) == msg


def test_is_password_error():
    assert is_password_error("Msg 4002: Login failed.") is True
    assert is_password_error("syntax error") is False


def test_change_password_sql():
    assert change_password_sql("", "secret", "password") == "exec sp_password 'password', 'secret'"


def test_change_password_for_other_user_rejected():
    with pytest.raises(ValueError):
        change_password_sql("someone", "secret", "password")