import pytest

from unisql import odbc


def test_process_trims_when_enabled():
    assert odbc.process("on", "SELECT", "select 1;") == ("SELECT", "select 1", True)


@pytest.mark.parametrize("trim", ["", "off", "OFF", "0", "false", "False"])
def test_process_keeps_when_disabled(trim):
    typ, sql, is_query = odbc.process(trim, "SELECT", "select 1;")
    assert sql == "select 1;"
    assert typ == "SELECT"
    assert is_query is True


def test_process_keeps_end_block():
    block = "begin\n  x := 1;\nend;"
    assert odbc.process("true", "BEGIN", block)[1] == block


def test_process_exec_type():
    typ, sql, is_query = odbc.process("yes", "INSERT INTO", "insert into t values (1) ; ")
    assert typ == "INSERT"
    assert sql == "insert into t values (1) "
    assert is_query is False


@pytest.mark.parametrize(
    "message",
    [
        "Login failed for user 'sa'",
        "Authentication FAILED",
        "password check failed",
    ],
)
def test_is_password_error_true(message):
    assert odbc.is_password_error(message) is True


@pytest.mark.parametrize(
    "message",
    ["connection failed", "login denied", "wrong password"],
)
def test_is_password_error_false(message):
    assert odbc.is_password_error(message) is False