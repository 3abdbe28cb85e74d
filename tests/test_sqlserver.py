import pytest

from unisql import sqlserver


@pytest.mark.parametrize(
    "data_type, size, digits, want",
    [
        ("bigint", 19, 0, "bigint"),
        ("numeric", 18, 0, "numeric"),
        ("numeric", 4, 2, "numeric(4,2)"),
        ("decimal", 18, 0, "decimal"),
        ("decimal", 4, 2, "decimal(4,2)"),
        ("bit", 1, 0, "bit"),
        ("smallint", 5, 0, "smallint"),
        ("smallmoney", 10, 4, "smallmoney"),
        ("int", 10, 0, "int"),
        ("tinyint", 3, 0, "tinyint"),
        ("money", 19, 4, "money"),
        ("float", 53, 0, "float"),
        ("real", 24, 0, "real"),
        ("date", 0, 0, "date"),
        ("datetimeoffset", 7, 0, "datetimeoffset"),
        ("datetimeoffset", 5, 0, "datetimeoffset(5)"),
        ("datetime2", 7, 0, "datetime2"),
        ("datetime2", 5, 0, "datetime2(5)"),
        ("smalldatetime", 0, 0, "smalldatetime"),
        ("datetime", 3, 0, "datetime"),
        ("time", 7, 0, "time"),
        ("time", 5, 0, "time(5)"),
        ("char", 1, 0, "char"),
        ("char", 3, 0, "char(3)"),
        ("varchar", 1, 0, "varchar"),
        ("varchar", 12, 0, "varchar(12)"),
        ("varchar", -1, 0, "varchar(max)"),
        ("text", 2147483647, 0, "text"),
        ("nchar", 1, 0, "nchar"),
        ("nchar", 2, 0, "nchar(2)"),
        ("nvarchar", 1, 0, "nvarchar"),
        ("nvarchar", 12, 0, "nvarchar(12)"),
        ("nvarchar", -1, 0, "nvarchar(max)"),
        ("ntext", 1073741823, 0, "ntext"),
        ("binary", 1, 0, "binary"),
        ("binary", 12, 0, "binary(12)"),
        ("varbinary", 1, 0, "varbinary"),
        ("varbinary", 12, 0, "varbinary(12)"),
        ("varbinary", -1, 0, "varbinary(max)"),
        ("image", 2147483647, 0, "image"),
        ("timestamp", 8, 0, "timestamp"),
        ("hierarchyid", 892, 0, "hierarchyid"),
        ("uniqueidentifier", 16, 0, "uniqueidentifier"),
        ("sql_variant", 0, 0, "sql_variant"),
        ("xml", -1, 0, "xml"),
        ("geometry", -1, 0, "geometry"),
        ("geography", -1, 0, "geography"),
    ],
)
def test_data_type_formatter(data_type, size, digits, want):
    assert sqlserver.data_type_formatter(data_type, size, digits) == want


def test_placeholder():
    assert [sqlserver.placeholder(n) for n in (1, 2)] == ["@p1", "@p2"]


def test_error_message_strips_prefix():
    msg = "mssql: login error: sqlserver: connection refused"
    assert sqlserver.error_message(msg) == "sqlserver: connection refused"


def test_error_message_without_marker():
    assert sqlserver.error_message("plain failure") == "plain failure"


def test_is_password_error():
    assert sqlserver.is_password_error("Login failed for user 'sa'.")
    assert not sqlserver.is_password_error("Login denied")


def test_change_password_sql():
    new_password = "password"
    old_password = "secret"
    assert sqlserver.change_password_sql("sa", new_password, old_password) == (
        "ALTER LOGIN sa WITH password = 'password' old_password = 'secret'"
    )


def test_build_query_full():
    query = sqlserver.build_query("SELECT name FROM sys.databases", ["a = 1", "b = 2"], "name", 5)
    assert query == (
        "SELECT name FROM sys.databases\nWHERE a = 1 AND b = 2"
        "\nORDER BY name\nFETCH FIRST 5 ROWS ONLY"
    )


def test_build_query_plain():
    assert sqlserver.build_query("SELECT 1", [], "", 0) == "SELECT 1"


def test_index_conditions_all_filters():
    conds, vals = sqlserver.index_conditions(
        "dbo", "film", "idx%", only_visible=True, with_system=False
    )
    assert conds[0] == "s.name = schema_name()"
    assert conds[1].startswith("s.name NOT IN ('db_accessadmin'")
    assert "'sys')" in conds[1]
    assert conds[2:] == ["s.name LIKE @p1", "t.name LIKE @p2", "i.name LIKE @p3"]
    assert vals == ["dbo", "film", "idx%"]


def test_index_conditions_with_system_and_parent_only():
    conds, vals = sqlserver.index_conditions(parent="film", with_system=True)
    assert conds == ["t.name LIKE @p1"]
    assert vals == ["film"]


def test_index_conditions_placeholder_count_matches_values():
    conds, vals = sqlserver.index_conditions(schema="dbo", name="pk%", with_system=True)
    assert len(conds) == len(vals)
    assert conds == ["s.name LIKE @p1", "i.name LIKE @p2"]