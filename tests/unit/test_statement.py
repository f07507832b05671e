"""Unit tests for sqlsnip.statement.

Covers default templates, snippet generation for every statement type, the
parameter store, query assembly and the prepared statement cache.
"""

import copy
import logging
from typing import Any

import pytest

from sqlsnip import ConfigurationError, JoinKind, SQLBuilderError, Statement, StatementType

EXPECTED_SELECT_TABLES = (
    "schema.tblA tblA, schema.tblB b, schema.tblC c ON tblA.index = c.index, "
    "schema.tbld d ON tblA.index = d.index, schema.tblE e ON tblA.index = e.index, "
    "schema.tblF f ON tblA.index = f.index"
)


@pytest.mark.parametrize(
    ("kind", "expected"),
    [
        (StatementType.SELECT, "SELECT {{columns}} FROM {{tables}} {{where}} {{sort}} {{pagination}}"),
        (StatementType.INSERT, "INSERT {{columns}} INTO {{tables}}"),
        (StatementType.UPDATE, "UPDATE {{table}} SET {{columns}} {{where}}"),
        (StatementType.DELETE, "DELETE FROM {{table}} {{where}}"),
    ],
    ids=["select", "insert", "update", "delete"],
)
def test_default_templates(kind: StatementType, expected: str) -> None:
    """Test each statement type installs its canned template."""
    statement = Statement().set_type(kind)

    assert statement.get_template() == expected
    assert statement.statement_type is kind


@pytest.mark.parametrize(
    ("method", "kind"),
    [
        ("select", StatementType.SELECT),
        ("insert", StatementType.INSERT),
        ("update", StatementType.UPDATE),
        ("delete", StatementType.DELETE),
    ],
)
def test_type_shorthands(method: str, kind: StatementType) -> None:
    """Test select()/insert()/update()/delete() match set_type."""
    statement = getattr(Statement(), method)()

    assert statement.statement_type is kind
    assert statement.template == Statement().set_type(kind).template


def test_set_type_accepts_integer_values() -> None:
    """Test the stable integer values map onto statement types."""
    assert Statement().set_type(1).statement_type is StatementType.SELECT
    assert Statement().set_type(4).statement_type is StatementType.DELETE


def test_set_type_rejects_unknown_values() -> None:
    with pytest.raises(SQLBuilderError, match="Unknown statement type"):
        Statement().set_type(9)


def test_set_type_with_custom_template() -> None:
    statement = Statement().select("SELECT {{columns}} FROM t")

    assert statement.template == "SELECT {{columns}} FROM t"
    assert statement.statement_type is StatementType.SELECT


def test_custom_template() -> None:
    """Test set_template stores the string verbatim."""
    statement = Statement().set_template("your query here")

    assert statement.get_template() == "your query here"
    assert statement.statement_type is None


def test_generate_tables_for_each_type(joined_select: Statement) -> None:
    """Test table rendering for SELECT, INSERT, UPDATE and DELETE."""
    assert joined_select.generate_tables() == EXPECTED_SELECT_TABLES

    joined_select.insert()
    assert joined_select.generate_tables() == "schema.tblA"

    joined_select.update()
    assert joined_select.generate_tables() == "schema.tblA"

    joined_select.delete()
    assert joined_select.generate_tables() == ""


def test_add_join_accepts_kind_keyword() -> None:
    statement = Statement().select().add_table("a").add_join("LEFT JOIN", "b", None, "a.id = b.id")

    assert statement.tables[1].join is JoinKind.LEFT
    assert statement.generate_tables() == "a, b ON a.id = b.id"


@pytest.mark.parametrize(
    ("kind", "expected"), [("LEFT", JoinKind.LEFT), ("right", JoinKind.RIGHT), ("INNER", JoinKind.INNER)]
)
def test_add_join_accepts_kind_name(kind: str, expected: JoinKind) -> None:
    statement = Statement().select().add_table("a").add_join(kind, "b", None, "a.id = b.id")

    assert statement.tables[1].join is expected
    assert statement.generate_tables() == "a, b ON a.id = b.id"


def test_add_join_rejects_unknown_kind() -> None:
    statement = Statement().select().add_table("a")

    with pytest.raises(SQLBuilderError, match="Unknown join kind"):
        statement.add_join("SIDEWAYS", "b", None, "a.id = b.id")

    assert len(statement.tables) == 1


def test_table_with_same_key_is_replaced_in_place() -> None:
    """Test re-adding a table key replaces the entry and keeps its position."""
    statement = (
        Statement()
        .select()
        .add_table("users", "u")
        .join("orders", "o", "u.id = o.user_id")
        .add_table("people", "u")
    )

    assert [table.key for table in statement.tables] == ["u", "o"]
    assert statement.generate_tables() == "people u, orders o ON u.id = o.user_id"


def test_generate_columns_for_each_type(three_columns: Statement) -> None:
    """Test column rendering for SELECT, INSERT, UPDATE and DELETE."""
    assert three_columns.get_parameter("param") == "bob"
    assert three_columns.get_parameter("colB") == "steve"
    assert three_columns.get_parameter("tablecolC") == "dave"
    assert three_columns.generate_columns() == "[table.colA] AS colA, [table.colB] AS colB, [table.colC]"

    three_columns.insert()
    assert three_columns.generate_columns() == "[table.colA] = :param, [table.colB] = :colB, [table.colC] = :tablecolC"

    three_columns.update()
    assert three_columns.generate_columns() == "[table.colA] = :param, [table.colB] = :colB, [table.colC] = :tablecolC"

    three_columns.delete()
    assert three_columns.generate_columns() == ""


def test_column_without_value_registers_empty_parameter() -> None:
    statement = Statement().add_column("name")

    assert statement.get_parameters() == {":name": None}


def test_column_with_same_key_is_replaced() -> None:
    statement = Statement().select().add_column("a.name", "name").add_column("b.name", "name")

    assert len(statement.columns) == 1
    assert statement.generate_columns() == "[b.name] AS name"


def test_parameters() -> None:
    """Test setting, overwriting and sanitizing parameters."""
    statement = Statement()
    statement.set_parameter("name", "value")
    assert statement.get_parameter("name") == "value"

    statement.set_parameter("name", "newValue")
    assert statement.get_parameter("name") == "newValue"

    statement.set_parameter("sanitize me", "value")
    assert statement.get_parameter("sanitizeme") == "value"
    assert statement.get_parameter("sanitize-me!") == "value"

    assert statement.get_parameters() == {":name": "newValue", ":sanitizeme": "value"}


def test_get_missing_parameter_returns_none() -> None:
    assert Statement().get_parameter("missing") is None


def test_remove_parameter() -> None:
    statement = Statement().set_parameter("user id", 1).set_parameter("other", 2)

    statement.remove_parameter("user.id")
    statement.remove_parameter("never_set")

    assert statement.get_parameters() == {":other": 2}


def test_generate_pagination() -> None:
    statement = Statement().set_page_number(2).set_page_size(50)

    assert statement.generate_pagination() == "LIMIT 50, 50"


def test_pagination_disabled_by_default() -> None:
    assert Statement().generate_pagination() == ""


@pytest.mark.parametrize("method", ["set_page_size", "set_page_number"])
def test_negative_pagination_is_rejected(method: str) -> None:
    with pytest.raises(SQLBuilderError):
        getattr(Statement(), method)(-1)


def test_generate_sort() -> None:
    """Test a custom separator and the default direction."""
    statement = Statement().add_sort("colA", "ASC").add_sort("colB")

    assert statement.generate_sort(",") == ", colA ASC,colB ASC"
    assert statement.generate_sort() == "ORDER BY colA ASC,colB ASC"


def test_sort_on_same_field_keeps_position() -> None:
    statement = Statement().add_sort("a").add_sort("b", "DESC").add_sort("a", "DESC")

    assert statement.sort_fields == {"a": "DESC", "b": "DESC"}
    assert statement.generate_sort() == "ORDER BY a DESC,b DESC"


def test_generate_where() -> None:
    """Test a raw clause and its unsanitized parameter."""
    statement = Statement().add_where("test test", {"a": "b"})

    assert statement.generate_where() == "WHERE test test"
    assert statement.get_parameters() == {":a": "b"}


def test_generate_where_joins_clauses_and_honours_prepend() -> None:
    statement = Statement().add_where("a = :a", {"a": 1}).add_where("b = :b", {"b": 2})

    assert statement.generate_where() == "WHERE a = :a AND b = :b"
    assert statement.generate_where("AND") == "AND a = :a AND b = :b"


def test_generate_where_without_clauses() -> None:
    assert Statement().generate_where() == ""


def test_where_parameters_are_stored_verbatim(caplog: pytest.LogCaptureFixture) -> None:
    """Test filter parameters skip sanitization and the mismatch is logged."""
    statement = Statement()

    with caplog.at_level(logging.WARNING, logger="sqlsnip.statement"):
        statement.add_where("x = :user_id", {"user.id": 5})

    assert statement.get_parameters() == {":user.id": 5}
    assert statement.get_parameter("user.id") is None
    assert "stored unsanitized" in caplog.text


def test_generate_query(joined_select: Statement) -> None:
    """Test end-to-end assembly of the default SELECT template."""
    statement = (
        joined_select.add_column("table.colA", "colA", "bob", "param")
        .add_column("table.colB", "colB", "steve")
        .add_column("table.colC", None, "dave")
        .add_where("test test", {"a": "b"})
        .add_sort("colA", "ASC")
        .set_page_number(2)
        .set_page_size(50)
    )

    expected = (
        "SELECT [table.colA] AS colA, [table.colB] AS colB, [table.colC] FROM "
        f"{EXPECTED_SELECT_TABLES} WHERE test test ORDER BY colA ASC LIMIT 50, 50"
    )
    assert statement.generate_query() == expected
    assert str(statement) == expected


def test_generate_query_is_concatenation_of_snippets(joined_select: Statement) -> None:
    statement = joined_select.add_column("x").add_where("x > 1").add_sort("x").set_page_size(10).set_page_number(1)

    expected = (
        f"SELECT {statement.generate_columns()} FROM {statement.generate_tables()} "
        f"{statement.generate_where()} {statement.generate_sort()} {statement.generate_pagination()}"
    )
    assert statement.generate_query() == expected


def test_generate_query_with_partial_template() -> None:
    """Test filling a caller-supplied template with a keyword override."""
    statement = (
        Statement()
        .select("SELECT * FROM {{tables}} WHERE deleted = 0 {{where|AND}} {{sort|ORDER BY created DESC,}}")
        .add_table("events")
        .add_where("kind = :kind", {"kind": "login"})
        .add_sort("id")
    )

    assert statement.generate_query() == (
        "SELECT * FROM events WHERE deleted = 0 AND kind = :kind ORDER BY created DESC, id ASC"
    )


def test_unknown_tokens_are_left_verbatim() -> None:
    statement = (
        Statement().update().add_table("users").add_column("name", value="x").add_where("id = :id", {"id": 1})
    )

    assert statement.generate_query() == "UPDATE {{table}} SET [name] = :name WHERE id = :id"


def test_only_first_where_token_is_filled() -> None:
    statement = Statement().set_template("A {{where}} B {{where}}").add_where("c")

    assert statement.generate_query() == "A WHERE c B {{where}}"


def test_plain_tokens_are_filled_everywhere() -> None:
    statement = Statement().select("{{tables}} / {{tables}}").add_table("t")

    assert statement.generate_query() == "t / t"


def test_empty_snippets_leave_whitespace() -> None:
    statement = Statement().select().add_table("t").add_column("a")

    assert statement.generate_query() == "SELECT [a] FROM t   "


def test_generate_query_without_template() -> None:
    assert Statement().generate_query() == ""


def test_prepare_without_adapter_fails() -> None:
    statement = Statement().select().add_table("t")

    with pytest.raises(ConfigurationError, match="No database adapter"):
        statement.prepare()


def test_execute_without_adapter_fails() -> None:
    with pytest.raises(ConfigurationError):
        Statement().select().execute()


def test_prepare_is_cached(recording_adapter: Any) -> None:
    """Test the adapter compiles once per structural configuration."""
    statement = Statement(recording_adapter).select().add_table("t").add_column("a")

    statement.prepare().prepare()

    assert len(recording_adapter.prepared) == 1
    assert recording_adapter.prepared[0].sql == statement.generate_query()
    assert statement.is_prepared


def test_parameter_values_do_not_invalidate(recording_adapter: Any) -> None:
    """Test re-executing with new values reuses the prepared statement."""
    statement = Statement(recording_adapter).select().add_table("t").add_where("a = :a", {"a": 1})

    first = statement.execute()
    version = statement.version
    statement.set_parameter("a", 2)
    second = statement.execute()

    assert statement.version == version
    assert len(recording_adapter.prepared) == 1
    assert first.get_metadata("parameters") == {":a": 1}
    assert second.get_metadata("parameters") == {":a": 2}

    statement.remove_parameter("a")
    assert statement.is_prepared


@pytest.mark.parametrize(
    "mutate",
    [
        lambda s: s.insert(),
        lambda s: s.set_template("SELECT 1"),
        lambda s: s.add_table("other"),
        lambda s: s.left_join("other", "o", "o.id = t.id"),
        lambda s: s.add_column("b"),
        lambda s: s.add_where("b = 1"),
        lambda s: s.add_sort("b"),
        lambda s: s.set_page_size(10),
        lambda s: s.set_page_number(3),
    ],
    ids=["type", "template", "table", "join", "column", "where", "sort", "page_size", "page_number"],
)
def test_structural_changes_invalidate(recording_adapter: Any, mutate: Any) -> None:
    statement = Statement(recording_adapter).select().add_table("t", "t").add_column("a").prepare()
    version = statement.version

    mutate(statement)

    assert statement.version > version
    assert not statement.is_prepared
    statement.execute()
    assert len(recording_adapter.prepared) == 2


def test_unchanged_type_and_template_keep_cache(recording_adapter: Any) -> None:
    statement = Statement(recording_adapter).select().add_table("t").prepare()

    statement.select()
    statement.set_template(statement.template or "")
    statement.set_adapter(recording_adapter)

    assert statement.is_prepared


def test_set_adapter_invalidates_on_change(recording_adapter: Any) -> None:
    statement = Statement(recording_adapter).select().add_table("t").prepare()

    statement.set_adapter(type(recording_adapter)())

    assert not statement.is_prepared


def test_adapter_falls_back_to_generic_renderer() -> None:
    statement = Statement()

    assert not statement.has_adapter
    assert statement.adapter.escape_col_name("a") == "[a]"


def test_build_and_check(recording_adapter: Any) -> None:
    """Test the construction helpers."""
    built = Statement.build(recording_adapter)
    assert built.adapter is recording_adapter

    created = Statement.check(None, recording_adapter)
    assert isinstance(created, Statement)
    assert created.adapter is recording_adapter

    existing = Statement().select()
    assert Statement.check(existing) is existing


def test_copy_is_independent(recording_adapter: Any, joined_select: Statement) -> None:
    """Test copies share the adapter but none of the mutable state."""
    original = (
        joined_select.set_adapter(recording_adapter)
        .add_column("a", value=1)
        .add_where("a > :a")
        .add_sort("a")
        .set_page_size(5)
        .prepare()
    )
    query = original.generate_query()

    duplicate = copy.deepcopy(original)
    duplicate.add_table("extra").add_column("b").add_where("b = 1").add_sort("b").set_parameter("a", 99)
    duplicate.tables[0].name = "mutated"

    assert original.generate_query() == query
    assert original.get_parameter("a") == 1
    assert original.is_prepared
    assert not duplicate.is_prepared
    assert duplicate.adapter is recording_adapter
    assert copy.copy(original).generate_query() == query


def test_copy_shares_parameter_values_but_not_the_map() -> None:
    blob = memoryview(b"abc")
    original = Statement().select().add_table("t").set_parameter("blob", blob)

    duplicate = original.copy()
    duplicate.set_parameter("other", 1)

    assert duplicate.get_parameter("blob") is blob
    assert copy.deepcopy(original).get_parameter("blob") is blob
    assert original.get_parameter("other") is None


def test_repr_mentions_type_and_adapter() -> None:
    text = repr(Statement().select())

    assert "SELECT" in text
    assert "GenericAdapter" in text
