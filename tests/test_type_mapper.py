"""Unit tests for TypeMapper and boolean-default normalization."""

from __future__ import annotations

import pytest

from sqlcompose.compile.context import GenerationContext
from sqlcompose.compile.oracle import OracleCompiler
from sqlcompose.compile.type_mapper import (
    ColumnFragment,
    PartKind,
    TypeMapper,
    find_auto_increment_fields,
    normalize_boolean_defaults,
    replace_boolean_defaults,
)
from sqlcompose.config import GeneratorConfig
from sqlcompose.errors import EmptyEnumerationError, InvalidDefinitionError
from sqlcompose.schema.attributes import (
    AttributeDefinition,
    ReferenceSpec,
    RuntimeDefault,
    default_value_schemable,
)
from sqlcompose.schema.table import TableReference
from tests.fixtures import load_attributes

CTX = GenerationContext(compiler=OracleCompiler())
MAPPER = TypeMapper(CTX)


def _sql(**attributes: AttributeDefinition | str) -> dict[str, str]:
    return MAPPER.attributes_to_sql(attributes)


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class TestEnumerations:
    def test_enum_becomes_checked_varchar(self):
        result = _sql(
            status=AttributeDefinition(sql_type="ENUM", enum_values=["a", "b"], allow_null=False)
        )
        fragment = result["status"]
        assert fragment == "VARCHAR2(255) CHECK (\"status\" IN ('a', 'b')) NOT NULL"
        assert fragment.count("NOT NULL") == 1

    def test_enum_values_keep_input_order_and_are_escaped(self):
        result = _sql(
            mood=AttributeDefinition(sql_type="ENUM", enum_values=["z", "it's", "a"])
        )
        assert "IN ('z', 'it''s', 'a')" in result["mood"]

    def test_parameterised_enum_type_is_detected(self):
        result = _sql(kind=AttributeDefinition(sql_type="enum('x','y')", enum_values=["x", "y"]))
        assert result["kind"].startswith("VARCHAR2(255) CHECK")

    def test_empty_enum_values_raise(self):
        with pytest.raises(EmptyEnumerationError) as exc_info:
            _sql(status=AttributeDefinition(sql_type="ENUM", enum_values=[]))
        assert exc_info.value.attribute == "status"
        assert exc_info.value.code == "EMPTY_ENUMERATION"

    def test_missing_enum_values_raise(self):
        with pytest.raises(EmptyEnumerationError):
            _sql(status=AttributeDefinition(sql_type="ENUM"))

    def test_enum_check_uses_physical_column_name(self):
        result = _sql(
            postStatus=AttributeDefinition(sql_type="ENUM", enum_values=["x"], field="post_status")
        )
        assert 'CHECK ("post_status" IN' in result["post_status"]


# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------


class TestDefaults:
    def test_false_default_normalizes_to_zero(self):
        result = _sql(active=AttributeDefinition(sql_type="BOOLEAN", default_value=False))
        assert result["active"] == "BOOLEAN DEFAULT 0"

    def test_true_default_normalizes_to_one(self):
        result = _sql(active=AttributeDefinition(sql_type="BOOLEAN", default_value=True))
        assert result["active"] == "BOOLEAN DEFAULT 1"

    def test_textual_boolean_default_on_boolean_column(self):
        fragments = MAPPER.to_column_fragments(
            {"active": AttributeDefinition(sql_type="NUMBER(1)", default_value="false")}
        )
        assert str(fragments["active"]) == "NUMBER(1) DEFAULT 'false'"
        normalized = normalize_boolean_defaults(fragments["active"], CTX)
        assert str(normalized) == "NUMBER(1) DEFAULT 0"

    def test_textual_boolean_default_on_text_column_is_kept(self):
        result = _sql(answer=AttributeDefinition(sql_type="VARCHAR2(5)", default_value="true"))
        assert result["answer"] == "VARCHAR2(5) DEFAULT 'true'"

    def test_boolean_words_outside_default_are_untouched(self):
        result = _sql(
            flag=AttributeDefinition(sql_type="ENUM", enum_values=["true", "false"], default_value="true")
        )
        assert result["flag"] == "VARCHAR2(255) CHECK (\"flag\" IN ('true', 'false')) DEFAULT 'true'"

    def test_explicit_none_default_renders_null(self):
        assert _sql(note=AttributeDefinition(sql_type="CLOB", default_value=None))["note"] == (
            "CLOB DEFAULT NULL"
        )

    def test_absent_default_renders_nothing(self):
        assert _sql(note=AttributeDefinition(sql_type="CLOB"))["note"] == "CLOB"

    def test_runtime_defaults_are_omitted(self):
        result = _sql(
            created_at=AttributeDefinition(sql_type="TIMESTAMP", default_value=RuntimeDefault.NOW),
            token=AttributeDefinition(sql_type="RAW(16)", default_value=lambda: b"\x00" * 16),
        )
        assert result == {"created_at": "TIMESTAMP", "token": "RAW(16)"}

    def test_default_value_schemable(self):
        assert default_value_schemable(0)
        assert default_value_schemable("now")
        assert not default_value_schemable(RuntimeDefault.UUIDV4)
        assert not default_value_schemable(dict)

    def test_default_part_keeps_semantic_value(self):
        fragments = MAPPER.to_column_fragments(
            {"active": AttributeDefinition(sql_type="BOOLEAN", default_value=False)}
        )
        part = fragments["active"].part(PartKind.DEFAULT)
        assert part is not None
        assert part.value is False
        assert fragments["active"].is_boolean


# ---------------------------------------------------------------------------
# Constraints and references
# ---------------------------------------------------------------------------


class TestConstraints:
    def test_fixed_part_order(self):
        result = _sql(
            account_id=AttributeDefinition(
                sql_type="NUMBER",
                allow_null=False,
                default_value=0,
                unique=True,
                primary_key=True,
                references=ReferenceSpec(table="accounts", on_delete="cascade"),
            )
        )
        assert result["account_id"] == (
            'NUMBER NOT NULL DEFAULT 0 UNIQUE PRIMARY KEY REFERENCES "accounts" ("id") '
            "ON DELETE CASCADE"
        )

    def test_fragment_parts_are_tagged_in_order(self):
        fragments = MAPPER.to_column_fragments(
            {
                "id": AttributeDefinition(
                    sql_type="NUMBER", allow_null=False, unique=True, primary_key=True
                )
            }
        )
        kinds = [part.kind for part in fragments["id"].parts]
        assert kinds == [PartKind.TYPE, PartKind.NOT_NULL, PartKind.UNIQUE, PartKind.PRIMARY_KEY]

    def test_reference_with_schema_and_key(self):
        result = _sql(
            person_id=AttributeDefinition(
                sql_type="NUMBER",
                references=ReferenceSpec(
                    table=TableReference(schema="hr", name="people"), key="person_id"
                ),
            )
        )
        assert result["person_id"] == 'NUMBER REFERENCES "hr"."people" ("person_id")'

    def test_default_reference_key_comes_from_config(self):
        mapper = TypeMapper(
            GenerationContext(
                compiler=OracleCompiler(), config=GeneratorConfig(default_reference_key="pk")
            )
        )
        result = mapper.attributes_to_sql(
            {"team": AttributeDefinition(sql_type="NUMBER", references=ReferenceSpec(table="teams"))}
        )
        assert result["team"] == 'NUMBER REFERENCES "teams" ("pk")'

    def test_on_update_is_dropped(self):
        result = _sql(
            team_id=AttributeDefinition(
                sql_type="NUMBER",
                references=ReferenceSpec(table="teams", on_delete="set null", on_update="cascade"),
            )
        )
        assert result["team_id"] == 'NUMBER REFERENCES "teams" ("id") ON DELETE SET NULL'
        assert "ON UPDATE" not in result["team_id"]

    @pytest.mark.parametrize("action", ["no action", "RESTRICT"])
    def test_implicit_on_delete_actions_render_nothing(self, action):
        result = _sql(
            team_id=AttributeDefinition(
                sql_type="NUMBER", references=ReferenceSpec(table="teams", on_delete=action)
            )
        )
        assert "ON DELETE" not in result["team_id"]

    def test_unknown_on_delete_action_raises(self):
        with pytest.raises(InvalidDefinitionError):
            _sql(
                team_id=AttributeDefinition(
                    sql_type="NUMBER",
                    references=ReferenceSpec(table="teams", on_delete="cascade; DROP TABLE x"),
                )
            )

    def test_sql_type_with_statement_characters_raises(self):
        with pytest.raises(InvalidDefinitionError) as exc_info:
            _sql(id=AttributeDefinition(sql_type="NUMBER; DROP TABLE users"))
        assert exc_info.value.details["field"] == "sql_type"

    @pytest.mark.parametrize(
        "sql_type",
        [
            "NUMBER, evil VARCHAR2(10)",
            "NUMBER(10))",
            "VARCHAR2(10), \"x\" CLOB",
            "NUMBER(1) DEFAULT 'a'",
        ],
    )
    def test_sql_type_that_leaves_the_column_raises(self, sql_type):
        with pytest.raises(InvalidDefinitionError):
            _sql(col=AttributeDefinition(sql_type=sql_type))

    @pytest.mark.parametrize(
        "sql_type", ["NUMBER(10, 2)", "TIMESTAMP(6) WITH TIME ZONE", "VARCHAR2(40 CHAR)"]
    )
    def test_compound_sql_types_accepted(self, sql_type):
        assert _sql(col=AttributeDefinition(sql_type=sql_type))["col"] == sql_type


# ---------------------------------------------------------------------------
# Raw definitions, field names, fixtures
# ---------------------------------------------------------------------------


class TestRawAndFields:
    def test_raw_definition_passes_through_with_boolean_rewrite(self):
        result = _sql(legacy="NUMBER(1) DEFAULT false NOT NULL", other="NUMBER(1) DEFAULT 'true'")
        assert result == {
            "legacy": "NUMBER(1) DEFAULT 0 NOT NULL",
            "other": "NUMBER(1) DEFAULT 1",
        }

    @pytest.mark.parametrize(
        "definition",
        [
            "NUMBER); DROP TABLE users; --",
            "NUMBER, evil VARCHAR2(10)",
            "NUMBER DEFAULT 'x'); DROP TABLE users; --",
            "NUMBER REFERENCES users (id)",
            "NUMBER CHECK (1 = 1)",
        ],
    )
    def test_raw_definition_outside_column_grammar_raises(self, definition):
        with pytest.raises(InvalidDefinitionError) as exc_info:
            _sql(legacy=definition)
        assert exc_info.value.details["field"] == "definition"
        assert exc_info.value.details["attribute"] == "legacy"

    @pytest.mark.parametrize(
        "definition",
        [
            "NUMBER(10, 2) NOT NULL UNIQUE",
            "VARCHAR2(20 CHAR) DEFAULT 'it''s; fine' NOT NULL",
            'NUMBER REFERENCES "hr"."people" ("id") ON DELETE SET NULL',
            "TIMESTAMP(6) WITH TIME ZONE DEFAULT NULL",
            "NUMBER DEFAULT -1.5 PRIMARY KEY",
        ],
    )
    def test_raw_definition_within_column_grammar_passes(self, definition):
        assert _sql(legacy=definition) == {"legacy": definition}

    def test_raw_fragment_is_tagged_raw(self):
        fragments = MAPPER.to_column_fragments({"legacy": "NUMBER"})
        assert isinstance(fragments["legacy"], ColumnFragment)
        assert fragments["legacy"].parts[0].kind is PartKind.RAW

    def test_field_renames_column(self):
        result = _sql(userId=AttributeDefinition(sql_type="NUMBER", field="user_id"))
        assert list(result) == ["user_id"]

    def test_fixture_table(self):
        result = MAPPER.attributes_to_sql(load_attributes("users"))
        assert list(result) == ["id", "email", "role", "active", "team_id"]
        assert result["active"] == "BOOLEAN DEFAULT 0"
        assert result["role"].endswith("NOT NULL DEFAULT 'member'")

    def test_find_auto_increment_fields(self):
        attributes = {**load_attributes("users"), "raw": "NUMBER"}
        assert find_auto_increment_fields(attributes) == ["id"]


# ---------------------------------------------------------------------------
# Textual DEFAULT rewrite
# ---------------------------------------------------------------------------


class TestReplaceBooleanDefaults:
    def test_quoted_and_bare_tokens(self):
        sql = "a NUMBER(1) DEFAULT 'false', b NUMBER(1) DEFAULT true"
        assert replace_boolean_defaults(sql) == "a NUMBER(1) DEFAULT 0, b NUMBER(1) DEFAULT 1"

    def test_only_text_after_default_is_touched(self):
        sql = "\"true\" VARCHAR2(5) DEFAULT 'trueish', \"false\" VARCHAR2(9) DEFAULT falsey"
        assert replace_boolean_defaults(sql) == sql

    def test_boolean_words_elsewhere_are_untouched(self):
        sql = "CHECK (\"x\" IN ('true', 'false'))"
        assert replace_boolean_defaults(sql) == sql
