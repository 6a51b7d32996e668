"""Unit tests for schema generation and schema-checked decoding."""

import copy

import pytest

from sdui.schema import (
    BASE_DEFINITIONS,
    SCHEMA_DRAFT,
    SCHEMA_TITLE,
    ExplicitSchemaGenerator,
    MetadataSchemaGenerator,
    SchemaDecodeError,
    SchemaDecoder,
    compare_schemas,
    export_json_schema,
    export_model_schema,
    format_path,
    generate_schema,
)
from sdui.tokens import (
    VALUE_REGISTRY,
    ButtonToken,
    CardToken,
    ColumnToken,
    SliderToken,
    TextToken,
    TokenType,
    encode_token,
)
from sdui.values import Action, ActionType, Padding, TextStyle


def _document() -> dict:
    card = CardToken(
        id="card",
        padding=Padding(all=16),
        on_click=Action(type=ActionType.NAVIGATE, data={"target": "details"}),
        children=(
            ColumnToken(
                id="column",
                children=(
                    TextToken(id="title", text="{{title}}", style=TextStyle.HEADLINE_MEDIUM),
                    SliderToken(id="volume", initial_value=0.5),
                    ButtonToken(
                        id="cta",
                        text="Go",
                        on_click=Action(type=ActionType.CUSTOM),
                    ),
                ),
            ),
        ),
    )
    return encode_token(card)


class TestSchemaGeneration:
    """Tests for the schema generators."""

    @pytest.mark.unit
    def test_root_shape(self):
        """The document is a draft-07 schema with a oneOf over all variants."""
        schema = generate_schema()
        assert schema["$schema"] == SCHEMA_DRAFT
        assert schema["title"] == SCHEMA_TITLE
        assert schema["type"] == "object"
        assert schema["oneOf"] == [
            {"$ref": f"#/definitions/{t.value}Token"} for t in TokenType
        ]

    @pytest.mark.unit
    def test_all_definitions_present(self):
        """Base, variant and value definitions are all emitted."""
        definitions = generate_schema()["definitions"]
        for name in BASE_DEFINITIONS:
            assert name in definitions
        for token_type in TokenType:
            assert f"{token_type.value}Token" in definitions
        for name in VALUE_REGISTRY:
            assert name in definitions

    @pytest.mark.unit
    def test_strategies_agree(self):
        """Explicit and metadata strategies produce the same document."""
        explicit = ExplicitSchemaGenerator().generate()
        metadata = MetadataSchemaGenerator().generate()
        assert compare_schemas(explicit, metadata) == []
        assert explicit == metadata

    @pytest.mark.unit
    def test_capability_composition(self):
        """Variants compose the base definitions matching their capabilities."""
        definitions = generate_schema()["definitions"]
        assert definitions["CardToken"]["allOf"] == [
            {"$ref": "#/definitions/ContainerToken"},
            {"$ref": "#/definitions/InteractiveToken"},
        ]
        assert definitions["ButtonToken"]["allOf"] == [
            {"$ref": "#/definitions/InteractiveToken"}
        ]
        assert definitions["TextToken"]["allOf"] == [{"$ref": "#/definitions/Token"}]

    @pytest.mark.unit
    def test_inherited_fields_not_repeated(self):
        """children and onClick live on the base definitions only."""
        definitions = generate_schema()["definitions"]
        assert "children" not in definitions["ColumnToken"]["properties"]
        assert "onClick" not in definitions["CardToken"]["properties"]
        assert "children" in definitions["ContainerToken"]["properties"]
        assert "onClick" in definitions["InteractiveToken"]["properties"]

    @pytest.mark.unit
    def test_required_fields(self):
        """Required lists include the tag and inherited required fields."""
        definitions = generate_schema()["definitions"]
        assert definitions["Token"]["required"] == ["id", "version"]
        assert definitions["ButtonToken"]["required"] == ["type", "text", "onClick"]
        assert definitions["SpacerToken"]["required"] == ["type"]
        assert definitions["Accessibility"]["required"] == ["role", "label"]

    @pytest.mark.unit
    def test_field_shapes(self):
        """Enums, refs and string maps are rendered as expected."""
        definitions = generate_schema()["definitions"]
        text = definitions["TextToken"]["properties"]
        assert text["type"]["const"] == "Text"
        assert text["text"]["$ref"] == "#/definitions/TemplateString"
        assert "BodyMedium" in text["style"]["enum"]
        assert definitions["Action"]["properties"]["data"]["additionalProperties"] == {
            "type": "string"
        }
        assert definitions["TemplateString"]["type"] == "string"
        assert definitions["Token"]["properties"]["a11y"]["$ref"] == (
            "#/definitions/Accessibility"
        )

    @pytest.mark.unit
    def test_unknown_strategy(self):
        """Unknown strategies raise ValueError."""
        with pytest.raises(ValueError, match="Unknown schema strategy"):
            generate_schema("reflection")

    @pytest.mark.unit
    def test_export_uses_configured_strategy(self, monkeypatch):
        """export_json_schema honours SDUI_SCHEMA_STRATEGY."""
        monkeypatch.setenv("SDUI_SCHEMA_STRATEGY", "explicit")
        assert export_json_schema() == ExplicitSchemaGenerator().generate()

    @pytest.mark.unit
    def test_model_schema(self):
        """The pydantic schema covers every variant."""
        schema = export_model_schema()
        assert "$defs" in schema
        for token_type in TokenType:
            assert f"{token_type.value}Token" in schema["$defs"]


class TestCompareSchemas:
    """Tests for compare_schemas."""

    @pytest.mark.unit
    def test_detects_missing_property(self):
        """Removed properties are reported with their definition."""
        first = generate_schema()
        second = copy.deepcopy(first)
        del second["definitions"]["TextToken"]["properties"]["style"]
        assert compare_schemas(first, second) == [
            "TextToken.style: missing from second schema"
        ]

    @pytest.mark.unit
    def test_detects_changed_required(self):
        """Required list changes are reported."""
        first = generate_schema()
        second = copy.deepcopy(first)
        second["definitions"]["ButtonToken"]["required"] = ["type", "text"]
        assert compare_schemas(first, second) == ["ButtonToken: required differs"]

    @pytest.mark.unit
    def test_detects_missing_definition(self):
        """Dropped definitions are reported."""
        first = generate_schema()
        second = copy.deepcopy(first)
        del second["definitions"]["ValueRange"]
        assert compare_schemas(first, second) == [
            "Definition 'ValueRange' missing from second schema"
        ]

    @pytest.mark.unit
    def test_ignores_descriptions(self):
        """Description changes are not structural differences."""
        first = generate_schema()
        second = copy.deepcopy(first)
        second["definitions"]["TextToken"]["description"] = "Changed"
        assert compare_schemas(first, second) == []


class TestSchemaDecoder:
    """Tests for SchemaDecoder."""

    @pytest.mark.unit
    def test_valid_document(self):
        """Encoded tokens validate and decode back to the same tree."""
        decoder = SchemaDecoder()
        document = _document()
        assert decoder.validate(document) == []
        assert encode_token(decoder.decode(document)) == document

    @pytest.mark.unit
    def test_nested_error_path(self):
        """Errors inside children carry their path."""
        document = {
            "type": "Column",
            "id": "c",
            "version": 1,
            "children": [
                {"type": "Spacer", "id": "s", "version": 1},
                {"type": "Text", "id": "t", "version": 1},
            ],
        }
        errors = SchemaDecoder().validate(document)
        assert len(errors) == 1
        assert errors[0].path == "root.children[1]"
        assert errors[0].error_type == "required"
        assert "'text'" in errors[0].message

    @pytest.mark.unit
    def test_bad_enum(self):
        """Enum violations are reported at the field path."""
        document = {"type": "Text", "id": "t", "version": 1, "text": "x", "style": "Huge"}
        errors = SchemaDecoder().validate(document)
        assert [(e.path, e.error_type) for e in errors] == [("root.style", "enum")]

    @pytest.mark.unit
    def test_missing_tag(self):
        """Untagged nodes report only the missing tag."""
        document = {"id": "t", "version": 1, "text": "x"}
        errors = SchemaDecoder().validate(document)
        assert len(errors) == 1
        assert errors[0].message == "'type' is a required property"

    @pytest.mark.unit
    def test_unknown_tag(self):
        """Unknown tags fail the root oneOf."""
        errors = SchemaDecoder().validate({"type": "Carousel", "id": "x", "version": 1})
        assert [e.error_type for e in errors] == ["oneOf"]

    @pytest.mark.unit
    def test_inference_opt_in(self):
        """Untagged documents pass when inference is enabled."""
        document = {"id": "t", "version": 1, "text": "x"}
        token = SchemaDecoder(infer_missing_type=True).decode(document)
        assert isinstance(token, TextToken)

    @pytest.mark.unit
    def test_non_object(self):
        """Non-object documents are rejected up front."""
        errors = SchemaDecoder().validate(["nope"])
        assert errors[0].error_type == "invalid_type"

    @pytest.mark.unit
    def test_decode_raises(self):
        """decode raises SchemaDecodeError with the collected errors."""
        with pytest.raises(SchemaDecodeError) as exc:
            SchemaDecoder().decode({"type": "Button", "id": "b", "version": 1, "text": "x"})
        assert exc.value.errors[0].message == "'onClick' is a required property"

    @pytest.mark.unit
    def test_format_path(self):
        """Paths mix attribute and index segments."""
        assert format_path(["children", 0, "text"]) == "root.children[0].text"
        assert format_path([]) == "root"
