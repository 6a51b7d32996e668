"""JSON Schema generation, comparison and schema-checked decoding."""

from .decoder import (
    SchemaDecodeError,
    SchemaDecoder,
    SchemaValidationError,
    format_path,
)
from .lib import (
    BASE_DEFINITIONS,
    SCHEMA_DESCRIPTION,
    SCHEMA_DRAFT,
    SCHEMA_TITLE,
    STRATEGIES,
    ExplicitSchemaGenerator,
    MetadataSchemaGenerator,
    compare_schemas,
    definition_ref,
    export_json_schema,
    export_model_schema,
    field_schema,
    generate_schema,
    variant_definition_name,
)

__all__ = [
    # Constants
    "SCHEMA_DRAFT",
    "SCHEMA_TITLE",
    "SCHEMA_DESCRIPTION",
    "BASE_DEFINITIONS",
    "STRATEGIES",
    # Generators
    "ExplicitSchemaGenerator",
    "MetadataSchemaGenerator",
    "field_schema",
    "definition_ref",
    "variant_definition_name",
    # Export
    "generate_schema",
    "export_json_schema",
    "export_model_schema",
    "compare_schemas",
    # Decoding
    "SchemaDecoder",
    "SchemaDecodeError",
    "SchemaValidationError",
    "format_path",
]
