"""JSON Schema management."""

from functools import cache
from json import dumps
from typing import TYPE_CHECKING

from pydantic import RootModel
from pydantic.json_schema import GenerateJsonSchema, JsonSchemaValue

from yamltree.schema import Document
from yamltree.schema.styles import CodedEnum

if TYPE_CHECKING:
    from pydantic_core import core_schema as core


class Stream(RootModel[list[Document]]):
    """Native YAML stream: documents in stream order."""


class SchemaGenerator(GenerateJsonSchema):
    """Custom JSON Schema generator for the native tree form.

    Presentation flags are accepted by name and by their numeric code,
    so enumerations are described as either of both.
    """

    @classmethod
    @cache
    def make_schema(cls, indent: int | str | None = 4) -> str:
        """Generate the JSON Schema of a native stream.

        Args:
            indent: Indentation level used for JSON formatting.

        Returns:
            Serialized JSON Schema string.
        """
        schema = {
            **Stream.model_json_schema(
                schema_generator=cls,
                union_format='primitive_type_array',
            ),
            'title': 'yaml-tree',
            'description': 'JSON Schema for native YAML document trees',
            '$schema': cls.schema_dialect,
        }

        return dumps(
            schema,
            ensure_ascii=False,
            sort_keys=True,
            indent=indent,
        )

    def enum_schema(self, schema: 'core.EnumSchema') -> JsonSchemaValue:
        """Generate JSON Schema for an enumeration.

        Args:
            schema: Pydantic core schema describing an enumeration.

        Returns:
            The enumeration schema, extended with the range of numeric
            codes for coded enumerations.
        """
        json_schema = super().enum_schema(schema)

        enum_cls = schema['cls']
        if not issubclass(enum_cls, CodedEnum):
            return json_schema

        annotations = {
            key: json_schema.pop(key)
            for key in ('title', 'description')
            if key in json_schema
        }

        codes = {
            'type': 'integer',
            'minimum': 0,
            'maximum': len(enum_cls) - 1,
        }

        return {'anyOf': [json_schema, codes], **annotations}
