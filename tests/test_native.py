"""Tests for the native tree form and its JSON Schema."""

from json import dumps, loads
from typing import TYPE_CHECKING

import pytest

from tests.examples.trees import document, mapping, scalar
from yamltree import from_native, load, to_native
from yamltree.errors import ScalarValueError
from yamltree.jsonschema import SchemaGenerator
from yamltree.schema import Document

if TYPE_CHECKING:
    from yamltree.core import StreamProcessor


def test_to_native() -> None:
    """Verify the native form of a simple mapping."""
    assert to_native(load('a: 1\n')) == [{
        'root': {
            'kind': 'mapping',
            'tag': '?',
            'anchor': None,
            'implicit': True,
            'style': 'block',
            'pairs': [[
                {
                    'kind': 'scalar',
                    'value': 'a',
                    'tag': '?',
                    'implicit': 'plain',
                    'anchor': None,
                    'style': 'plain',
                },
                {
                    'kind': 'scalar',
                    'value': '1',
                    'tag': '?',
                    'implicit': 'plain',
                    'anchor': None,
                    'style': 'plain',
                },
            ]],
        },
        'version': None,
        'tag_directives': [],
        'start_implicit': True,
        'end_implicit': True,
    }]


def test_to_native_directives() -> None:
    """Verify the native form of document directives."""
    native, = to_native(load(
        '%YAML 1.1\n'
        '%TAG !e! tag:example.com,2000:\n'
        '--- !e!thing\n'
        '[*a]\n',
    ))

    assert native['version'] == [1, 1]
    assert native['tag_directives'] == [
        {'handle': '!e!', 'prefix': 'tag:example.com,2000:'},
    ]
    assert native['root']['children'] == [{'kind': 'alias', 'anchor': 'a'}]


@pytest.mark.parametrize('content', (
    pytest.param('a: 1\n', id='block mapping'),
    pytest.param('[&x foo, *x]\n---\n{[a]: "b"}\n...\n', id='several documents'),
    pytest.param('%YAML 1.1\n--- !!map\nkey: |\n  text\n', id='version and tags'),
))
def test_native_round_trip(content: str, processor: 'StreamProcessor') -> None:
    """Verify that the native form survives JSON and converts back."""
    documents = processor.load(content)
    native = loads(dumps(to_native(documents)))

    assert from_native(native) == documents
    assert processor.dump(native) == processor.dump(documents)


def test_from_native_builders() -> None:
    """Verify that hand-built native trees convert into models."""
    documents = from_native([document(mapping((scalar('a'), scalar('1'))))])

    assert isinstance(documents[0], Document)
    assert documents == load('a: 1\n')


def test_from_native_keeps_models() -> None:
    """Verify that document models are accepted as they are."""
    documents = load('a: 1\n')

    assert from_native(documents) == documents
    assert from_native(documents)[0] is documents[0]


def test_from_native_error() -> None:
    """Verify that invalid native trees are rejected."""
    with pytest.raises(ScalarValueError, match=r'^Invalid scalar value'):
        from_native([document(scalar(None, tag='!'))])


def test_json_schema() -> None:
    """Verify the JSON Schema of the native stream."""
    schema = loads(SchemaGenerator.make_schema())

    assert schema['title'] == 'yaml-tree'
    assert schema['type'] == 'array'
    assert {'Document', 'ScalarNode', 'SequenceNode', 'MappingNode', 'AliasNode'} <= set(schema['$defs'])

    style = schema['$defs']['ScalarStyle']

    assert style['anyOf'][0]['enum'] == [
        'any',
        'plain',
        'single-quoted',
        'double-quoted',
        'literal',
        'folded',
    ]
    assert style['anyOf'][1] == {'type': 'integer', 'minimum': 0, 'maximum': 5}
