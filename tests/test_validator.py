"""Tests for shape validation of native document trees."""

import warnings
from typing import TYPE_CHECKING, Any

import pytest

from tests.examples.trees import alias, document, mapping, scalar, sequence
from yamltree.core import TreeValidator
from yamltree.errors import (
    DocumentError,
    NodeShapeError,
    RootError,
    ScalarValueError,
    StructuralError,
    StructureWarning,
    TagDirectivesError,
    VersionError,
)
from yamltree.schema import (
    CollectionStyle,
    MappingNode,
    ScalarImplicit,
    ScalarNode,
    ScalarStyle,
    SequenceNode,
)

if TYPE_CHECKING:
    from yamltree.core import StreamProcessor

INVALID_DOCUMENTS = (
    pytest.param(
        'a',
        DocumentError, r'^Expected a document mapping, but got str',
        id='document not a mapping',
    ),
    pytest.param(
        document(scalar('a'), extra=1),
        DocumentError, r'^Unknown document fields: extra',
        id='unknown document field',
    ),
    pytest.param(
        {'start_implicit': True, 'end_implicit': True},
        RootError, r'^Document has no root node',
        id='missing root',
    ),
    pytest.param(
        document([scalar('a'), scalar('b')]),
        RootError, r'^Document root must be a single node, but got list',
        id='several roots',
    ),
    pytest.param(
        document(scalar('a'), version=[1]),
        VersionError, r'^Invalid document version',
        id='short version',
    ),
    pytest.param(
        document(scalar('a'), version=['1', '1']),
        VersionError, r'^Invalid document version',
        id='textual version',
    ),
    pytest.param(
        document(scalar('a'), tag_directives=[
            {'handle': '!e!', 'prefix': 'tag:example.com,2000:'},
            {'handle': '!e!', 'prefix': 'tag:example.org,2000:'},
        ]),
        TagDirectivesError, r'^Invalid document tag directives',
        id='duplicate tag handle',
    ),
    pytest.param(
        document(scalar('a'), tag_directives=[{'handle': '', 'prefix': 'tag:'}]),
        TagDirectivesError, r'^Invalid document tag directives',
        id='empty tag handle',
    ),
    pytest.param(
        document(scalar('a'), tag_directives={}),
        TagDirectivesError, r'^Invalid document tag directives',
        id='empty mapping of tag directives',
    ),
    pytest.param(
        document(scalar('a'), tag_directives=''),
        TagDirectivesError, r'^Invalid document tag directives',
        id='empty string of tag directives',
    ),
    pytest.param(
        document(sequence('a')),
        NodeShapeError, r'^Expected a node mapping, but got str',
        id='node not a mapping',
    ),
    pytest.param(
        document({'kind': 'set'}),
        NodeShapeError, r"^Unknown node kind 'set'",
        id='unknown node kind',
    ),
    pytest.param(
        document(mapping(pairs=[scalar('a'), scalar('b'), scalar('c')])),
        NodeShapeError, r'^Invalid mapping node',
        id='odd mapping items',
    ),
    pytest.param(
        document(mapping(pairs=[[scalar('a'), scalar('b')], scalar('c')])),
        NodeShapeError, r'^Invalid mapping node',
        id='mixed mapping pairs',
    ),
    pytest.param(
        document(mapping(pairs=[[scalar('a'), scalar('b'), scalar('c')]])),
        NodeShapeError, r'^Invalid mapping node',
        id='mapping pair of three',
    ),
    pytest.param(
        document(sequence(children='abc')),
        NodeShapeError, r'^Invalid sequence node',
        id='sequence children not a list',
    ),
    pytest.param(
        document(sequence(alias(''))),
        NodeShapeError, r'^Invalid alias node',
        id='empty alias anchor',
    ),
    pytest.param(
        document(scalar('a', color='red')),
        NodeShapeError, r'^Invalid scalar node',
        id='unknown node field',
    ),
    pytest.param(
        document(scalar('a', tag='')),
        NodeShapeError, r'^Invalid scalar node',
        id='empty tag',
    ),
    pytest.param(
        document(scalar(1)),
        ScalarValueError, r'^Invalid scalar value',
        id='numeric scalar value',
    ),
    pytest.param(
        document(scalar(value=None)),
        ScalarValueError, r'^Invalid scalar value',
        id='missing scalar value',
    ),
)


@pytest.mark.parametrize('data, error_cls, expected', INVALID_DOCUMENTS)
def test_build_invalid_document(data: Any, error_cls: type[StructuralError],  # noqa: ANN401
                                expected: str) -> None:
    """Verify the error raised for each kind of malformed document."""
    with pytest.raises(error_cls, match=expected):
        TreeValidator().build_stream([data])


@pytest.mark.parametrize('data, error_cls, expected', INVALID_DOCUMENTS)
def test_dump_invalid_document(data: Any, error_cls: type[StructuralError],  # noqa: ANN401
                               expected: str, processor: 'StreamProcessor') -> None:
    """Verify that a dump rejects malformed documents the same way."""
    with pytest.raises(error_cls, match=expected):
        processor.dump([data])


@pytest.mark.parametrize('data, expected', (
    pytest.param(
        [document(sequence(scalar(1), {'kind': 'set'}))],
        r'on document 1, at root\.children\[0\]',
        id='first child',
    ),
    pytest.param(
        [document(mapping((scalar('a'), scalar(2))))],
        r'on document 1, at root\.pairs\[0\]\.value',
        id='mapping value',
    ),
    pytest.param(
        [document(mapping(pairs=[scalar(1), scalar('a')]))],
        r'on document 1, at root\.pairs\[0\]\.key',
        id='flat mapping key',
    ),
    pytest.param(
        [document(scalar('a')), document(scalar(1))],
        r'on document 2, at root',
        id='second document',
    ),
))
def test_first_fault_is_reported(data: list[Any], expected: str,
                                 processor: 'StreamProcessor') -> None:
    """Verify that the first invalid element in pre-order is reported."""
    with pytest.raises(ScalarValueError, match=expected) as built:
        TreeValidator().build_stream(data)

    with pytest.raises(ScalarValueError) as dumped:
        processor.dump(data)

    assert str(built.value) == str(dumped.value)
    assert built.value.part == 'scalar'


@pytest.mark.parametrize('data, expected', (
    pytest.param(
        document(scalar('a', style='fancy')),
        r"^Invalid style flag 'fancy', using 'any'",
        id='invalid scalar style',
    ),
    pytest.param(
        document(scalar('a', style=True)),
        r"^Invalid style flag True, using 'any'",
        id='boolean scalar style',
    ),
    pytest.param(
        document(scalar('a', implicit=None)),
        r"^Missing implicit flag, using 'none'",
        id='missing scalar implicit',
    ),
    pytest.param(
        document(sequence(style=7)),
        r"^Invalid style flag 7, using 'any'",
        id='invalid collection code',
    ),
    pytest.param(
        document(mapping(implicit='yes')),
        r"^Invalid implicit flag 'yes', using 'false'",
        id='invalid collection implicit',
    ),
))
def test_node_flag_fallback(data: dict[str, Any], expected: str) -> None:
    """Verify that malformed node flags fall back to defaults with a warning."""
    with pytest.warns(StructureWarning, match=expected):
        document_, = TreeValidator().build_stream([data])

    root = document_.root

    assert root.style in (ScalarStyle.ANY, CollectionStyle.ANY, ScalarStyle.PLAIN)
    assert root.implicit in (ScalarImplicit.NONE, ScalarImplicit.PLAIN, False, True)


@pytest.mark.parametrize('data, expected', (
    pytest.param(
        document(scalar('a', style='fancy')),
        r"^Invalid style flag 'fancy'",
        id='invalid scalar style',
    ),
    pytest.param(
        document(sequence(implicit=None)),
        r'^Missing implicit flag',
        id='missing collection implicit',
    ),
))
def test_node_flag_strict(data: dict[str, Any], expected: str) -> None:
    """Verify that malformed node flags raise in strict mode."""
    with pytest.raises(NodeShapeError, match=expected):
        TreeValidator(strict=True).build_stream([data])


@pytest.mark.parametrize('name, value, expected', (
    pytest.param('start_implicit', 'no', r"^Invalid start_implicit flag 'no'", id='start'),
    pytest.param('end_implicit', None, r'^Missing end_implicit flag', id='end'),
))
def test_document_marker_flags(name: str, value: Any, expected: str) -> None:  # noqa: ANN401
    """Verify the fallback and strict handling of document markers."""
    data = document(scalar('a'), **{name: value})

    with pytest.warns(StructureWarning, match=expected):
        document_, = TreeValidator().build_stream([data])

    assert getattr(document_, name) is False

    with pytest.raises(DocumentError, match=expected):
        TreeValidator(strict=True).build_stream([data])


def test_dump_strict_flags(strict_processor: 'StreamProcessor') -> None:
    """Verify that a strict dump rejects malformed flags."""
    with pytest.raises(NodeShapeError, match=r"^Invalid style flag 'fancy'"):
        strict_processor.dump([document(scalar('a', style='fancy'))])


def test_numeric_codes() -> None:
    """Verify that flags given as numeric codes are accepted silently."""
    data = document(sequence(
        scalar('a', implicit=2, style=1),
        implicit=1,
        style=2,
    ))

    with warnings.catch_warnings():
        warnings.simplefilter('error', StructureWarning)
        document_, = TreeValidator(strict=True).build_stream([data])

    root = document_.root
    child, = root.children

    assert root.implicit is True
    assert root.style is CollectionStyle.FLOW
    assert child.implicit is ScalarImplicit.QUOTED
    assert child.style is ScalarStyle.PLAIN


def test_flat_pairs_are_regrouped() -> None:
    """Verify that flat key/value lists become pairs."""
    data = document(mapping(pairs=[scalar('a'), scalar('1'), scalar('b'), scalar('2')]))

    document_, = TreeValidator().build_stream([data])

    assert isinstance(document_.root, MappingNode)
    assert [(key.value, value.value) for key, value in document_.root.pairs] == [
        ('a', '1'),
        ('b', '2'),
    ]


def test_absent_collection_tag() -> None:
    """Verify that collections without a tag get the plain sentinel."""
    document_, = TreeValidator().build_stream([document(sequence(tag=None))])

    assert isinstance(document_.root, SequenceNode)
    assert document_.root.tag == '?'


def test_models_pass_through() -> None:
    """Verify that models are returned untouched."""
    node = ScalarNode(value='a')
    validator = TreeValidator(strict=True)

    assert validator.check_node(node) is node
    assert validator.build_node(node) is node


@pytest.mark.parametrize('data, model', (
    pytest.param(sequence(children=None), SequenceNode, id='sequence without children'),
    pytest.param(mapping(pairs=None), MappingNode, id='mapping without pairs'),
))
def test_absent_collection_items(data: dict[str, Any],
                                 model: type[SequenceNode | MappingNode]) -> None:
    """Verify that collections without items are built empty."""
    document_, = TreeValidator(strict=True).build_stream([document(data)])

    assert document_.root == model(implicit=True, style=CollectionStyle.BLOCK)


def test_dump_absent_collection_items(processor: 'StreamProcessor') -> None:
    """Verify that collections without items are written empty."""
    root = mapping(
        (scalar('a'), sequence(children=None, style='flow')),
        (scalar('b'), mapping(pairs=None, style='flow')),
    )

    assert processor.dump([document(root)]) == 'a: []\nb: {}\n'
