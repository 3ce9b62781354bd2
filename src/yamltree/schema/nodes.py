"""Node models of a YAML document tree.

A node is one value in a document: a scalar, a sequence, a mapping or an
alias. Nodes form a strict tree owned by their document; an alias only
names the anchor it refers to and is never resolved here.
"""

from typing import Annotated, Literal

from pydantic import Field, field_validator

from yamltree.models import SchemaModel

from .styles import PLAIN_TAG, CollectionStyle, ScalarImplicit, ScalarStyle

#: Node tag, either a resolved tag or one of the sentinels.
Tag = Annotated[str, Field(min_length=1)]

#: Anchor name attached to a node or referenced by an alias.
Anchor = Annotated[str, Field(min_length=1)]


class ScalarNode(SchemaModel):
    """Scalar node holding raw text content."""

    kind: Literal['scalar'] = 'scalar'

    value: str = Field(
        title='Scalar value',
        description=(
            'Raw text content of the scalar, exactly as reported by the '
            'parser. The value is never resolved to a typed object.'
        ),
    )

    tag: Tag | None = Field(
        default=None,
        title='Scalar tag',
        description=(
            'Explicit tag of the scalar. The sentinel "?" marks a plain '
            'scalar left to implicit resolution and "!" marks a quoted or '
            'block scalar without an explicit tag.'
        ),
    )

    implicit: ScalarImplicit = Field(
        default=ScalarImplicit.NONE,
        title='Implicit resolution',
        description=(
            'Whether the tag may be omitted when the scalar is written in '
            'plain style, in any non-plain style, or never.'
        ),
    )

    anchor: Anchor | None = Field(
        default=None,
        title='Anchor',
        description='Anchor name attached to the scalar.',
    )

    style: ScalarStyle = Field(
        default=ScalarStyle.ANY,
        title='Scalar style',
        description='Surface syntax used to write the scalar.',
    )


class CollectionNode(SchemaModel):
    """Common attributes of sequence and mapping nodes."""

    kind: Literal['sequence', 'mapping']

    tag: Tag = Field(
        default=PLAIN_TAG,
        title='Collection tag',
        description=(
            'Explicit tag of the collection, or "?" when the tag '
            'was omitted in the source.'
        ),
    )

    anchor: Anchor | None = Field(
        default=None,
        title='Anchor',
        description='Anchor name attached to the collection.',
    )

    implicit: bool = Field(
        default=False,
        title='Implicit tag',
        description='Whether the tag may be omitted when writing the collection.',
    )

    style: CollectionStyle = Field(
        default=CollectionStyle.ANY,
        title='Collection style',
        description='Surface syntax used to write the collection.',
    )

    @field_validator('tag', mode='before')
    @classmethod
    def default_tag(cls, value: object) -> object:
        """Replace an absent tag with the plain sentinel."""
        if value is None:
            return PLAIN_TAG
        return value


class SequenceNode(CollectionNode):
    """Sequence node with ordered children."""

    kind: Literal['sequence'] = 'sequence'

    children: list['Node'] = Field(
        default_factory=list,
        title='Sequence items',
        description='Child nodes in encounter order.',
    )


class MappingNode(CollectionNode):
    """Mapping node with ordered key/value pairs.

    Pairs keep the exact encounter order. Duplicate keys and non-scalar
    keys are allowed; key uniqueness is an application concern.
    """

    kind: Literal['mapping'] = 'mapping'

    pairs: list[tuple['Node', 'Node']] = Field(
        default_factory=list,
        title='Mapping pairs',
        description='Key and value nodes in encounter order.',
    )


class AliasNode(SchemaModel):
    """Symbolic reference to an anchored node of the same document."""

    kind: Literal['alias'] = 'alias'

    anchor: Anchor = Field(
        title='Referenced anchor',
        description='Name of the anchor this alias refers to.',
    )


#: Any node of a document tree.
Node = Annotated[
    ScalarNode | SequenceNode | MappingNode | AliasNode,
    Field(discriminator='kind'),
]

#: Node classes, used for pass-through checks of already built trees.
NODE_MODELS = (ScalarNode, SequenceNode, MappingNode, AliasNode)

SequenceNode.model_rebuild()
MappingNode.model_rebuild()
