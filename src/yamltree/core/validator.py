"""Shape validation of document trees before dumping.

The validator accepts either schema models, which are valid by
construction and pass through untouched, or native mappings as produced by
`yamltree.native.to_native` (or written by hand). Native elements are
checked shallowly: a node check covers the node's own fields and the
container holding its children, never the children themselves. The caller
walks the tree in pre-order, so the first invalid element encountered is
the one reported.

Missing or invalid presentation flags (`style`, `implicit`, document
markers) are not fatal: the default value is used and a `StructureWarning`
is emitted. In strict mode the same conditions raise.
"""

from collections.abc import Iterable, Mapping
from typing import Annotated, Any, Literal, TypeAlias
from warnings import warn

from pydantic import AfterValidator, Field, TypeAdapter, ValidationError, field_validator

from yamltree.errors import (
    DocumentError,
    ErrorContext,
    ErrorFormatter,
    NodeShapeError,
    RootError,
    ScalarValueError,
    StructuralError,
    StructureWarning,
    TagDirectivesError,
    VersionError,
)
from yamltree.models import SchemaModel
from yamltree.schema import (
    NODE_MODELS,
    AliasNode,
    CollectionStyle,
    Document,
    MappingNode,
    ScalarImplicit,
    ScalarNode,
    ScalarStyle,
    SequenceNode,
    TagDirective,
    Version,
)
from yamltree.schema.documents import check_unique_handles
from yamltree.schema.nodes import CollectionNode

#: Fields of a native document.
DOCUMENT_FIELDS = frozenset((
    'root',
    'version',
    'tag_directives',
    'start_implicit',
    'end_implicit',
))

VERSION = TypeAdapter(Version | None)
TAG_DIRECTIVES = TypeAdapter(Annotated[list[TagDirective], AfterValidator(check_unique_handles)])

FlagType: TypeAlias = type[ScalarStyle] | type[CollectionStyle] | type[ScalarImplicit] | type[bool]


class SequenceShape(CollectionNode):
    """Sequence node checked without its children."""

    kind: Literal['sequence'] = 'sequence'
    children: list[Any] = Field(default_factory=list)


class MappingShape(CollectionNode):
    """Mapping node checked without its keys and values.

    Pairs are given either as 2-item pairs or as a flat list alternating
    keys and values.
    """

    kind: Literal['mapping'] = 'mapping'
    pairs: list[tuple[Any, Any]] = Field(default_factory=list)

    @field_validator('pairs', mode='before')
    @classmethod
    def split_pairs(cls, value: Any) -> Any:  # noqa: ANN401
        """Regroup a flat key/value list into pairs."""
        if not isinstance(value, list | tuple):
            return value

        grouped = [isinstance(item, list | tuple) for item in value]
        if all(grouped):
            return value

        if any(grouped):
            raise ValueError('pairs mix 2-item pairs and single nodes')

        if len(value) % 2:
            raise ValueError(f'odd number of keys and values ({len(value)})')

        return list(zip(value[::2], value[1::2], strict=True))


class DocumentShape(SchemaModel):
    """Document checked without its root node."""

    root: Any
    version: Version | None = None
    tag_directives: list[TagDirective] = Field(default_factory=list)
    start_implicit: bool = False
    end_implicit: bool = False


NodeShape: TypeAlias = ScalarNode | AliasNode | SequenceShape | MappingShape

#: Shape model and flag types (implicit, style) per node kind.
NODE_SHAPES: dict[str, tuple[type[NodeShape], FlagType | None, FlagType | None]] = {
    'scalar': (ScalarNode, ScalarImplicit, ScalarStyle),
    'sequence': (SequenceShape, bool, CollectionStyle),
    'mapping': (MappingShape, bool, CollectionStyle),
    'alias': (AliasNode, None, None),
}

#: Fallback values of presentation flags.
FLAG_DEFAULTS: dict[FlagType, Any] = {
    ScalarImplicit: ScalarImplicit.NONE,
    ScalarStyle: ScalarStyle.ANY,
    CollectionStyle: CollectionStyle.ANY,
    bool: False,
}


def coerce_flag(flag_type: FlagType, value: Any) -> Any:  # noqa: ANN401
    """Convert a native flag value.

    Enumerations accept members, their names and their numeric codes.
    Boolean flags accept booleans and the integers 0 and 1.

    Raises:
        ValueError: If the value is not valid for the flag.
    """
    if flag_type is bool:
        if isinstance(value, bool):
            return value
        if isinstance(value, int) and value in (0, 1):
            return bool(value)
        raise ValueError(value)

    if isinstance(value, bool):
        raise ValueError(value)

    try:
        return flag_type(value)
    except TypeError as base:
        raise ValueError(value) from base


class TreeValidator:
    """Shallow, fail-fast checker of documents and nodes.

    Args:
        strict: Whether to raise instead of warning on missing or invalid
            presentation flags.
    """

    def __init__(self, strict: bool = False) -> None:
        self.strict_mode = strict

    def check_document(self, document: Any, *,  # noqa: ANN401
                       document_num: int | None = None) -> Document | DocumentShape:
        """Check one document without descending into its root.

        Args:
            document: A `Document` model or a native document mapping.
            document_num: Zero-based position of the document in the stream.

        Returns:
            The model itself, or the checked document with a still unchecked
            root for native input.

        Raises:
            DocumentError: If the document is not a mapping of known fields
                or, in strict mode, has invalid marker flags.
            RootError: If the root is missing or not a single node.
            TagDirectivesError: If the tag directives are malformed.
            VersionError: If the version directive is malformed.
        """
        if isinstance(document, Document):
            return document

        if not isinstance(document, Mapping):
            raise DocumentError.at(
                f'Expected a document mapping, but got {type(document).__name__}',
                document,
                document_num=document_num,
            )

        if unknown := set(document) - DOCUMENT_FIELDS:
            raise DocumentError.at(
                f'Unknown document fields: {", ".join(sorted(map(str, unknown)))}',
                document_num=document_num,
            )

        root = document.get('root')
        if root is None:
            raise RootError.at('Document has no root node', document_num=document_num)

        if not isinstance(root, (Mapping, *NODE_MODELS)):
            raise RootError.at(
                f'Document root must be a single node, but got {type(root).__name__}',
                root,
                document_num=document_num,
                path='root',
            )

        directives = document.get('tag_directives')
        if directives is None:
            directives = []

        try:
            tag_directives = TAG_DIRECTIVES.validate_python(directives)
        except ValidationError as base:
            raise TagDirectivesError.from_pydantic_error(
                'Invalid document tag directives',
                base,
                directives,
                document_num=document_num,
                path='tag_directives',
            ) from base

        try:
            version = VERSION.validate_python(document.get('version'))
        except ValidationError as base:
            raise VersionError.from_pydantic_error(
                'Invalid document version',
                base,
                document.get('version'),
                document_num=document_num,
                path='version',
            ) from base

        markers = {
            name: self.check_flag(
                document, name, bool,
                error_cls=DocumentError,
                document_num=document_num,
                path=name,
            )
            for name in ('start_implicit', 'end_implicit')
        }

        return DocumentShape(
            root=root,
            version=version,
            tag_directives=tag_directives,
            **markers,
        )

    def check_node(self, node: Any, *,  # noqa: ANN401
                   document_num: int | None = None,
                   path: str | None = None) -> 'NodeShape | SequenceNode | MappingNode':
        """Check one node without descending into its children.

        Args:
            node: A node model or a native node mapping.
            document_num: Zero-based position of the document in the stream.
            path: Path of the node inside the document.

        Returns:
            The model itself, or the checked node for native input.
            Scalars and aliases come back as complete node models, sequences
            and mappings as shapes holding still unchecked children.

        Raises:
            NodeShapeError: If the node does not match its kind or, in
                strict mode, has invalid presentation flags.
            ScalarValueError: If a scalar value is not a string.
        """
        if isinstance(node, NODE_MODELS):
            return node

        if not isinstance(node, Mapping):
            raise NodeShapeError.at(
                f'Expected a node mapping, but got {type(node).__name__}',
                node,
                document_num=document_num,
                path=path,
            )

        kind = node.get('kind')
        if not isinstance(kind, str) or kind not in NODE_SHAPES:
            raise NodeShapeError.at(
                f'Unknown node kind {kind!r}',
                node,
                document_num=document_num,
                path=path,
            )

        shape, implicit_type, style_type = NODE_SHAPES[kind]

        values = dict(node)
        if implicit_type is not None:
            values['implicit'] = self.check_flag(
                node, 'implicit', implicit_type,
                error_cls=NodeShapeError,
                document_num=document_num,
                path=path,
            )
        if style_type is not None:
            values['style'] = self.check_flag(
                node, 'style', style_type,
                error_cls=NodeShapeError,
                document_num=document_num,
                path=path,
            )

        try:
            return shape.model_validate(values)
        except ValidationError as base:
            first, *_ = base.errors(include_url=False)
            if kind == 'scalar' and first['loc'][:1] == ('value',):
                raise ScalarValueError.from_pydantic_error(
                    'Invalid scalar value',
                    base,
                    node,
                    document_num=document_num,
                    path=path,
                ) from base

            raise NodeShapeError.from_pydantic_error(
                f'Invalid {kind} node',
                base,
                node,
                document_num=document_num,
                path=path,
            ) from base

    def check_flag(self, element: Mapping, name: str, flag_type: FlagType, *,
                   error_cls: type[StructuralError],
                   document_num: int | None = None,
                   path: str | None = None) -> Any:  # noqa: ANN401
        """Read a presentation flag, falling back to its default.

        Args:
            element: Native document or node mapping.
            name: Name of the flag field.
            flag_type: Enumeration or `bool`.
            error_cls: Error raised in strict mode.
            document_num: Zero-based position of the document in the stream.
            path: Path of the element inside the document.

        Returns:
            The converted flag value or the default one.

        Raises:
            StructuralError: Of the given class, in strict mode only.
        """
        value = element.get(name)
        if value is None:
            issue = f'Missing {name} flag'
        else:
            try:
                return coerce_flag(flag_type, value)
            except ValueError:
                issue = f'Invalid {name} flag {value!r}'

        default = FLAG_DEFAULTS[flag_type]
        if error := self.emit_structure_issue(
            f'{issue}, using {str(default).lower()!r}',
            error_cls,
            document_num=document_num,
            path=path,
        ):
            raise error

        return default

    def emit_structure_issue(self, message: str, error_cls: type[StructuralError], *,
                             document_num: int | None = None,
                             path: str | None = None) -> StructuralError | None:
        """Emit a structure warning or return the exception.

        Args:
            message: Warning message to emit.
            error_cls: Error class used in strict mode.
            document_num: Zero-based position of the document in the stream.
            path: Path of the element inside the document.

        Returns:
            The error on strict mode, otherwise `None` with producing
                a StructureWarning.
        """
        if self.strict_mode:
            return error_cls.at(message, document_num=document_num, path=path)

        context = ErrorContext(document_num=document_num, path=path)
        warn(ErrorFormatter.format(message, context), category=StructureWarning, stacklevel=2)

        return None

    def build_stream(self, data: Iterable[Any]) -> list[Document]:
        """Check a whole native stream and convert it into models.

        Documents and nodes are checked in the same order as during a dump,
        so both report the same first fault.

        Args:
            data: Documents as models or native mappings.

        Returns:
            Document models in stream order.

        Raises:
            StructuralError: On the first invalid element.
        """
        return [
            self.build_document(document, document_num=position)
            for position, document in enumerate(data)
        ]

    def build_document(self, data: Any, *,  # noqa: ANN401
                       document_num: int | None = None) -> Document:
        """Check and convert one document including its whole tree."""
        document = self.check_document(data, document_num=document_num)
        if isinstance(document, Document):
            return document

        root = self.build_node(document.root, document_num=document_num, path='root')

        return Document(
            root=root,
            version=document.version,
            tag_directives=document.tag_directives,
            start_implicit=document.start_implicit,
            end_implicit=document.end_implicit,
        )

    def build_node(self, data: Any, *,  # noqa: ANN401
                   document_num: int | None = None,
                   path: str = 'root') -> ScalarNode | AliasNode | SequenceNode | MappingNode:
        """Check and convert one node including its descendants."""
        node = self.check_node(data, document_num=document_num, path=path)

        if isinstance(node, SequenceShape):
            return SequenceNode(
                children=[
                    self.build_node(child, document_num=document_num,
                                    path=f'{path}.children[{index}]')
                    for index, child in enumerate(node.children)
                ],
                tag=node.tag,
                anchor=node.anchor,
                implicit=node.implicit,
                style=node.style,
            )

        if isinstance(node, MappingShape):
            return MappingNode(
                pairs=[
                    (
                        self.build_node(key, document_num=document_num,
                                        path=f'{path}.pairs[{index}].key'),
                        self.build_node(value, document_num=document_num,
                                        path=f'{path}.pairs[{index}].value'),
                    )
                    for index, (key, value) in enumerate(node.pairs)
                ],
                tag=node.tag,
                anchor=node.anchor,
                implicit=node.implicit,
                style=node.style,
            )

        return node
