"""Event emission from document trees.

This module defines a mixin that walks documents in depth-first pre-order
and pushes the matching PyYAML events into a sink: a PyYAML emitter or a
plain event list. Every document and node is checked by the validator
right before its events are produced, so the first invalid element in
pre-order aborts the walk.
"""

from typing import TYPE_CHECKING, Any, Protocol

from yaml.events import (
    AliasEvent,
    DocumentEndEvent,
    DocumentStartEvent,
    Event,
    MappingEndEvent,
    MappingStartEvent,
    ScalarEvent,
    SequenceEndEvent,
    SequenceStartEvent,
    StreamEndEvent,
    StreamStartEvent,
)

from yamltree.schema import PLAIN_TAG, AliasNode, MappingNode, ScalarNode, SequenceNode

from .events import COLLECTION_STYLES, SCALAR_STYLES
from .validator import MappingShape, SequenceShape

if TYPE_CHECKING:
    from collections.abc import Iterable

    from .validator import TreeValidator


class Sink(Protocol):
    """Anything accepting events one by one."""

    def emit(self, event: Event) -> None:
        """Accept one event."""


class TreeDumperMixin:
    """Mixin producing events from document trees.

    Requires a `validator` attribute holding a `TreeValidator`.
    """

    validator: 'TreeValidator'

    def serialize_stream(self, documents: 'Iterable[Any]', sink: Sink) -> None:
        """Emit a whole stream.

        Args:
            documents: Documents as models or native mappings.
            sink: Receiver of the events.

        Raises:
            StructuralError: On the first invalid element.
            EventSinkError: If the emitter rejects an event.
        """
        sink.emit(StreamStartEvent())

        for position, document in enumerate(documents):
            self.serialize_document(document, sink, document_num=position)

        sink.emit(StreamEndEvent())

    def serialize_document(self, document: Any, sink: Sink, *,  # noqa: ANN401
                           document_num: int | None = None) -> None:
        """Emit one document with its directives and markers."""
        document = self.validator.check_document(document, document_num=document_num)

        tags = {
            directive.handle: directive.prefix
            for directive in document.tag_directives
        }

        sink.emit(DocumentStartEvent(
            explicit=not document.start_implicit,
            version=document.version,
            tags=tags or None,
        ))

        self.serialize_node(document.root, sink, document_num=document_num, path='root')

        sink.emit(DocumentEndEvent(explicit=not document.end_implicit))

    def serialize_node(self, node: Any, sink: Sink, *,  # noqa: ANN401
                       document_num: int | None = None,
                       path: str = 'root') -> None:
        """Emit one node and, for collections, all of its descendants."""
        node = self.validator.check_node(node, document_num=document_num, path=path)

        if isinstance(node, ScalarNode):
            sink.emit(ScalarEvent(
                anchor=node.anchor,
                tag=None if node.tag == PLAIN_TAG else node.tag,
                implicit=node.implicit.flags,
                value=node.value,
                style=SCALAR_STYLES[node.style],
            ))

        elif isinstance(node, AliasNode):
            sink.emit(AliasEvent(anchor=node.anchor))

        elif isinstance(node, SequenceNode | SequenceShape):
            sink.emit(SequenceStartEvent(
                anchor=node.anchor,
                tag=None if node.tag == PLAIN_TAG else node.tag,
                implicit=node.implicit,
                flow_style=COLLECTION_STYLES[node.style],
            ))
            for index, child in enumerate(node.children):
                self.serialize_node(child, sink, document_num=document_num,
                                    path=f'{path}.children[{index}]')
            sink.emit(SequenceEndEvent())

        elif isinstance(node, MappingNode | MappingShape):
            sink.emit(MappingStartEvent(
                anchor=node.anchor,
                tag=None if node.tag == PLAIN_TAG else node.tag,
                implicit=node.implicit,
                flow_style=COLLECTION_STYLES[node.style],
            ))
            for index, (key, value) in enumerate(node.pairs):
                self.serialize_node(key, sink, document_num=document_num,
                                    path=f'{path}.pairs[{index}].key')
                self.serialize_node(value, sink, document_num=document_num,
                                    path=f'{path}.pairs[{index}].value')
            sink.emit(MappingEndEvent())
