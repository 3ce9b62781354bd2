"""Tree construction from YAML parse events.

This module defines a mixin that consumes a stream of PyYAML events and
builds an ordered list of `Document` trees. The expected grammar is::

    StreamStart (DocumentStart Node DocumentEnd)* StreamEnd

Any event out of position is a fatal `GrammarError` and no partial result
is returned. Aliases are kept symbolic and anchors are not checked for
uniqueness.
"""

from typing import TYPE_CHECKING, TypeVar

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

from yamltree.errors import GrammarError
from yamltree.schema import (
    NON_SPECIFIC_TAG,
    PLAIN_TAG,
    AliasNode,
    Document,
    MappingNode,
    ScalarImplicit,
    ScalarNode,
    ScalarStyle,
    SequenceNode,
    TagDirective,
)

from .events import EVENT_COLLECTION_STYLES, EVENT_SCALAR_STYLES

if TYPE_CHECKING:
    from yamltree.schema import CollectionStyle, Node

    from .events import EventSource

EventT = TypeVar('EventT', bound=Event)


class TreeLoaderMixin:
    """Mixin building document trees from an event source.

    Each `compose_*` method consumes exactly the events of the element it
    builds, starting with the element's first event.
    """

    def compose_stream(self, source: 'EventSource') -> list[Document]:
        """Build all documents of a stream.

        Args:
            source: Event source positioned before the stream start.

        Returns:
            Documents in stream order. An empty stream yields an empty list.

        Raises:
            GrammarError: If the events do not follow the stream grammar.
            EventSourceError: If the parser fails.
        """
        self.expect_event(source, StreamStartEvent)

        documents = []
        while not isinstance(source.peek(), StreamEndEvent):
            documents.append(self.compose_document(source))

        self.expect_event(source, StreamEndEvent)

        if (event := source.peek()) is not None:
            raise GrammarError.from_event(
                f'Expected nothing after the stream end, but got {type(event).__name__}',
                event,
            )

        return documents

    def compose_document(self, source: 'EventSource') -> Document:
        """Build one document including its directives and markers."""
        start = self.expect_event(source, DocumentStartEvent)

        version = None
        if start.version is not None:
            major, minor = start.version
            version = (major, minor)

        tag_directives = [
            TagDirective(handle=handle, prefix=prefix)
            for handle, prefix in (start.tags or {}).items()
        ]

        root = self.compose_node(source)

        end = self.expect_event(source, DocumentEndEvent)

        return Document(
            root=root,
            version=version,
            tag_directives=tag_directives,
            start_implicit=not start.explicit,
            end_implicit=not end.explicit,
        )

    def compose_node(self, source: 'EventSource') -> 'Node':
        """Build the node starting at the next event.

        Raises:
            GrammarError: If the next event does not start a node.
        """
        event = source.pull()

        if isinstance(event, ScalarEvent):
            return self.compose_scalar(event)

        if isinstance(event, AliasEvent):
            return self.compose_alias(event)

        if isinstance(event, SequenceStartEvent):
            return self.compose_sequence(source, event)

        if isinstance(event, MappingStartEvent):
            return self.compose_mapping(source, event)

        raise GrammarError.from_event(
            f'Expected a node, but got {type(event).__name__}',
            event,
        )

    def compose_scalar(self, event: ScalarEvent) -> ScalarNode:
        """Build a scalar node from its event.

        Without an explicit tag, plain scalars get the `?` sentinel and
        all other styles the non-specific `!` tag.
        """
        style = self.scalar_style(event)

        tag = event.tag
        if tag is None:
            tag = PLAIN_TAG if style is ScalarStyle.PLAIN else NON_SPECIFIC_TAG

        plain, quoted = event.implicit

        return ScalarNode(
            value=event.value,
            tag=tag,
            implicit=ScalarImplicit.from_flags(plain, quoted),
            anchor=event.anchor,
            style=style,
        )

    def compose_alias(self, event: AliasEvent) -> AliasNode:
        """Build an alias node; the anchor stays unresolved."""
        if not event.anchor:
            raise GrammarError.from_event('Alias without an anchor', event)

        return AliasNode(anchor=event.anchor)

    def compose_sequence(self, source: 'EventSource',
                         event: SequenceStartEvent) -> SequenceNode:
        """Build a sequence node and all of its children."""
        children = []
        while not isinstance(source.peek(), SequenceEndEvent):
            children.append(self.compose_node(source))

        self.expect_event(source, SequenceEndEvent)

        return SequenceNode(
            children=children,
            tag=event.tag or PLAIN_TAG,
            anchor=event.anchor,
            implicit=bool(event.implicit),
            style=self.collection_style(event),
        )

    def compose_mapping(self, source: 'EventSource',
                        event: MappingStartEvent) -> MappingNode:
        """Build a mapping node from alternating key and value nodes."""
        pairs = []
        while not isinstance(source.peek(), MappingEndEvent):
            key = self.compose_node(source)
            value = self.compose_node(source)
            pairs.append((key, value))

        self.expect_event(source, MappingEndEvent)

        return MappingNode(
            pairs=pairs,
            tag=event.tag or PLAIN_TAG,
            anchor=event.anchor,
            implicit=bool(event.implicit),
            style=self.collection_style(event),
        )

    @staticmethod
    def expect_event(source: 'EventSource', kind: type[EventT]) -> EventT:
        """Consume the next event, requiring it to be of the given kind.

        Raises:
            GrammarError: If the next event is of another kind or missing.
        """
        event = source.pull()
        if not isinstance(event, kind):
            raise GrammarError.from_event(
                f'Expected {kind.__name__}, but got {type(event).__name__}',
                event,
            )

        return event

    @staticmethod
    def scalar_style(event: ScalarEvent) -> ScalarStyle:
        """Translate the style of a scalar event."""
        try:
            return EVENT_SCALAR_STYLES[event.style]
        except KeyError:
            raise GrammarError.from_event(
                f'Unknown scalar style {event.style!r}',
                event,
            ) from None

    @staticmethod
    def collection_style(event: SequenceStartEvent | MappingStartEvent) -> 'CollectionStyle':
        """Translate the flow style of a collection start event."""
        try:
            return EVENT_COLLECTION_STYLES[event.flow_style]
        except KeyError:
            raise GrammarError.from_event(
                f'Unknown collection style {event.flow_style!r}',
                event,
            ) from None
