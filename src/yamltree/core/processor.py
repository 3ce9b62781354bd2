"""YAML stream processor.

This module defines the entry point of the tree layer. The processor
combines the loader and dumper mixins with a validator and owns the choice
of PyYAML parser and emitter classes together with the emitter options.

A processor instance keeps configuration only. Every call acquires its own
parser or emitter and releases it before returning, so independent calls
never share event state.
"""

from typing import TYPE_CHECKING, Any

from yaml import SafeLoader

from .dumper import TreeDumperMixin
from .emitter import TreeDumper
from .events import EventCollector, EventSource, event_sink, event_source
from .loader import TreeLoaderMixin
from .validator import TreeValidator

if TYPE_CHECKING:
    from collections.abc import Iterable
    from io import TextIOBase
    from typing import Self

    from yaml import BaseDumper, BaseLoader
    from yaml.events import Event

    from yamltree.schema import Document
    from yamltree.settings import TreeSettings


class StreamProcessor(TreeLoaderMixin, TreeDumperMixin):
    """Converter between YAML text and document trees.

    Typical usage:
        >>> processor = StreamProcessor()
        >>> documents = processor.load('a: 1')
        >>> processor.dump(documents)
        'a: 1\\n'
    """

    def __init__(self, loader: type['BaseLoader'] = SafeLoader,
                 dumper: type['BaseDumper'] = TreeDumper, *,
                 strict: bool = False,
                 **emitter_options: Any) -> None:  # noqa: ANN401
        """Initialize the processor.

        Args:
            loader: PyYAML loader class providing the parser. Only its
                parsing stage is used; no constructors are involved.
            dumper: PyYAML dumper class providing the emitter. Classes
                without `TreeEmitterMixin` write tag directives sorted and
                may close an open plain scalar with `...`.
            strict: Whether malformed presentation flags raise instead of
                emitting warnings.
            **emitter_options: Options passed to the emitter (`canonical`,
                `indent`, `width`, `allow_unicode`, `line_break`). Options
                set to `None` are left to the emitter defaults.
        """
        self.loader = loader
        self.dumper = dumper

        self.validator = TreeValidator(strict)
        self.emitter_options = {
            name: value
            for name, value in emitter_options.items()
            if value is not None
        }

    @classmethod
    def from_settings(cls, settings: 'TreeSettings') -> 'Self':
        """Create a processor configured from settings.

        Args:
            settings: Resolved runtime settings.

        Returns:
            Processor using the LibYAML-backed classes when requested.
        """
        loader, dumper = SafeLoader, TreeDumper
        if settings.libyaml:
            from yaml import CSafeDumper, CSafeLoader  # noqa: PLC0415

            loader, dumper = CSafeLoader, CSafeDumper

        return cls(
            loader,
            dumper,
            strict=settings.strict,
            **settings.emitter_options(),
        )

    def load(self, content: 'TextIOBase | str') -> list['Document']:
        """Parse YAML content into documents.

        Args:
            content: YAML content as a string or file-like object.

        Returns:
            Documents in stream order.

        Raises:
            EventSourceError: If the parser rejects the content.
            GrammarError: If the parser produces an invalid event stream.
        """
        with event_source(content, self.loader) as source:
            return self.compose_stream(source)

    def compose(self, events: 'Iterable[Event]') -> list['Document']:
        """Build documents from already produced events.

        Args:
            events: PyYAML events of a whole stream.

        Returns:
            Documents in stream order.

        Raises:
            GrammarError: If the events do not follow the stream grammar.
        """
        return self.compose_stream(EventSource(events))

    def dump(self, documents: 'Iterable[Any]') -> str:
        """Write documents as YAML text.

        Args:
            documents: Documents as models or native mappings.

        Returns:
            The emitted text. An empty stream yields an empty string.

        Raises:
            StructuralError: If a document or node is malformed.
            EventSinkError: If the emitter rejects an event.
        """
        with event_sink(self.dumper, **self.emitter_options) as sink:
            self.serialize_stream(documents, sink)
            return sink.getvalue()

    def serialize(self, documents: 'Iterable[Any]') -> list['Event']:
        """Produce the events of documents without emitting them.

        Args:
            documents: Documents as models or native mappings.

        Returns:
            Events of the whole stream.

        Raises:
            StructuralError: If a document or node is malformed.
        """
        collector = EventCollector()
        self.serialize_stream(documents, collector)

        return list(collector)
