"""Scoped access to PyYAML event streams.

This module wraps the PyYAML parser and emitter behind two small
interfaces used by the tree loader and dumper:

- `EventSource` pulls events with a single event of lookahead;
- `EventSink` pushes events into an emitter writing to an owned buffer.

Both are acquired through context managers that dispose of the parser or
emitter on every exit path, so no parser state outlives a call.

The style tables translate between tree styles and the style attributes
of PyYAML events.
"""

from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from io import StringIO
from typing import TYPE_CHECKING, Any

from yaml.error import YAMLError
from yaml.events import Event, StreamEndEvent

from yamltree.errors import EventSinkError, EventSourceError, GrammarError
from yamltree.schema import CollectionStyle, ScalarStyle

if TYPE_CHECKING:
    from io import TextIOBase

    from yaml import BaseDumper, BaseLoader

#: Scalar style to `ScalarEvent.style`.
SCALAR_STYLES: dict[ScalarStyle, str | None] = {
    ScalarStyle.ANY: None,
    ScalarStyle.PLAIN: '',
    ScalarStyle.SINGLE_QUOTED: "'",
    ScalarStyle.DOUBLE_QUOTED: '"',
    ScalarStyle.LITERAL: '|',
    ScalarStyle.FOLDED: '>',
}

#: `ScalarEvent.style` to scalar style. The pure Python parser reports
#: plain scalars as `None`, the LibYAML one as an empty string.
EVENT_SCALAR_STYLES: dict[str | None, ScalarStyle] = {
    None: ScalarStyle.PLAIN,
    '': ScalarStyle.PLAIN,
    "'": ScalarStyle.SINGLE_QUOTED,
    '"': ScalarStyle.DOUBLE_QUOTED,
    '|': ScalarStyle.LITERAL,
    '>': ScalarStyle.FOLDED,
}

#: Collection style to `CollectionStartEvent.flow_style`.
COLLECTION_STYLES: dict[CollectionStyle, bool | None] = {
    CollectionStyle.ANY: None,
    CollectionStyle.BLOCK: False,
    CollectionStyle.FLOW: True,
}

#: `CollectionStartEvent.flow_style` to collection style.
EVENT_COLLECTION_STYLES: dict[bool | None, CollectionStyle] = {
    value: key for key, value in COLLECTION_STYLES.items()
}


class EventSource:
    """Pull interface over an iterable of events.

    Failures of the underlying parser surface as `EventSourceError`,
    running out of events as `GrammarError`.
    """

    def __init__(self, events: Iterable[Event]) -> None:
        self._events = iter(events)
        self._current: Event | None = None
        self._exhausted = False

    def peek(self) -> Event | None:
        """Return the next event without consuming it.

        Returns:
            The next event, or `None` once the source is exhausted.

        Raises:
            EventSourceError: If the parser fails to produce the event.
        """
        if self._current is None and not self._exhausted:
            try:
                self._current = next(self._events)
            except StopIteration:
                self._exhausted = True
            except YAMLError as base:
                raise EventSourceError.from_yaml_error(base) from base

        return self._current

    def pull(self) -> Event:
        """Consume and return the next event.

        Raises:
            EventSourceError: If the parser fails to produce the event.
            GrammarError: If the source is exhausted.
        """
        event = self.peek()
        if event is None:
            raise GrammarError('Unexpected end of event stream')

        self._current = None
        return event


class EventSink:
    """Push interface over a PyYAML emitter.

    The emitter writes into a buffer owned by the sink. The buffer content
    becomes readable only after the stream end event has been emitted.
    """

    def __init__(self, emitter: 'BaseDumper', buffer: StringIO) -> None:
        self._emitter = emitter
        self._buffer = buffer
        self._closed = False

    def emit(self, event: Event) -> None:
        """Push one event into the emitter.

        Raises:
            EventSinkError: If the emitter rejects the event.
        """
        try:
            self._emitter.emit(event)
        except YAMLError as base:
            raise EventSinkError.from_yaml_error(base) from base

        if isinstance(event, StreamEndEvent):
            self._closed = True

    def getvalue(self) -> str:
        """Return the emitted text.

        Raises:
            EventSinkError: If the stream has not been closed yet.
        """
        if not self._closed:
            raise EventSinkError('dump: output requested before the stream end')

        return self._buffer.getvalue()


class EventCollector(list[Event]):
    """Sink collecting events into a list instead of emitting them."""

    def emit(self, event: Event) -> None:
        """Append one event."""
        self.append(event)


def _parse_events(loader: 'BaseLoader') -> Iterator[Event]:
    """Drain events from a PyYAML loader instance."""
    while loader.check_event():
        yield loader.get_event()


@contextmanager
def event_source(content: 'TextIOBase | str',
                 loader: type['BaseLoader']) -> Iterator[EventSource]:
    """Open a parser over YAML content for the duration of a block.

    Args:
        content: YAML content as a string or file-like object.
        loader: PyYAML loader class providing the parser.

    Yields:
        Event source bound to the parser.

    Raises:
        EventSourceError: If the content can not be read.
    """
    try:
        instance = loader(content)
    except YAMLError as base:
        raise EventSourceError.from_yaml_error(base) from base

    try:
        yield EventSource(_parse_events(instance))
    finally:
        instance.dispose()


@contextmanager
def event_sink(dumper: type['BaseDumper'], **options: Any) -> Iterator[EventSink]:  # noqa: ANN401
    """Open an emitter writing into a fresh buffer for the duration of a block.

    Args:
        dumper: PyYAML dumper class providing the emitter.
        **options: Emitter options (`canonical`, `indent`, `width`,
            `allow_unicode`, `line_break`).

    Yields:
        Event sink bound to the emitter.
    """
    buffer = StringIO()
    emitter = dumper(buffer, **options)

    try:
        yield EventSink(emitter, buffer)
    finally:
        emitter.dispose()
        buffer.close()
