"""Tests for scoped event sources and sinks."""

from typing import TYPE_CHECKING

import pytest
from yaml.events import DocumentStartEvent, StreamEndEvent, StreamStartEvent

from yamltree.core.events import EventSource, event_sink, event_source
from yamltree.errors import EventSinkError, EventSourceError, GrammarError

if TYPE_CHECKING:
    from yaml import SafeDumper, SafeLoader


def test_source_lookahead() -> None:
    """Verify that peeking does not consume events."""
    start, end = StreamStartEvent(), StreamEndEvent()
    source = EventSource([start, end])

    assert source.peek() is start
    assert source.peek() is start
    assert source.pull() is start
    assert source.pull() is end
    assert source.peek() is None

    with pytest.raises(GrammarError, match=r'^Unexpected end of event stream'):
        source.pull()


def test_source_from_parser(loader: 'type[SafeLoader]') -> None:
    """Verify that parser events are pulled in order."""
    with event_source('--- a\n', loader) as source:
        assert isinstance(source.pull(), StreamStartEvent)
        assert isinstance(source.pull(), DocumentStartEvent)


def test_source_parser_failure(loader: 'type[SafeLoader]') -> None:
    """Verify that parser failures surface when the event is reached."""
    with event_source('a: [1, 2\n', loader) as source:
        source.pull()

        with pytest.raises(EventSourceError, match=r'^load: '):
            while source.pull():
                pass


def test_sink_output_requires_stream_end(dumper: 'type[SafeDumper]') -> None:
    """Verify that the output is only readable after the stream end."""
    with event_sink(dumper) as sink:
        sink.emit(StreamStartEvent())

        with pytest.raises(EventSinkError, match=r'^dump: output requested before the stream end'):
            sink.getvalue()

        sink.emit(StreamEndEvent())

        assert sink.getvalue() == ''


def test_sink_emitter_failure(dumper: 'type[SafeDumper]') -> None:
    """Verify that emitter failures are wrapped."""
    with event_sink(dumper) as sink, pytest.raises(EventSinkError, match=r'^dump: expected StreamStartEvent'):
        sink.emit(StreamEndEvent())
