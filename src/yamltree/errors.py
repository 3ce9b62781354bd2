"""Core exception hierarchy.

This module defines the error and warning types used across the library
to report malformed trees, event streams that break the YAML stream
grammar, and failures of the underlying YAML parser or emitter.

Every error may carry an `ErrorContext` and renders it as a location line
followed by a YAML snippet of the offending element.
"""

from os import linesep
from typing import TYPE_CHECKING, Any, ClassVar, TypedDict

from pydantic import BaseModel
from yaml import dump
from yaml.error import MarkedYAMLError

if TYPE_CHECKING:
    from typing import Self

if TYPE_CHECKING:
    from pydantic import ValidationError
    from yaml.error import YAMLError
    from yaml.events import Event

SNIPPET_ELLIPSIS = f' ...{linesep}'
SNIPPET_INDENT = 2

FORMAT_REPLACER = '<runtime object>'
FORMAT_FILENAME = '<unicode string>'
FORMAT_INDENT = 4

SCALARS = (str, int, float, bool)
MAPPINGS = (dict,)
SEQUENCES = (list, tuple)


class ErrorContext(TypedDict, total=False):
    """Container describing contextual information for error formatting.

    All fields are optional; the formatter adapts output based on
    provided values.
    """

    #: Name of the source stream where the error occurred.
    filename: str | None

    #: Line number in the source stream.
    line_num: int | None
    #: Column number in the source stream.
    column_num: int | None

    #: Zero-based position of the document in the stream.
    document_num: int | None
    #: Dotted path of the node inside the document, e.g. `root.pairs[0].key`.
    path: str | None

    #: Underlying exception that triggered formatting.
    error: Exception | None

    #: Native element associated with the error.
    element: Any


class ErrorFormatter:
    """Utility class for formatting tree-related errors.

    This formatter is responsible for producing human-readable
    error messages with optional source location and YAML-based
    contextual snippets.
    """

    @classmethod
    def format(cls, message: str, context: ErrorContext | None = None) -> str:
        """Format an error message using contextual information.

        Args:
            message: Base human-readable error message.
            context: Optional error context with location and data.

        Returns:
            A fully formatted error message suitable for display.
        """
        if not context:
            return message

        message += linesep
        message += cls.get_location_string(context, indent=FORMAT_INDENT)
        message += cls.get_snippet_string(context, indent=FORMAT_INDENT * 2)

        return message

    @classmethod
    def get_location_string(cls, context: ErrorContext, *,
                            indent: str | int | None = None) -> str:
        """Format source and tree location information.

        Args:
            context: Error context containing location metadata.
            indent: Optional indentation (string or number of spaces).

        Returns:
            A formatted location string including filename, line and
            column, document number and node path when available.
        """
        indent = cls._ensure_indent(indent)
        message = ''

        if (line_num := context.get('line_num')) is not None:
            filename = context.get('filename') or FORMAT_FILENAME
            message += f'{indent}in "{filename}", line {line_num + 1}'
            if (column_num := context.get('column_num')) is not None:
                message += f', column {column_num + 1}'
            message += linesep

        if (document_num := context.get('document_num')) is not None:
            message += f'{indent}on document {document_num + 1}'
            if path := context.get('path'):
                message += f', at {path}'
            message += linesep

        return message

    @classmethod
    def get_snippet_string(cls, context: ErrorContext, *,
                           indent: str | int | None = None) -> str:
        """Generate a formatted snippet illustrating the error context.

        Args:
            context: Error context containing element or exception data.
            indent: Optional indentation (string or number of spaces).

        Returns:
            A formatted multi-line snippet string, or an empty string
            if no snippet data is available.
        """
        indent = cls._ensure_indent(indent)

        error = context.get('error')
        if isinstance(error, MarkedYAMLError) and error.problem_mark is not None:
            snippet = error.problem_mark.get_snippet(indent=0) or ''
            return cls._make_indent(snippet, indent)

        if (element := context.get('element')) is not None:
            snippet = f'{indent}{SNIPPET_ELLIPSIS}'
            snippet += cls._make_yaml(element, indent)
            snippet += linesep
            return snippet

        return ''

    @classmethod
    def _filter_unsafe(cls, value: Any) -> Any:  # noqa: ANN401
        """Recursively reduce values to plain YAML-safe data.

        Models are dumped to their native form, string subclasses such as
        enumeration members become plain strings and anything else that is
        not a scalar or a container is replaced with a placeholder.

        Args:
            value: Arbitrary value to sanitize.

        Returns:
            A YAML-safe representation of the value.
        """
        if value is None:
            return value

        if isinstance(value, BaseModel):
            return value.model_dump(mode='json')

        if isinstance(value, str):
            return str(value)

        if isinstance(value, SCALARS):
            return value

        if isinstance(value, MAPPINGS):
            return {
                cls._filter_unsafe(key): cls._filter_unsafe(item)
                for key, item in value.items()
            }

        if isinstance(value, SEQUENCES):
            return [cls._filter_unsafe(item) for item in value]

        return FORMAT_REPLACER

    @classmethod
    def _make_yaml(cls, value: Any, indent: str = '') -> str:  # noqa: ANN401
        """Serialize a value to a YAML-formatted string.

        Args:
            value: Arbitrary value to serialize.
            indent: Optional indentation prefix.

        Returns:
            A YAML-formatted string representation of the value.
        """
        data = dump(
            cls._filter_unsafe(value),
            indent=SNIPPET_INDENT,
            sort_keys=False,
            allow_unicode=True,
        )

        return cls._make_indent(data, indent)

    @staticmethod
    def _make_indent(value: str, indent: str) -> str:
        """Apply indentation to a multi-line string.

        Empty or whitespace-only lines are omitted.

        Args:
            value: Original multi-line string.
            indent: Indentation prefix.

        Returns:
            Indented string.
        """
        if not indent:
            return value

        return linesep.join(
            f'{indent}{line}'
            for line in value.splitlines()
            if line.strip()
        )

    @staticmethod
    def _ensure_indent(indent: str | int | None = None) -> str:
        """Normalize indentation input.

        Args:
            indent: Indentation as string or number of spaces.

        Returns:
            A string consisting of spaces or the provided string.
        """
        if isinstance(indent, int) and indent > 0:
            return ' ' * indent

        if isinstance(indent, str):
            return indent

        return ''


class StructureWarning(UserWarning):
    """Warning emitted when a malformed presentation flag is replaced.

    A missing or invalid style or implicit marker on an otherwise
    well-formed node or document does not abort a dump: the default
    value is used instead and this warning is emitted.
    """


class YAMLTreeError(Exception, ErrorFormatter):
    """Base exception for all yaml-tree errors.

    All custom exceptions raised by the library inherit from this class
    to allow unified error handling by callers.
    """

    def __init__(self, message: str, *,
                 context: ErrorContext | None = None) -> None:
        """Initialize an error.

        Args:
            message: Human-readable error description.
            context: Error context containing optional location data.
        """
        self.message = message
        self.context = context

        super().__init__(message)

    def __str__(self) -> str:
        """String representation."""
        return self.format(self.message, self.context)

    @classmethod
    def from_event(cls, message: str, event: 'Event | None') -> 'Self':
        """Create an error instance from a YAML event.

        Events produced by a parser carry source marks; synthetic events
        do not, in which case the error has no location.

        Args:
            message: Human-readable error message.
            event: Event associated with the error.

        Returns:
            An initialized error instance with location context.
        """
        mark = getattr(event, 'start_mark', None)
        if mark is None:
            return cls(message)

        return cls(message, context=ErrorContext(
            filename=mark.name,
            line_num=mark.line,
            column_num=mark.column,
        ))


class GrammarError(YAMLTreeError):
    """Error raised when an event stream violates the stream grammar.

    The expected grammar is `StreamStart (DocumentStart Node DocumentEnd)*
    StreamEnd`. Any event out of position aborts the whole load.
    """


class EventStreamError(YAMLTreeError):
    """Error reported by the underlying YAML parser or emitter.

    The message is prefixed with the phase (`load` or `dump`) in which
    the failure happened.
    """

    #: Phase prefix of the error message.
    phase: ClassVar[str] = 'yaml'

    @classmethod
    def from_yaml_error(cls, error: 'YAMLError') -> 'Self':
        """Wrap a PyYAML failure.

        Args:
            error: Exception raised by the YAML parser or emitter.

        Returns:
            Error carrying the phase-prefixed problem description and,
            for marked errors, the source position.
        """
        if isinstance(error, MarkedYAMLError) and error.problem_mark is not None:
            error_context = ErrorContext(
                filename=error.problem_mark.name,
                line_num=error.problem_mark.line,
                column_num=error.problem_mark.column,
                error=error,
            )
            return cls(f'{cls.phase}: {error.problem}', context=error_context)

        return cls(f'{cls.phase}: {error}')


class EventSourceError(EventStreamError):
    """Error raised by the YAML parser while pulling events."""

    phase = 'load'


class EventSinkError(EventStreamError):
    """Error raised by the YAML emitter while pushing events."""

    phase = 'dump'


class StructuralError(YAMLTreeError):
    """Error raised when a tree fails shape validation before dumping.

    Subclasses identify the failing part of the document through the
    `part` attribute.
    """

    #: Name of the failing part of the document.
    part: ClassVar[str] = 'document'

    @classmethod
    def at(cls, message: str, element: Any = None, *,  # noqa: ANN401
           document_num: int | None = None,
           path: str | None = None,
           error: Exception | None = None) -> 'Self':
        """Create an error located inside a tree.

        Args:
            message: Human-readable error message.
            element: The offending native element, rendered as a snippet.
            document_num: Zero-based position of the document in the stream.
            path: Node path inside the document.
            error: Optional underlying exception.

        Returns:
            An initialized error instance with tree location context.
        """
        return cls(message, context=ErrorContext(
            document_num=document_num,
            path=path,
            error=error,
            element=element,
        ))

    @classmethod
    def from_pydantic_error(cls, message: str, error: 'ValidationError',
                            element: Any = None, *,  # noqa: ANN401
                            document_num: int | None = None,
                            path: str | None = None) -> 'Self':
        """Create a structural error from a Pydantic validation failure.

        The first reported issue is appended to the message together with
        the field it was found in.

        Args:
            message: Headline of the error.
            error: ValidationError raised while checking the element.
            element: The offending native element.
            document_num: Zero-based position of the document in the stream.
            path: Path of the element inside the document.

        Returns:
            StructuralError describing the first validation issue.
        """
        for item in error.errors(include_url=False, include_input=False):
            location = '.'.join(str(key) for key in item['loc'])
            reason = (item.get('msg') or '').strip()
            if location:
                message += f'{linesep}{" " * FORMAT_INDENT}{location}: {reason}'
            elif reason:
                message += f'{linesep}{" " * FORMAT_INDENT}{reason}'
            break

        return cls.at(message, element, document_num=document_num, path=path, error=error)


class DocumentError(StructuralError):
    """Document that is not a mapping of known fields.

    Also raised in strict mode for invalid start or end marker flags.
    """

    part = 'document'


class RootError(StructuralError):
    """Missing or malformed document root."""

    part = 'root'


class TagDirectivesError(StructuralError):
    """Malformed `%TAG` directives of a document."""

    part = 'tag_directives'


class VersionError(StructuralError):
    """Malformed `%YAML` version directive of a document."""

    part = 'version'


class NodeShapeError(StructuralError):
    """Node whose shape does not match its kind."""

    part = 'node'


class ScalarValueError(StructuralError):
    """Scalar node whose value is not text."""

    part = 'scalar'
