"""Structured YAML document trees.

The `yamltree` package converts a YAML stream into a tree of documents
and nodes, and writes such a tree back, keeping every syntactic detail a
parser reports: tags, anchors, aliases, scalar and collection styles,
implicit-resolution flags, version and tag directives, and explicit
document markers.

Key features:
- lossless load and dump of multi-document streams through PyYAML;
- immutable Pydantic models for documents and nodes;
- shape validation of hand-built trees with precise error locations;
- a JSON-compatible native form and a command-line converter.

Scalar values are never resolved to typed objects and aliases are never
expanded; both are left to the application.
"""

from typing import TYPE_CHECKING, Any

from .core import StreamProcessor
from .native import from_native, to_native
from .settings import TreeSettings

if TYPE_CHECKING:
    from collections.abc import Iterable
    from io import TextIOBase

    from .schema import Document

__all__ = (
    'StreamProcessor',
    'TreeSettings',
    'dump',
    'from_native',
    'load',
    'to_native',
)


def load(content: 'TextIOBase | str', *,
         settings: TreeSettings | None = None) -> list['Document']:
    """Parse a YAML stream into documents.

    Args:
        content: YAML content as a string or file-like object.
        settings: Optional settings; resolved from the environment
            when omitted.

    Returns:
        Documents in stream order.

    Raises:
        EventSourceError: If the content is not valid YAML.
        GrammarError: If the parser produces an invalid event stream.
    """
    processor = StreamProcessor.from_settings(settings or TreeSettings())
    return processor.load(content)


def dump(documents: 'Iterable[Any]', *,
         settings: TreeSettings | None = None) -> str:
    """Write documents as a YAML stream.

    Args:
        documents: Documents as models or native mappings.
        settings: Optional settings; resolved from the environment
            when omitted.

    Returns:
        YAML text of the whole stream.

    Raises:
        StructuralError: If a document or node is malformed.
        EventSinkError: If the emitter rejects the tree.
    """
    processor = StreamProcessor.from_settings(settings or TreeSettings())
    return processor.dump(documents)
