"""Conversion between document trees and plain host data.

The native form of a stream is a list of dictionaries built only from
strings, integers, booleans, `None` and lists, so it can be written as JSON
or handed to any other host. Documents look like::

    {'root': {...}, 'version': [1, 1], 'tag_directives': [],
     'start_implicit': False, 'end_implicit': True}

and nodes like::

    {'kind': 'scalar', 'value': 'a', 'tag': '?', 'anchor': None,
     'implicit': 'plain', 'style': 'plain'}

Mapping pairs are written as `[key, value]` lists. On the way back, a flat
list alternating keys and values is accepted as well, and enumerations may
be given by their numeric codes.
"""

from typing import TYPE_CHECKING, Any

from pydantic import TypeAdapter

from yamltree.core import TreeValidator
from yamltree.schema import Document

if TYPE_CHECKING:
    from collections.abc import Iterable

#: Adapter of a whole stream.
STREAM = TypeAdapter(list[Document])


def to_native(documents: 'Iterable[Document]') -> list[dict[str, Any]]:
    """Convert documents into plain JSON-compatible data.

    Args:
        documents: Document models in stream order.

    Returns:
        One dictionary per document.
    """
    return STREAM.dump_python(list(documents), mode='json')


def from_native(data: 'Iterable[Any]', *, strict: bool = False) -> list[Document]:
    """Validate plain data and convert it into documents.

    Args:
        data: Native documents in stream order. Document models are
            accepted and kept as they are.
        strict: Whether missing or invalid style and implicit flags raise
            instead of emitting a `StructureWarning`.

    Returns:
        Document models in stream order.

    Raises:
        StructuralError: On the first invalid element in document order.
    """
    return TreeValidator(strict).build_stream(data)
