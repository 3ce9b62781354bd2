"""Tree layer between YAML event streams and document trees.

This module defines the core infrastructure for converting YAML text
into structured document trees and back.

It provides:
- scoped access to the PyYAML parser and emitter as event streams;
- construction of documents from parse events;
- shallow shape validation of documents and nodes;
- emission of documents as events and text, through an emitter that
  keeps tag directives in order.

The primary public entry point is `StreamProcessor`, which combines all
of the above behind `load` and `dump`.
"""

from .emitter import TreeDumper, TreeEmitterMixin
from .processor import StreamProcessor
from .validator import TreeValidator

__all__ = (
    'StreamProcessor',
    'TreeDumper',
    'TreeEmitterMixin',
    'TreeValidator',
)
