"""Host-neutral data model of YAML document trees.

Defines immutable Pydantic models for documents and nodes together with
the presentation flags (styles, implicit markers, tag sentinels) needed to
write a loaded tree back without losing syntactic detail.
"""

from .documents import Document, TagDirective, Version
from .nodes import NODE_MODELS, AliasNode, MappingNode, Node, ScalarNode, SequenceNode
from .styles import (
    NON_SPECIFIC_TAG,
    PLAIN_TAG,
    CollectionStyle,
    ScalarImplicit,
    ScalarStyle,
)

__all__ = (
    'NODE_MODELS',
    'NON_SPECIFIC_TAG',
    'PLAIN_TAG',
    'AliasNode',
    'CollectionStyle',
    'Document',
    'MappingNode',
    'Node',
    'ScalarImplicit',
    'ScalarNode',
    'ScalarStyle',
    'SequenceNode',
    'TagDirective',
    'Version',
)
