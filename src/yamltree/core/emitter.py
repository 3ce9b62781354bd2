"""PyYAML emitter adjusted for tree round trips.

The stock emitter differs from the tree model in two places:

- it writes `%TAG` directives sorted by handle, while documents keep them
  in declaration order;
- it closes a stream ending in an open plain scalar with `...`, which
  reads back as an explicit document end.

`TreeEmitterMixin` restores both. A `...` that is required before the
directives of a following document is still written.
"""

from yaml import SafeDumper
from yaml.events import DocumentStartEvent, StreamEndEvent


class TreeEmitterMixin:
    """Mixin for PyYAML emitters writing document trees.

    Must precede the PyYAML emitter class in the bases.
    """

    def expect_document_start(self, first: bool = False) -> None:
        """Write the directives and the start marker of a document."""
        if isinstance(self.event, StreamEndEvent):
            # Only an implicit document end leaves the stream open.
            self.open_ended = False

        if not isinstance(self.event, DocumentStartEvent) or not self.event.tags:
            super().expect_document_start(first)  # type: ignore[misc]
            return

        if self.open_ended:
            self.write_indicator('...', True)
            self.write_indent()

        if self.event.version:
            self.write_version_directive(self.prepare_version(self.event.version))

        self.tag_prefixes = self.DEFAULT_TAG_PREFIXES.copy()
        for handle, prefix in self.event.tags.items():
            self.tag_prefixes[prefix] = handle
            self.write_tag_directive(
                self.prepare_tag_handle(handle),
                self.prepare_tag_prefix(prefix),
            )

        # A document with directives always needs the start marker.
        self.write_indent()
        self.write_indicator('---', True)
        if self.canonical:
            self.write_indent()

        self.state = self.expect_document_root


class TreeDumper(TreeEmitterMixin, SafeDumper):
    """Safe dumper emitting tag directives in order and without a stray end."""
