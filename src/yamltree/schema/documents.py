"""Document model of a YAML stream.

A document is a single root node plus the document-level metadata needed
to write it back: the `%YAML` version directive, `%TAG` directives and
whether the `---` / `...` markers were omitted in the source text.
"""

from typing import Annotated

from pydantic import Field, StrictInt, field_validator

from yamltree.models import SchemaModel

from .nodes import Node  # noqa: TC001

#: `%YAML` directive as a `(major, minor)` pair.
Version = tuple[StrictInt, StrictInt]


class TagDirective(SchemaModel):
    """Single `%TAG` directive mapping a handle to a URI prefix."""

    handle: Annotated[str, Field(min_length=1)] = Field(
        title='Tag handle',
        description='Shorthand handle, for example "!e!".',
    )

    prefix: Annotated[str, Field(min_length=1)] = Field(
        title='Tag prefix',
        description='URI prefix substituted for the handle.',
    )


def check_unique_handles(directives: list[TagDirective]) -> list[TagDirective]:
    """Reject tag directives declaring the same handle twice.

    Args:
        directives: Tag directives in declaration order.

    Returns:
        The same directives.

    Raises:
        ValueError: If a handle is declared more than once.
    """
    seen = set()
    for directive in directives:
        if directive.handle in seen:
            raise ValueError(f'duplicate tag handle {directive.handle!r}')
        seen.add(directive.handle)

    return directives


class Document(SchemaModel):
    """One YAML document of a stream."""

    root: Node = Field(
        title='Root node',
        description='The single root node of the document.',
    )

    version: Version | None = Field(
        default=None,
        title='Version directive',
        description='The `%YAML` directive as `(major, minor)`, if present.',
    )

    tag_directives: list[TagDirective] = Field(
        default_factory=list,
        title='Tag directives',
        description='The `%TAG` directives in declaration order.',
    )

    start_implicit: bool = Field(
        default=False,
        title='Implicit document start',
        description='Whether the `---` marker was omitted.',
    )

    end_implicit: bool = Field(
        default=False,
        title='Implicit document end',
        description='Whether the `...` marker was omitted.',
    )

    @field_validator('tag_directives')
    @classmethod
    def unique_handles(cls, value: list[TagDirective]) -> list[TagDirective]:
        """Ensure tag handles are declared once."""
        return check_unique_handles(value)
