"""Presentation flags carried by tree nodes.

Styles and implicit flags describe how a node was (or should be) written,
not what it means. They are kept on the tree so that a loaded document can
be emitted again with the same surface syntax.

Every enumeration also accepts its numeric LibYAML code (the position of
the member), so native data written with codes instead of names validates
as well.
"""

from enum import StrEnum
from typing import Self

#: Tag of a plain scalar whose type is left to implicit resolution.
PLAIN_TAG = '?'

#: Non-specific tag of a quoted or block scalar without an explicit tag.
NON_SPECIFIC_TAG = '!'


class CodedEnum(StrEnum):
    """String enumeration that also resolves positional integer codes."""

    @classmethod
    def _missing_(cls, value: object) -> Self | None:
        if isinstance(value, int) and not isinstance(value, bool):
            members = tuple(cls)
            if 0 <= value < len(members):
                return members[value]
        return None

    @property
    def code(self) -> int:
        """Positional integer code of the member."""
        return tuple(type(self)).index(self)


class ScalarStyle(CodedEnum):
    """Surface syntax of a scalar node."""

    ANY = 'any'
    PLAIN = 'plain'
    SINGLE_QUOTED = 'single-quoted'
    DOUBLE_QUOTED = 'double-quoted'
    LITERAL = 'literal'
    FOLDED = 'folded'


class CollectionStyle(CodedEnum):
    """Surface syntax of a sequence or mapping node."""

    ANY = 'any'
    BLOCK = 'block'
    FLOW = 'flow'


class ScalarImplicit(CodedEnum):
    """Implicit tag resolution allowed for a scalar.

    The two flags reported by a YAML parser are mutually exclusive, so they
    collapse into a single value.
    """

    NONE = 'none'
    PLAIN = 'plain'
    QUOTED = 'quoted'

    @classmethod
    def from_flags(cls, plain: bool, quoted: bool) -> Self:
        """Collapse a `(plain, quoted)` flags pair."""
        if plain:
            return cls.PLAIN
        if quoted:
            return cls.QUOTED
        return cls.NONE

    @property
    def flags(self) -> tuple[bool, bool]:
        """Expand into a `(plain, quoted)` flags pair."""
        return self is ScalarImplicit.PLAIN, self is ScalarImplicit.QUOTED
