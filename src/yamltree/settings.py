"""Runtime settings resolved from the environment.

Every setting can be provided through a `YAMLTREE_`-prefixed environment
variable, for example `YAMLTREE_STRICT=1` or `YAMLTREE_INDENT=4`.
"""

from typing import Any, Literal

import yaml
from pydantic import Field, field_validator
from pydantic_settings import SettingsConfigDict

from yamltree.models import SettingsModel

#: Settings passed to the emitter as options.
EMITTER_OPTIONS = (
    'canonical',
    'indent',
    'width',
    'allow_unicode',
    'line_break',
)


class TreeSettings(SettingsModel):
    """Settings of the YAML tree processor."""

    model_config = SettingsConfigDict(
        env_prefix='YAMLTREE_',
        frozen=True,
        extra='ignore',
    )

    strict: bool = Field(
        default=False,
        title='Strict mode',
        description=(
            'Raise on missing or invalid style and implicit flags instead '
            'of emitting a warning and using the default.'
        ),
    )

    libyaml: bool = Field(
        default=False,
        title='Use LibYAML',
        description='Use the LibYAML-backed parser and emitter.',
    )

    canonical: bool | None = Field(
        default=None,
        title='Canonical output',
        description='Write the canonical YAML form.',
    )

    indent: int | None = Field(
        default=None,
        ge=2,
        le=9,
        title='Indentation',
        description='Number of spaces per block indentation level.',
    )

    width: int | None = Field(
        default=None,
        gt=0,
        title='Line width',
        description='Preferred maximum line width.',
    )

    allow_unicode: bool = Field(
        default=True,
        title='Allow unicode',
        description='Write non-ASCII characters as is instead of escaping them.',
    )

    line_break: Literal['\n', '\r', '\r\n'] | None = Field(
        default=None,
        title='Line break',
        description='Line break written between lines.',
    )

    @field_validator('libyaml')
    @classmethod
    def libyaml_available(cls, value: bool) -> bool:
        """Ensure PyYAML was built with LibYAML when it is requested."""
        if value and not yaml.__with_libyaml__:
            raise ValueError('PyYAML is built without LibYAML support')
        return value

    def emitter_options(self) -> dict[str, Any]:
        """Return the options to pass to the emitter."""
        return {
            name: value
            for name in EMITTER_OPTIONS
            if (value := getattr(self, name)) is not None
        }
