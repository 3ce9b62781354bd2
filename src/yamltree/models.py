"""Base Pydantic models for tree elements and settings.

This module defines the foundational model classes used by all document
tree structures. It enforces immutability and strict schema validation so
that a loaded tree can be inspected, compared and passed around without
being modified behind the caller's back.
"""

from pydantic import BaseModel, ConfigDict
from pydantic_settings import BaseSettings, SettingsConfigDict


class SchemaModel(BaseModel):
    """Base immutable model for all tree elements.

    This class serves as the root for all Pydantic models representing
    documents, nodes and document-level directives.

    Design principles enforced by this model:
        - Immutability: tree elements cannot be modified after creation.
          A new tree is built for every load and consumed by a dump.
        - Strict schema validation: unknown or extra fields are rejected
          to avoid silently dropping misspelled node attributes.

    All tree models must inherit from this class.
    """

    model_config = ConfigDict(
        frozen=True,
        extra='forbid',
    )


class SettingsModel(BaseSettings):
    """Base immutable model for runtime settings.

    This class serves as the root for settings models responsible for
    resolving runtime configuration from environment variables.

    Design principles enforced by this model:
        - Immutability: resolved settings cannot be modified after creation.
        - Tolerant schema handling: unknown or extra fields are ignored.
          This allows the surrounding environment to contain unrelated
          variables without breaking configuration resolution.
    """

    model_config = SettingsConfigDict(
        frozen=True,
        extra='ignore',
    )
