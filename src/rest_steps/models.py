"""Base Pydantic models for parsed steps and parser settings.

This module defines the foundational model classes used by the parser.
It enforces immutability and strict schema validation so that parsed
actions are deterministic, explicit, and safe to share between threads.
"""

from pydantic import BaseModel, ConfigDict
from pydantic_settings import BaseSettings, SettingsConfigDict


class SchemaModel(BaseModel):
    """Base immutable model for all parse results.

    Design principles enforced by this model:
        - Immutability: a parsed action cannot be modified after creation.
          The caller owns the value and may pass it between threads.
        - Strict schema validation: unknown or extra fields are rejected
          to avoid silent errors caused by typos in calling code.

    All result models must inherit from this class.
    """

    model_config = ConfigDict(
        frozen=True,
        extra='forbid',
    )


class SettingsModel(BaseSettings):
    """Base immutable model for parser settings.

    This class serves as the root for settings models resolving parser
    configuration from explicit arguments or environment variables.

    Design principles enforced by this model:
        - Immutability: resolved settings cannot be modified after creation.
          This guarantees consistent behavior between parse calls.
        - Tolerant schema handling: unknown or extra fields are ignored.
          This allows the surrounding environment to contain unrelated
          variables without breaking configuration resolution.
    """

    model_config = SettingsConfigDict(
        frozen=True,
        extra='ignore',
    )
