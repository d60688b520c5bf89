"""Diagnostic context of a parse call.

The context identifies where a step comes from. It never changes parse
results and is only used to locate a failing step in error messages.
"""

from pydantic import Field

from rest_steps.errors import ErrorContext
from rest_steps.models import SchemaModel


class ParseContext(SchemaModel):
    """Metadata about the suite a step belongs to."""

    api: str | None = Field(
        default=None,
        title='API name',
        description='Name of the API the suite is testing.',
    )

    suite: str | None = Field(
        default=None,
        title='Suite name',
        description='Name of the test suite the step belongs to.',
    )

    filename: str | None = Field(
        default=None,
        title='Source file',
        description='Path of the file the step was read from.',
    )

    version: str | None = Field(
        default=None,
        title='Format version',
        description='Version hint of the suite format, e.g. `0.90.7`.',
        examples=['0.90.7'],
    )

    step_num: int | None = Field(
        default=None,
        ge=0,
        title='Step number',
        description='Zero-based position of the step in the suite.',
    )

    def error_context(self) -> ErrorContext:
        """Build an error formatting context.

        Returns:
            Error context with all known fields set.
        """
        return ErrorContext(**self.model_dump(exclude_none=True))
