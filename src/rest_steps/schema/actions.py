"""Action definition.

An action is one API invocation declared by a test step: the API name,
its query parameters, an optional expected error and an ordered list of
body documents. It is declarative and does not implement execution.
"""

from collections.abc import Mapping
from types import MappingProxyType
from typing import Annotated

from pydantic import AfterValidator, Field, PlainSerializer

from rest_steps.models import SchemaModel

#: Separator between body documents in the wire payload.
BODY_SEPARATOR = '\n'


def _freeze(value: Mapping[str, str]) -> Mapping[str, str]:
    """Wrap a copy of the mapping into a read-only view."""
    return MappingProxyType(dict(value))


#: Read-only parameters mapping, dumped as a plain dictionary.
Parameters = Annotated[
    Mapping[str, str],
    AfterValidator(_freeze),
    PlainSerializer(dict, return_type=dict[str, str]),
]


class Action(SchemaModel):
    """Parsed API call of an action step."""

    api_name: str = Field(
        min_length=1,
        title='API name',
        description=(
            'Name of the API being invoked, for example `search` '
            'or `indices.get_warmer`.'
        ),
        examples=[
            'search',
            'indices.get_warmer',
        ],
    )

    error_expectation: str | None = Field(
        default=None,
        title='Expected error',
        description=(
            'Error the call is expected to fail with, stored verbatim. '
            'Absent when the call is expected to succeed.'
        ),
        examples=[
            'missing',
        ],
    )

    parameters: Parameters = Field(
        default_factory=dict,
        validate_default=True,
        title='Parameters',
        description=(
            'Query parameters in source order. '
            'Multi-valued parameters are joined with a comma.'
        ),
    )

    body_documents: tuple[str, ...] = Field(
        default=(),
        title='Body documents',
        description=(
            'Ordered body documents. Each entry is a single canonical JSON '
            'document or a verbatim string body.'
        ),
    )

    def __hash__(self) -> int:
        """Hash of all fields, parameters included."""
        return hash((
            self.api_name,
            self.error_expectation,
            frozenset(self.parameters.items()),
            self.body_documents,
        ))

    @property
    def has_body(self) -> bool:
        """Whether the call carries at least one body document."""
        return bool(self.body_documents)

    @property
    def body(self) -> str | None:
        """Wire payload: body documents separated by newlines.

        Returns:
            Joined documents, or `None` without a body.
        """
        if not self.body_documents:
            return None

        return BODY_SEPARATOR.join(self.body_documents)
