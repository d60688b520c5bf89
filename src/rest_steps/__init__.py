"""Parser for declarative action steps of YAML REST test suites.

The `rest_steps` package turns a single `do` step of a YAML (or JSON)
REST test suite into an immutable `Action`: the API name, its query
parameters, an optional expected error and an ordered list of body
documents.

Key features:
- traversal of composed document trees keeping repeated keys;
- normalization of string, structured, repeated and batched bodies;
- canonical compact JSON rendering of structured bodies;
- located, human-readable errors for malformed steps.
"""

from rest_steps.context import ParseContext
from rest_steps.core import ActionStepParser
from rest_steps.errors import MalformedStepError, StepWarning
from rest_steps.schema import Action
from rest_steps.settings import ParserSettings

__all__ = (
    'Action',
    'ActionStepParser',
    'MalformedStepError',
    'ParseContext',
    'ParserSettings',
    'StepWarning',
)
