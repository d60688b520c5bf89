"""Parse result schema.

Defines the immutable Pydantic model describing a single API call
parsed from an action step. The model is consumed by external execution
engines and tooling.
"""

from .actions import Action

__all__ = (
    'Action',
)
