"""Core step parsing runtime.

It provides:
- composition of YAML or JSON sources into document trees;
- canonical rendering of structured body documents;
- the action step parser producing validated `Action` models.

The primary public entry point is `ActionStepParser`.
"""

from .loader import compose_step, compose_steps
from .parser import ActionStepParser
from .renderer import render

__all__ = (
    'ActionStepParser',
    'compose_step',
    'compose_steps',
    'render',
)
