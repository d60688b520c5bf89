"""Tests configurations and fixtures."""

from typing import TYPE_CHECKING

import pytest

from rest_steps import ActionStepParser, ParseContext, ParserSettings
from rest_steps.core import compose_step

if TYPE_CHECKING:
    from collections.abc import Callable

if TYPE_CHECKING:
    from rest_steps.nodes import Node


@pytest.fixture
def parser() -> ActionStepParser:
    """Provide a parser with default settings.

    Settings are passed explicitly so that `REST_STEPS_*` variables of
    the environment running the tests do not change the results.
    """
    return ActionStepParser(ParserSettings(
        catch_key='catch',
        body_key='body',
        value_separator=',',
        ensure_ascii=False,
        strict=False,
    ))


@pytest.fixture
def context() -> ParseContext:
    """Provide a context of a typical suite."""
    return ParseContext(api='api', suite='suite', version='0.90.7')


@pytest.fixture
def compose() -> 'Callable[[str], Node]':
    """Provide a factory composing YAML text into a step node."""
    def factory(content: str) -> 'Node':
        """Compose a single step document."""
        return compose_step(content)

    return factory
