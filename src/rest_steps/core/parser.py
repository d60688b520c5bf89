"""Action step parser.

This module turns the document tree of a single `do` step into an
immutable `Action`. A step is a mapping with exactly one API call key
and an optional error expectation key:

    catch: missing
    indices.get_warmer:
        index: test_index
        name: test_warmer

Entries under the API call are query parameters, except for `body`
entries which hold request body documents. A body may be written as
a string taken verbatim, as a single structured document, as several
repeated `body` keys, or as a sequence of documents. All forms are
normalized into an ordered list of body documents.
"""

from typing import TYPE_CHECKING
from warnings import warn

from pydantic import ValidationError
from yaml.nodes import Node as BaseNode

from rest_steps.context import ParseContext
from rest_steps.errors import MalformedStepError, StepWarning
from rest_steps.nodes import (
    describe,
    is_mapping,
    is_null,
    is_scalar,
    is_sequence,
    is_string,
    is_timestamp,
    iter_pairs,
    represent,
)
from rest_steps.schema import Action
from rest_steps.settings import ParserSettings
from rest_steps.values import join, stringify

from .loader import compose_step, compose_steps
from .renderer import render

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping
    from io import TextIOBase

if TYPE_CHECKING:
    from yaml.nodes import MappingNode

if TYPE_CHECKING:
    from rest_steps.errors import ErrorContext
    from rest_steps.nodes import Node
    from rest_steps.values import RuntimeValue

#: Frames between `warn` and the caller of a public parse method:
#: emit_step_issue, parse_call, _parse_step and the entry point itself.
WARNING_STACKLEVEL = 5

#: Parsed executable steps.
type Actions = tuple[Action, ...]


class ActionStepParser:
    """Parser of action steps into `Action` values.

    The parser keeps no state between calls besides its immutable
    settings, so one instance may be shared by concurrent callers
    working on distinct input trees. Input trees are never modified.
    """

    def __init__(self, settings: ParserSettings | None = None) -> None:
        """Initialize the parser.

        Args:
            settings: Parser settings. When omitted, settings are
                resolved from defaults and `REST_STEPS_*` variables.
        """
        if settings is None:
            settings = ParserSettings()

        self.settings = settings

    def parse(self, step: 'Node | Mapping[str, RuntimeValue]',
              context: 'ParseContext | None' = None) -> Action:
        """Parse a single action step.

        Args:
            step: Document tree of the step. A plain mapping is
                represented as a document tree first.
            context: Optional diagnostic context used in error messages.

        Returns:
            The parsed action.

        Raises:
            MalformedStepError: If the step violates a structural rule.
        """
        return self._parse_step(step, context)

    def _parse_step(self, step: 'Node | Mapping[str, RuntimeValue]',
                    context: 'ParseContext | None' = None) -> Action:
        """Parse a single step on behalf of a public entry point."""
        error_context = context.error_context() if context else None

        node = step if isinstance(step, BaseNode) else represent(step)
        if not is_mapping(node):
            raise MalformedStepError.from_yaml_node(
                f'Action step must be a mapping, got {describe(node)}',
                node,
                error_context,
            )

        error_expectation, calls = self.split_calls(node, error_context)
        if not calls:
            raise MalformedStepError.from_yaml_node(
                'No action call found',
                node,
                error_context,
            )

        if len(calls) > 1:
            names = ', '.join(repr(name) for name, _ in calls)
            raise MalformedStepError.from_yaml_node(
                f'Ambiguous action call: found {names}',
                node,
                error_context,
            )

        api_name, call = calls[0]
        parameters, bodies = self.parse_call(call, error_context)

        data = {
            'api_name': api_name,
            'error_expectation': error_expectation,
            'parameters': parameters,
            'body_documents': tuple(bodies),
        }

        try:
            return Action.model_validate(data)

        except ValidationError as base:
            raise MalformedStepError.from_pydantic_error(
                base,
                data=data,
                context=error_context,
            ) from base

    def parse_text(self, content: 'TextIOBase | str',
                   context: 'ParseContext | None' = None) -> Action:
        """Compose and parse a single step from YAML or JSON text.

        Args:
            content: Step source with exactly one document.
            context: Optional diagnostic context used in error messages.

        Returns:
            The parsed action.

        Raises:
            MalformedStepError: If the source is invalid or the step
                violates a structural rule.
        """
        filename = context.filename if context else None

        return self._parse_step(compose_step(content, filename=filename), context)

    def parse_steps(self, content: 'TextIOBase | str',
                    context: 'ParseContext | None' = None) -> Actions:
        """Compose and parse a stream of steps.

        Each parsed step is reported with its position in the stream.

        Args:
            content: Steps source, see `compose_steps`.
            context: Optional diagnostic context used in error messages.

        Returns:
            Parsed actions in source order.

        Raises:
            MalformedStepError: If the source is invalid or any step
                violates a structural rule.
        """
        if context is None:
            context = ParseContext()

        nodes = compose_steps(content, filename=context.filename)

        actions = []
        for position, node in enumerate(nodes):
            actions.append(self._parse_step(
                node,
                context.model_copy(update={'step_num': position}),
            ))

        return tuple(actions)

    def split_calls(self, node: 'MappingNode',
                    context: 'ErrorContext | None' = None) -> tuple[str | None, list[tuple[str, 'Node']]]:
        """Separate the error expectation from API call entries.

        Args:
            node: Step mapping node.
            context: Optional error context.

        Returns:
            A tuple of the error expectation (or `None`) and the list
            of remaining top-level entries.

        Raises:
            MalformedStepError: If the error expectation is repeated
                or is not a scalar.
        """
        error_expectation: str | None = None
        calls: list[tuple[str, Node]] = []

        for key, value in iter_pairs(node, context):
            if key != self.settings.catch_key:
                calls.append((key, value))
                continue

            if error_expectation is not None:
                raise MalformedStepError.from_yaml_node(
                    f'Repeated {key!r} in action step',
                    value,
                    context,
                )

            if not is_scalar(value) or is_null(value):
                raise MalformedStepError.from_yaml_node(
                    f'Value of {key!r} must be a scalar, got {describe(value)}',
                    value,
                    context,
                )

            error_expectation = stringify(value)

        return error_expectation, calls

    def parse_call(self, node: 'Node',
                   context: 'ErrorContext | None' = None) -> tuple[dict[str, str], list[str]]:
        """Parse the mapping under the API call key.

        Entries are processed in source order and repeated keys are
        processed independently.

        Args:
            node: API call node.
            context: Optional error context.

        Returns:
            A tuple of parameters and body documents.

        Raises:
            MalformedStepError: If the API call is not a mapping or any
                entry has an unsupported structure.
        """
        parameters: dict[str, str] = {}
        bodies: list[str] = []

        if is_null(node):
            return parameters, bodies

        if not is_mapping(node):
            raise MalformedStepError.from_yaml_node(
                f'Action call must be a mapping, got {describe(node)}',
                node,
                context,
            )

        for key, value in iter_pairs(node, context):
            if key == self.settings.body_key:
                bodies.extend(self.parse_body(value, context))
                continue

            if key in parameters and (error := self.emit_step_issue(
                f'Parameter {key!r} is repeated, the last value is used',
                value,
                context,
            )):
                raise error

            parameters[key] = self.parse_parameter(key, value, context)

        return parameters, bodies

    def parse_parameter(self, key: str, node: 'Node',
                        context: 'ErrorContext | None' = None) -> str:
        """Convert a parameter value to its wire text.

        Args:
            key: Parameter name.
            node: Parameter value node.
            context: Optional error context.

        Returns:
            Scalar text, or scalar texts joined by the value separator.

        Raises:
            MalformedStepError: If the value is a mapping or a sequence
                holding non-scalar items.
        """
        if is_scalar(node):
            return stringify(node)

        if is_sequence(node):
            for item in node.value:
                if not is_scalar(item):
                    raise MalformedStepError.from_yaml_node(
                        f'Parameter {key!r} items must be scalars, got {describe(item)}',
                        item,
                        context,
                    )
            return join(node.value, self.settings.value_separator)

        raise MalformedStepError.from_yaml_node(
            f'Parameter {key!r} must be a scalar or a sequence, got {describe(node)}',
            node,
            context,
        )

    def parse_body(self, node: 'Node',
                   context: 'ErrorContext | None' = None) -> 'Iterator[str]':
        """Normalize a body entry into body documents.

        A sequence is a batch of documents and yields one document per
        item. Any other node yields a single document.

        Args:
            node: Body value node.
            context: Optional error context.

        Yields:
            Body documents in source order.
        """
        if is_sequence(node):
            if not node.value:
                raise MalformedStepError.from_yaml_node(
                    'Body batch must contain at least one document',
                    node,
                    context,
                )
            for item in node.value:
                yield self.render_document(item, context)
            return

        yield self.render_document(node, context)

    def render_document(self, node: 'Node',
                        context: 'ErrorContext | None' = None) -> str:
        """Render one body document.

        String scalars are already serialized documents and are returned
        verbatim, as are timestamps which have no JSON type of their own.
        Everything else is rendered to canonical JSON.

        Args:
            node: Document node.
            context: Optional error context.

        Returns:
            Document text.
        """
        if is_string(node) or is_timestamp(node):
            return str(node.value)

        return render(node, context, ensure_ascii=self.settings.ensure_ascii)

    def emit_step_issue(self, message: str, node: 'Node',
                        context: 'ErrorContext | None' = None) -> Exception | None:
        """Emit a step warning or return the exception.

        Args:
            message: Issue description.
            node: Node the issue relates to.
            context: Optional error context.

        Returns:
            MalformedStepError on strict mode, otherwise `None`
                with producing a StepWarning.
        """
        if self.settings.strict:
            return MalformedStepError.from_yaml_node(message, node, context)

        warn(message, category=StepWarning, stacklevel=WARNING_STACKLEVEL)

        return None
