"""Core exception hierarchy.

This module defines the error and warning types used to report malformed
action steps in a structured way. Errors carry an optional context with
the originating file, suite and step, and render a YAML snippet of the
offending part of the document.
"""

from os import linesep
from typing import TYPE_CHECKING, Any, TypedDict

from yaml import dump, serialize
from yaml.error import MarkedYAMLError
from yaml.nodes import Node

if TYPE_CHECKING:
    from typing import Self

if TYPE_CHECKING:
    from pydantic import ValidationError

SNIPPET_ELLIPSIS = f' ...{linesep}'
SNIPPET_INDENT = 2

FORMAT_REPLACER = '<runtime object>'
FORMAT_FILENAME = '<unicode string>'
FORMAT_INDENT = 4

SCALARS = (str, bytes, int, float, bool)
MAPPINGS = (dict,)
SEQUENCES = (list, tuple)


class ErrorContext(TypedDict, total=False):
    """Container describing contextual information for error formatting.

    All fields are optional; the formatter adapts output based on
    provided values.
    """

    #: Name of the source file where the error occurred.
    filename: str | None
    #: Name of the test suite the step belongs to.
    suite: str | None
    #: Name of the API the suite is testing.
    api: str | None
    #: Format version hint of the suite.
    version: str | None

    #: Line number in the source file (zero-based).
    line_num: int | None
    #: Column number in the source file (zero-based).
    column_num: int | None

    #: Number of the step in the suite (zero-based).
    step_num: int | None

    #: Underlying exception that triggered formatting.
    error: Exception | None
    #: Document node or plain value associated with the error.
    element: Any


class ErrorFormatter:
    """Utility class for formatting step errors.

    This formatter is responsible for producing human-readable
    error messages with optional source location and YAML-based
    contextual snippets.
    """

    @classmethod
    def format(cls, message: str, context: ErrorContext | None = None) -> str:
        """Format an error message using contextual information.

        Args:
            message: Base human-readable error message.
            context: Optional error context with location and data.

        Returns:
            A fully formatted error message suitable for display.
        """
        if not context:
            return message

        message += linesep
        message += cls.get_location_string(context, indent=FORMAT_INDENT)
        message += cls.get_snippet_string(context, indent=FORMAT_INDENT * 2)

        return message

    @classmethod
    def get_location_string(cls, context: ErrorContext, *,
                            indent: str | int | None = None) -> str:
        """Format source and suite location information.

        Args:
            context: Error context containing location metadata.
            indent: Optional indentation (string or number of spaces).

        Returns:
            A formatted location string including filename, line,
            column, suite and step number when available.
        """
        indent = cls._ensure_indent(indent)

        filename = context.get('filename')
        if not filename:
            filename = FORMAT_FILENAME

        message = f'{indent}in "{filename}"'
        if (line_num := context.get('line_num')) is not None:
            line_num += 1
            message += f', line {line_num}'
            if (column_num := context.get('column_num')) is not None:
                column_num += 1
                message += f', column {column_num}'
        message += linesep

        if suite := context.get('suite'):
            message += f'{indent}in suite "{suite}"'
            if api := context.get('api'):
                message += f' of api "{api}"'
            if version := context.get('version'):
                message += f', version {version}'
            message += linesep

        if (step_num := context.get('step_num')) is not None:
            step_num += 1
            message += f'{indent}on step {step_num}{linesep}'

        return message

    @classmethod
    def get_snippet_string(cls, context: ErrorContext, *,
                           indent: str | int | None = None) -> str:
        """Generate a formatted snippet illustrating the error context.

        Source snippets are preferred when the document was composed
        from a string. Otherwise the element is serialized back to YAML.

        Args:
            context: Error context containing node or exception data.
            indent: Optional indentation (string or number of spaces).

        Returns:
            A formatted multi-line snippet string, or an empty string
            if no snippet data is available.
        """
        indent = cls._ensure_indent(indent)

        if (error := context.get('error')) and isinstance(error, MarkedYAMLError):
            if error.problem_mark and (snippet := error.problem_mark.get_snippet(indent=0)):
                return cls._make_indent(snippet, indent) + linesep
            return ''

        element = context.get('element')
        if isinstance(element, Node):
            if element.start_mark and (snippet := element.start_mark.get_snippet(indent=0)):
                return cls._make_indent(snippet, indent) + linesep
            return cls._make_snippet(serialize(element, indent=SNIPPET_INDENT), indent)

        if element is not None:
            return cls._make_snippet(cls._make_yaml(element), indent)

        return ''

    @classmethod
    def _make_snippet(cls, content: str, indent: str) -> str:
        """Build an indented snippet block.

        Args:
            content: YAML text of the element.
            indent: String indentation prefix.

        Returns:
            A formatted snippet string.
        """
        snippet = f'{indent}{SNIPPET_ELLIPSIS}'
        snippet += cls._make_indent(content, indent)
        snippet += linesep

        return snippet

    @classmethod
    def _filter_unsafe(cls, value: Any) -> Any:  # noqa: ANN401
        """Recursively sanitize values for safe YAML serialization.

        Non-scalar and non-container objects are replaced with
        a placeholder.

        Args:
            value: Arbitrary value to sanitize.

        Returns:
            A YAML-safe representation of the value.
        """
        if value is None or isinstance(value, SCALARS):
            return value

        if isinstance(value, MAPPINGS):
            return {
                key: cls._filter_unsafe(item)
                for key, item in value.items()
            }

        if isinstance(value, SEQUENCES):
            return [
                cls._filter_unsafe(item)
                for item in value
            ]

        return FORMAT_REPLACER

    @classmethod
    def _make_yaml(cls, value: Any) -> str:  # noqa: ANN401
        """Serialize a plain value to a YAML-formatted string.

        Args:
            value: Arbitrary value to serialize.

        Returns:
            A YAML-formatted string representation of the value.
        """
        return dump(
            cls._filter_unsafe(value),
            indent=SNIPPET_INDENT,
            sort_keys=False,
        )

    @staticmethod
    def _make_indent(value: str, indent: str) -> str:
        """Apply indentation to a multi-line string.

        Empty or whitespace-only lines are omitted.

        Args:
            value: Original multi-line string.
            indent: Indentation prefix.

        Returns:
            Indented string.
        """
        if not indent:
            return value

        return linesep.join(
            f'{indent}{line}'
            for line in value.splitlines()
            if line.strip()
        )

    @staticmethod
    def _ensure_indent(indent: str | int | None = None) -> str:
        """Normalize indentation input.

        Args:
            indent: Indentation as string or number of spaces.

        Returns:
            A string consisting of spaces or the provided string.
        """
        if isinstance(indent, int) and indent > 0:
            return ' ' * indent

        if isinstance(indent, str):
            return indent

        return ''


class StepWarning(UserWarning):
    """Warning emitted for non-fatal step issues.

    Used when a step is accepted but part of it is discarded, for
    example when a parameter key is repeated outside of strict mode.
    """


class StepsError(Exception, ErrorFormatter):
    """Base exception for all rest-steps errors.

    All custom exceptions raised by the library inherit from this
    class to allow unified error handling by callers.
    """

    def __init__(self, message: str, *,
                 context: ErrorContext | None = None) -> None:
        """Initialize an error.

        Args:
            message: Human-readable error description.
            context: Error context with location and element data.
        """
        self.message = message
        self.context = context

        super().__init__(message)

    def __str__(self) -> str:
        """String representation."""
        return self.format(self.message, self.context)


class MalformedStepError(StepsError):
    """Error raised when an action step violates a structural rule.

    This is the single error kind surfaced by the parser. It is terminal
    for the parse call: no partial result is produced.
    """

    @classmethod
    def from_yaml_node(cls, message: str, node: Node,
                       context: ErrorContext | None = None,
                       error: Exception | None = None) -> 'Self':
        """Create an error instance from a YAML node.

        Positional information of the node, when it was composed from
        a source document, is merged into the provided context.

        Args:
            message: Human-readable error message.
            node: YAML node associated with the error.
            context: Optional context with suite metadata.
            error: Optional underlying exception.

        Returns:
            An initialized error instance with location context.
        """
        error_context = ErrorContext(context or {})
        error_context['element'] = node
        error_context['error'] = error

        if node.start_mark is not None:
            if node.start_mark.name and not error_context.get('filename'):
                error_context['filename'] = node.start_mark.name
            error_context['line_num'] = node.start_mark.line
            error_context['column_num'] = node.start_mark.column

        return cls(message, context=error_context)

    @classmethod
    def from_yaml_error(cls, error: MarkedYAMLError,
                        context: ErrorContext | None = None) -> 'Self':
        """Create an error from a YAML composing failure.

        Args:
            error: Exception raised by the YAML composer.
            context: Optional context with suite metadata.

        Returns:
            An error representing the YAML failure.
        """
        error_context = ErrorContext(context or {})
        error_context['error'] = error

        if (mark := error.problem_mark) is not None:
            if mark.name and not error_context.get('filename'):
                error_context['filename'] = mark.name
            error_context['line_num'] = mark.line
            error_context['column_num'] = mark.column

        message = 'Invalid YAML'
        if error.problem:
            message += f'{linesep}{' ' * FORMAT_INDENT}{error.problem}'

        return cls(message, context=error_context)

    @classmethod
    def from_pydantic_error(cls, error: 'ValidationError', *,
                            data: Any = None,  # noqa: ANN401
                            context: ErrorContext | None = None) -> 'Self':
        """Create an error from a Pydantic validation failure.

        The first validation issue is used as the message detail.

        Args:
            error: ValidationError raised while building the action.
            data: Data the model was built from.
            context: Optional context with suite metadata.

        Returns:
            An error representing the validation failure.
        """
        error_context = ErrorContext(context or {})
        error_context['error'] = error
        error_context['element'] = data

        message = 'Invalid action'
        for item in error.errors(include_url=False, include_input=False):
            location = '.'.join(str(part) for part in item['loc'])
            message += f'{linesep}{' ' * FORMAT_INDENT}{location}: {item['msg']}'
            break

        return cls(message, context=error_context)
