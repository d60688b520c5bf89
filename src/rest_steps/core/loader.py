"""Composition of step sources into document trees.

Steps are composed, not loaded: the composer keeps every mapping entry,
including repeated keys, along with source positions used in error
messages. JSON documents are composed by the same YAML composer.
"""

from typing import TYPE_CHECKING

from yaml import SafeLoader
from yaml.error import MarkedYAMLError, YAMLError

from rest_steps.errors import MalformedStepError
from rest_steps.nodes import is_null, is_sequence

if TYPE_CHECKING:
    from io import TextIOBase

if TYPE_CHECKING:
    from rest_steps.errors import ErrorContext
    from rest_steps.nodes import Node


def _make_loader(content: 'TextIOBase | str', filename: str | None) -> SafeLoader:
    """Create a loader bound to the content.

    Args:
        content: YAML content as a string or file-like object.
        filename: Optional source name shown in node marks.

    Returns:
        A loader instance.
    """
    loader = SafeLoader(content)
    if filename:
        loader.name = filename

    return loader


def _make_context(filename: str | None) -> 'ErrorContext | None':
    if not filename:
        return None
    return {'filename': filename}


def compose_step(content: 'TextIOBase | str', *,
                 filename: str | None = None) -> 'Node':
    """Compose a single step document.

    Args:
        content: YAML or JSON content with exactly one document.
        filename: Optional source name for error messages.

    Returns:
        Root node of the document.

    Raises:
        MalformedStepError: If the content is not valid YAML, is empty
            or holds more than one document.
    """
    loader = _make_loader(content, filename)
    try:
        node = loader.get_single_node()

    except MarkedYAMLError as base:
        raise MalformedStepError.from_yaml_error(base, _make_context(filename)) from base

    except YAMLError as base:
        raise MalformedStepError('Invalid YAML', context=_make_context(filename)) from base

    finally:
        loader.dispose()

    if node is None:
        raise MalformedStepError('Empty step document', context=_make_context(filename))

    return node


def compose_steps(content: 'TextIOBase | str', *,
                  filename: str | None = None) -> list['Node']:
    """Compose a stream of step documents.

    Each document holds either one step or a sequence of steps; both
    forms may be mixed in one stream. Empty documents are skipped.

    Args:
        content: YAML or JSON content.
        filename: Optional source name for error messages.

    Returns:
        Step nodes in source order.

    Raises:
        MalformedStepError: If the content is not valid YAML.
    """
    loader = _make_loader(content, filename)
    steps: list[Node] = []

    try:
        while loader.check_node():
            node = loader.get_node()
            if is_sequence(node):
                steps.extend(node.value)
            elif not is_null(node):
                steps.append(node)

    except MarkedYAMLError as base:
        raise MalformedStepError.from_yaml_error(base, _make_context(filename)) from base

    except YAMLError as base:
        raise MalformedStepError('Invalid YAML', context=_make_context(filename)) from base

    finally:
        loader.dispose()

    return steps
