"""Document-tree primitives.

Steps are consumed as composed PyYAML node graphs rather than as
constructed Python values. Mapping nodes keep their entries as an
ordered list of key and value node pairs, so keys repeated at the same
level (such as several `body` entries) are all retained.

A node is one of three variants:

- `ScalarNode` holding the source text and a resolved tag;
- `SequenceNode` holding a list of nodes;
- `MappingNode` holding a list of `(key, value)` node pairs.
"""

from io import StringIO
from typing import TYPE_CHECKING

from yaml import SafeDumper
from yaml.nodes import MappingNode, ScalarNode, SequenceNode

from rest_steps.errors import MalformedStepError

if TYPE_CHECKING:
    from collections.abc import Iterator

if TYPE_CHECKING:
    from rest_steps.errors import ErrorContext
    from rest_steps.values import RuntimeValue

#: Any document-tree node.
type Node = ScalarNode | SequenceNode | MappingNode

NULL_TAG = 'tag:yaml.org,2002:null'
STR_TAG = 'tag:yaml.org,2002:str'
TIMESTAMP_TAG = 'tag:yaml.org,2002:timestamp'


def is_scalar(node: Node) -> bool:
    """Check whether a node is a scalar."""
    return isinstance(node, ScalarNode)


def is_sequence(node: Node) -> bool:
    """Check whether a node is a sequence."""
    return isinstance(node, SequenceNode)


def is_mapping(node: Node) -> bool:
    """Check whether a node is a mapping."""
    return isinstance(node, MappingNode)


def is_null(node: Node) -> bool:
    """Check whether a node is a null scalar."""
    return is_scalar(node) and node.tag == NULL_TAG


def is_string(node: Node) -> bool:
    """Check whether a node is a string scalar.

    Quoted scalars and plain scalars that do not resolve to another
    type (number, boolean, null, timestamp) are strings.
    """
    return is_scalar(node) and node.tag == STR_TAG


def is_timestamp(node: Node) -> bool:
    """Check whether a node is an unquoted date or datetime scalar."""
    return is_scalar(node) and node.tag == TIMESTAMP_TAG


def describe(node: Node) -> str:
    """Return a human-readable node kind."""
    if is_null(node):
        return 'null'
    if is_scalar(node):
        return 'scalar'
    if is_sequence(node):
        return 'sequence'
    if is_mapping(node):
        return 'mapping'
    return type(node).__name__


def iter_pairs(node: MappingNode,
               context: 'ErrorContext | None' = None) -> 'Iterator[tuple[str, Node]]':
    """Iterate over mapping entries in source order.

    Repeated keys are yielded as many times as they occur.

    Args:
        node: Mapping node to traverse.
        context: Optional error context.

    Yields:
        Pairs of key text and value node.

    Raises:
        MalformedStepError: If a key is not a scalar.
    """
    for key, value in node.value:
        if not is_scalar(key):
            raise MalformedStepError.from_yaml_node(
                f'Mapping key must be a scalar, got {describe(key)}',
                key,
                context,
            )
        yield key.value, value


def represent(value: 'RuntimeValue') -> Node:
    """Represent a plain Python value as a node tree.

    Args:
        value: Value built from mappings, sequences and scalars.

    Returns:
        Root node of the represented tree.

    Raises:
        MalformedStepError: If the value can not be represented.
    """
    dumper = SafeDumper(StringIO(), sort_keys=False)
    try:
        return dumper.represent_data(value)

    except Exception as base:
        raise MalformedStepError(f'Can not represent {type(value).__name__!r} as a document') from base

    finally:
        dumper.dispose()
