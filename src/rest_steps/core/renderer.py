"""Canonical text rendering of body documents.

Structured bodies are rendered to compact JSON keeping the key order of
the source document. Two renderings of equal structures compare equal
once parsed back with `json.loads`, which is how callers are expected
to compare bodies.
"""

from copy import deepcopy
from json import dumps
from typing import TYPE_CHECKING

from yaml.constructor import SafeConstructor
from yaml.error import MarkedYAMLError

from rest_steps.errors import MalformedStepError

if TYPE_CHECKING:
    from rest_steps.errors import ErrorContext
    from rest_steps.nodes import Node
    from rest_steps.values import RuntimeValue

#: Compact separators without any whitespace.
SEPARATORS = (',', ':')


class DocumentConstructor(SafeConstructor):
    """Safe constructor producing JSON-compatible values only.

    Timestamps and binary scalars are kept as their source text instead
    of being converted to `datetime` and `bytes`.
    """


DocumentConstructor.add_constructor(
    'tag:yaml.org,2002:timestamp',
    SafeConstructor.construct_yaml_str,
)
DocumentConstructor.add_constructor(
    'tag:yaml.org,2002:binary',
    SafeConstructor.construct_yaml_str,
)


def construct(node: 'Node', context: 'ErrorContext | None' = None) -> 'RuntimeValue':
    """Construct a plain value from a node tree.

    The node is copied first: resolving merge keys rewrites mapping
    nodes in place and the input tree must stay untouched.

    Args:
        node: Root node.
        context: Optional error context.

    Returns:
        Constructed value.

    Raises:
        MalformedStepError: If the node can not be constructed.
    """
    constructor = DocumentConstructor()
    try:
        return constructor.construct_document(deepcopy(node))

    except MarkedYAMLError as base:
        raise MalformedStepError.from_yaml_node(
            f'Invalid body document: {base.problem}',
            node,
            context,
            base,
        ) from base


def render(node: 'Node', context: 'ErrorContext | None' = None, *,
           ensure_ascii: bool = False) -> str:
    """Render a node tree to canonical compact JSON text.

    Args:
        node: Root node of a body document.
        context: Optional error context.
        ensure_ascii: Escape non-ASCII characters.

    Returns:
        JSON text of the document.

    Raises:
        MalformedStepError: If the document is not representable as JSON.
    """
    value = construct(node, context)
    try:
        return dumps(
            value,
            separators=SEPARATORS,
            ensure_ascii=ensure_ascii,
            allow_nan=False,
        )

    except (TypeError, ValueError) as base:
        raise MalformedStepError.from_yaml_node(
            f'Body document is not representable as JSON: {base}',
            node,
            context,
            base,
        ) from base
