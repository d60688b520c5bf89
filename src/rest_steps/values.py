"""Scalar value rules for request parameters.

Parameters are transmitted as query string values, so they keep the
text the test author wrote instead of a Python rendering of the
resolved value: `true` stays `true` and `1.0` stays `1.0`.
"""

from typing import TYPE_CHECKING, Any

from yaml.nodes import ScalarNode  # noqa: TC002

from rest_steps.nodes import is_null

if TYPE_CHECKING:
    from collections.abc import Iterable

#: A value in runtime represents any Python object received from
#: calling code prior to representation as a document node.
type RuntimeValue = Any

#: Text used for null scalars.
NULL_TEXT = 'null'


def stringify(node: ScalarNode) -> str:
    """Return the wire text of a scalar node.

    Args:
        node: Scalar node.

    Returns:
        Source text of the scalar, or `null` for null scalars.
    """
    if is_null(node):
        return NULL_TEXT

    return str(node.value)


def join(nodes: 'Iterable[ScalarNode]', separator: str = ',') -> str:
    """Join scalar nodes into a multi-valued parameter.

    Args:
        nodes: Scalar nodes in source order.
        separator: Separator placed between values.

    Returns:
        Joined wire text.
    """
    return separator.join(stringify(node) for node in nodes)
