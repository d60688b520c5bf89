"""Tests for parse result models."""

import pydantic
import pytest

from rest_steps import Action, ParseContext


def test_action_defaults() -> None:
    """Build an action without parameters or body."""
    action = Action(api_name='cluster.health')

    assert action.error_expectation is None
    assert action.parameters == {}
    assert action.body_documents == ()
    assert not action.has_body
    assert action.body is None


def test_action_body() -> None:
    """Join body documents with newlines."""
    action = Action(
        api_name='bulk',
        body_documents=('{"index":{}}', '{"f":1}', 'raw'),
    )

    assert action.has_body
    assert action.body == '{"index":{}}\n{"f":1}\nraw'
    assert len(action.body.split('\n')) == len(action.body_documents)


def test_action_is_immutable() -> None:
    """Forbid changing a parsed action."""
    action = Action(api_name='get')

    with pytest.raises(pydantic.ValidationError):
        action.api_name = 'search'  # type: ignore[misc]


@pytest.mark.parametrize('data', (
    pytest.param({}, id='missing api'),
    pytest.param({'api_name': ''}, id='empty api'),
    pytest.param({'api_name': 'get', 'headers': {}}, id='extra field'),
    pytest.param({'api_name': 'get', 'parameters': {'id': 1}}, id='non-string parameter'),
))
def test_action_validation(data: dict) -> None:
    """Reject invalid action data."""
    with pytest.raises(pydantic.ValidationError):
        Action.model_validate(data)


def test_context_error_context() -> None:
    """Expose only known context fields for error formatting."""
    context = ParseContext(suite='suite', version='0.90.7')

    assert context.error_context() == {'suite': 'suite', 'version': '0.90.7'}


def test_context_rejects_negative_step() -> None:
    """Keep step positions zero-based."""
    with pytest.raises(pydantic.ValidationError):
        ParseContext(step_num=-1)


def test_action_parameters_are_read_only() -> None:
    """Forbid writing into parsed parameters."""
    source = {'index': 'a'}
    action = Action(api_name='get', parameters=source)

    with pytest.raises(TypeError):
        action.parameters['body'] = 'x'  # type: ignore[index]

    with pytest.raises(TypeError):
        Action(api_name='get').parameters['id'] = '1'  # type: ignore[index]

    source['body'] = 'x'
    assert action.parameters == {'index': 'a'}


def test_action_is_hashable() -> None:
    """Hash equal actions equally."""
    first = Action(api_name='get', parameters={'index': 'a'}, body_documents=('{}',))
    second = Action(api_name='get', parameters={'index': 'a'}, body_documents=('{}',))

    assert first == second
    assert hash(first) == hash(second)
    assert len({first, second}) == 1


def test_action_dump() -> None:
    """Dump parameters as a plain dictionary."""
    action = Action(api_name='get', parameters={'index': 'a'})

    assert action.model_dump() == {
        'api_name': 'get',
        'error_expectation': None,
        'parameters': {'index': 'a'},
        'body_documents': (),
    }


def test_action_hash_ignores_parameter_order() -> None:
    """Hash actions equal by parameters regardless of their order."""
    first = Action(api_name='get', parameters={'index': 'a', 'id': '1'})
    second = Action(api_name='get', parameters={'id': '1', 'index': 'a'})

    assert first == second
    assert hash(first) == hash(second)
