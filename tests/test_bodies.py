"""Tests for body normalization and canonical rendering."""

from json import loads
from typing import TYPE_CHECKING

import pytest

from rest_steps import ActionStepParser, MalformedStepError, ParserSettings
from rest_steps.core import render

if TYPE_CHECKING:
    from collections.abc import Callable

if TYPE_CHECKING:
    from rest_steps.nodes import Node


@pytest.mark.parametrize(('body', 'expected'), (
    pytest.param('42', ('42',), id='number'),
    pytest.param('true', ('true',), id='boolean'),
    pytest.param('~', ('null',), id='null'),
    pytest.param('"42"', ('42',), id='quoted number'),
    pytest.param("'{\"a\": 1}'", ('{"a": 1}',), id='quoted json'),
    pytest.param('{}', ('{}',), id='empty document'),
    pytest.param('[1, two, {a: b}, [x, 2]]', ('1', 'two', '{"a":"b"}', '["x",2]'), id='mixed batch'),
    pytest.param('{when: 2020-01-01}', ('{"when":"2020-01-01"}',), id='timestamp'),
    pytest.param('2020-01-01', ('2020-01-01',), id='bare date'),
    pytest.param('2020-01-01 10:30:00', ('2020-01-01 10:30:00',), id='bare datetime'),
    pytest.param('[2020-01-01, {a: 1}]', ('2020-01-01', '{"a":1}'), id='date in batch'),
    pytest.param('yes', ('true',), id='boolean word'),
    pytest.param('{a: {b: [1, 2.5, null, false]}}', ('{"a":{"b":[1,2.5,null,false]}}',), id='nested'),
))
def test_body_forms(body: str, expected: tuple[str, ...], parser: 'ActionStepParser',
                    compose: 'Callable[[str], Node]') -> None:
    """Normalize every body form into documents."""
    action = parser.parse(compose(f'index:\n  body: {body}\n'))

    assert action.body_documents == expected


def test_key_order_is_kept(compose: 'Callable[[str], Node]') -> None:
    """Render mapping keys in source order."""
    node = compose('{z: 1, a: 2, m: {y: 1, b: 2}}')

    assert render(node) == '{"z":1,"a":2,"m":{"y":1,"b":2}}'


def test_rendering_is_comparison_stable(compose: 'Callable[[str], Node]') -> None:
    """Compare equal structures written differently after re-parsing."""
    block = render(compose(
        'query:\n'
        '  match_all: {}\n'
        'size: 100\n'
    ))
    flow = render(compose('{ "size": 100, "query": { "match_all": {} } }'))

    assert block != flow
    assert loads(block) == loads(flow)


def test_verbatim_string_is_byte_identical(parser: 'ActionStepParser',
                                           compose: 'Callable[[str], Node]') -> None:
    """Never re-encode string bodies."""
    body = '{"b":  2,\t"a": [1 ,2]}  '
    action = parser.parse(compose(
        'index:\n'
        '  body: |-\n'
        f'    {body}\n'
    ))

    assert action.body_documents == (body,)


def test_ensure_ascii(compose: 'Callable[[str], Node]') -> None:
    """Escape non-ASCII characters when configured."""
    node = compose('index:\n  body: {name: "тест"}\n')

    default = ActionStepParser(ParserSettings(ensure_ascii=False)).parse(node)
    escaped = ActionStepParser(ParserSettings(ensure_ascii=True)).parse(node)

    assert default.body_documents == ('{"name":"тест"}',)
    assert escaped.body_documents == ('{"name":"\\u0442\\u0435\\u0441\\u0442"}',)
    assert loads(default.body) == loads(escaped.body)


def test_aliases(parser: 'ActionStepParser', compose: 'Callable[[str], Node]') -> None:
    """Expand aliases inside bodies."""
    action = parser.parse(compose(
        'bulk:\n'
        '  body:\n'
        '    - &header {index: {_index: test}}\n'
        '    - {f: 1}\n'
        '    - *header\n'
    ))

    assert action.body_documents == (
        '{"index":{"_index":"test"}}',
        '{"f":1}',
        '{"index":{"_index":"test"}}',
    )


@pytest.mark.parametrize(('body', 'message'), (
    pytest.param('{value: .inf}', r'^Body document is not representable as JSON', id='infinity'),
    pytest.param('!!set {a, b}', r'^Body document is not representable as JSON', id='set'),
    pytest.param('{? [a, b] : c}', r'^Invalid body document', id='unhashable key'),
    pytest.param('!custom {a: 1}', r'^Invalid body document', id='unknown tag'),
    pytest.param('&loop [*loop]', r'^Body document is not representable as JSON', id='recursive'),
    pytest.param('[]', r'^Body batch must contain at least one document', id='empty batch'),
))
def test_unrepresentable_body(body: str, message: str, parser: 'ActionStepParser',
                              compose: 'Callable[[str], Node]') -> None:
    """Reject bodies that can not be rendered as JSON."""
    with pytest.raises(MalformedStepError, match=message):
        parser.parse(compose(f'index:\n  body: {body}\n'))
