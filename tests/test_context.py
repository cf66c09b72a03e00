import pytest

from formtree.components import Config
from formtree.components import Context
from formtree.core.context import create_context


def test_set_get():
    context = Context('test')
    context.set('a', 1)
    assert context.get('a') == 1
    assert context.has('a')
    assert not context.has('b')


def test_set_twice():
    context = Context('test')
    context.set('a', 1)
    with pytest.raises(Exception):
        context.set('a', 2)


def test_unknown():
    context = Context('test')
    with pytest.raises(Exception):
        context.get('a')


def test_with_block():
    context = Context('test')
    context.set('a', 1)
    with context:
        context.set('a', 2)
        context.set('b', 3)
        assert context.get('a') == 2
    assert context.get('a') == 1
    assert not context.has('b')


def test_bind():
    calls = []

    def factory(value):
        calls.append(value)
        return value * 2

    context = Context('test')
    context.bind('a', factory, 21)
    assert calls == []
    assert context.get('a') == 42
    assert context.get('a') == 42
    assert calls == [21]


def test_fork():
    base = Context('base')
    base.set('a', 1)
    forked = base.fork('forked')
    forked.set('a', 2)
    assert base.get('a') == 1
    assert forked.get('a') == 2
    assert repr(forked) == '<formtree.components.Context(base:0 < forked:0)>'


def test_create_context(rc):
    context = create_context('test', rc)
    assert context.get('rc') is rc
    assert isinstance(context.get('config'), Config)
