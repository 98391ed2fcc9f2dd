import easycrypto
import pytest

from easycrypto.method import Method, Result
from easycrypto.registry import Registry, UnknownMethod


class Upper(Method):
    name = 'upper'

    def __init__(self, tag=None):
        self.tag = tag

    def encrypt(self, text):
        return Result.success(text.upper())

    def decrypt(self, text):
        return Result.success(text.lower())


def test_register_and_resolve():

    registry = Registry()
    assert len(registry) == 0

    rot13 = easycrypto.method.Rot13()
    returned = registry.register(rot13)
    assert returned is rot13

    assert 'rot13' in registry
    assert registry.resolve('rot13') is rot13
    assert len(registry) == 1


def test_unknown_method():

    registry = easycrypto.registry.default()

    with pytest.raises(UnknownMethod):
        registry.resolve('unknown-cipher')

    # UnknownMethod is a KeyError, so dictionary-style handling works too.
    with pytest.raises(KeyError):
        registry.resolve('unknown-cipher')

    with pytest.raises(UnknownMethod):
        registry.resolve(None)


def test_names_are_case_sensitive():

    registry = easycrypto.registry.default()
    assert 'rot13' in registry
    assert 'ROT13' not in registry

    with pytest.raises(UnknownMethod):
        registry.resolve('ROT13')


def test_last_registration_wins():

    first = Upper('first')
    second = Upper('second')

    registry = Registry()
    registry.register(first)
    registry.register(easycrypto.method.Reverse())
    registry.register(second)

    assert registry.resolve('upper') is second
    assert len(registry) == 2

    # The replaced name keeps its original place in line.
    assert registry.names() == ['upper', 'reverse']


def test_names_in_insertion_order():

    registry = Registry((easycrypto.method.Reverse(), Upper(), easycrypto.method.Rot13()))
    assert registry.names() == ['reverse', 'upper', 'rot13']


def test_default():

    registry = easycrypto.registry.default()
    assert registry.names() == ['rot13', 'reverse']

    # Each call builds a fresh registry.
    registry.register(Upper())
    assert 'upper' not in easycrypto.registry.default()


def test_nameless_method():

    class Nameless(Upper):
        name = ''

    with pytest.raises(ValueError):
        Registry().register(Nameless())


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
