""" Name-to-method lookup used by the service to pick a cipher method for
    each request.
"""

from . import method as method_module


class UnknownMethod(KeyError):
    """ No method is registered under the requested name.
    """


class Registry:
    """ Maps a cipher method name to a :class:`easycrypto.method.Method`
        instance. Names are case-sensitive. Registering a second method
        under an existing name replaces the first one; the name keeps its
        original position in :func:`names`. Entries are never removed.

        A registry is populated once during setup and only read afterwards,
        so there is no locking.
    """

    def __init__(self, methods=()):
        self._methods = dict()

        for method in methods:
            self.register(method)


    def __contains__(self, name):
        return name in self._methods


    def __iter__(self):
        return iter(self._methods.values())


    def __len__(self):
        return len(self._methods)


    def register(self, method):
        """ Add *method* under its own name, replacing any prior entry.
            The method is returned to allow chaining.
        """

        name = method.name

        if not isinstance(name, str) or name == '':
            raise ValueError('a cipher method must have a non-empty name')

        self._methods[name] = method
        return method


    def resolve(self, name):
        """ Return the method registered under *name*. :class:`UnknownMethod`
            is raised if there is no such method.
        """

        try:
            return self._methods[name]
        except (KeyError, TypeError):
            raise UnknownMethod(name) from None


    def names(self):
        """ Return the registered names in insertion order.
        """

        return list(self._methods)


# end of class Registry



def default():
    """ Return a new :class:`Registry` holding the built-in methods.
    """

    registry = Registry()
    registry.register(method_module.Rot13())
    registry.register(method_module.Reverse())
    return registry


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
