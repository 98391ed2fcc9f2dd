""" Cipher methods available to an EasyCrypto service. Every method is a
    stateless, named transform with an :func:`encrypt` and a :func:`decrypt`
    operation; the service picks one by name via a
    :class:`easycrypto.registry.Registry`.
"""

import abc
import enum
import string


class ResultCode(enum.IntEnum):
    """ Result codes carried in the *result* field of a response. Zero is
        success; anything else is a failure of some kind.
    """

    SUCCESS = 0
    NOT_SUPPORTED = 1
    ERROR = 2


# end of class ResultCode



class Result:
    """ The outcome of a single :func:`Method.encrypt` or
        :func:`Method.decrypt` call. On success the *data* is the transformed
        text; on failure it is a human-readable reason.
    """

    def __init__(self, code, data=''):
        self.code = ResultCode(code)
        self.data = data


    def __eq__(self, other):
        if not isinstance(other, Result):
            return NotImplemented
        return self.code == other.code and self.data == other.data


    def __repr__(self):
        return 'Result(%s, %r)' % (self.code.name, self.data)


    @property
    def ok(self):
        return self.code == ResultCode.SUCCESS


    @classmethod
    def success(cls, data):
        return cls(ResultCode.SUCCESS, data)


    @classmethod
    def failure(cls, reason):
        return cls(ResultCode.ERROR, reason)


# end of class Result



class Method(abc.ABC):
    """ Base class for a cipher method. Subclasses set the *name* class
        attribute, which is the key used in the registry and on the wire,
        and implement :func:`encrypt` and :func:`decrypt`.

        Implementations must not raise for any text input, including the
        empty string; a transform that cannot handle its input returns
        :func:`Result.failure` instead.
    """

    name = None

    @abc.abstractmethod
    def encrypt(self, text):
        """ Return a :class:`Result` holding the encrypted *text*.
        """

    @abc.abstractmethod
    def decrypt(self, text):
        """ Return a :class:`Result` holding the decrypted *text*.
        """

    def __repr__(self):
        return '<%s %s>' % (self.__class__.__name__, self.name)


# end of class Method



class Shift(Method):
    """ Caesar shift over the ASCII alphabet. Lowercase letters rotate within
        ``a-z``, uppercase letters within ``A-Z``, both by *offset* positions
        modulo the fixed alphabet size of 26. Everything else, including
        digits, punctuation, whitespace and non-ASCII letters, is copied
        through unchanged.

        This is an illustrative transform, not a cryptographically meaningful
        one.
    """

    alphabet_size = len(string.ascii_lowercase)

    def __init__(self, offset, name=None):

        offset = int(offset) % self.alphabet_size

        if name is None:
            name = 'shift%d' % (offset)

        self.name = name
        self.offset = offset

        self.forward = self._table(offset)
        self.backward = self._table(-offset)


    def _table(self, offset):
        lower = string.ascii_lowercase
        upper = string.ascii_uppercase

        lower_shifted = lower[offset:] + lower[:offset]
        upper_shifted = upper[offset:] + upper[:offset]

        return str.maketrans(lower + upper, lower_shifted + upper_shifted)


    def encrypt(self, text):
        return Result.success(text.translate(self.forward))


    def decrypt(self, text):
        return Result.success(text.translate(self.backward))


# end of class Shift



class Rot13(Shift):
    """ The classic ROT13 substitution. An offset of 13 is exactly half the
        alphabet, so encryption and decryption are the same transform.
    """

    def __init__(self):
        Shift.__init__(self, 13, 'rot13')


# end of class Rot13



class Reverse(Method):
    """ Reverse the order of the characters in the text. Also self-inverse.
    """

    name = 'reverse'

    def encrypt(self, text):
        return Result.success(text[::-1])

    def decrypt(self, text):
        return Result.success(text[::-1])


# end of class Reverse


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
