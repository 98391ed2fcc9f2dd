""" Value objects for the two EasyCrypto envelopes: the :class:`Request` a
    client sends, and the :class:`Response` a service returns.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from . import fields


@dataclass(frozen=True)
class Request:
    """ A single operation request. The *operation* is one of
        :data:`fields.OPERATIONS`; the *method* names the cipher method and
        is required for encrypt and decrypt, and must be None for a
        capabilities request. The *data* is the text to transform.

        The *id* is assigned by the issuer when the request is sent, and is
        what ties the eventual :class:`Response` back to this request. It is
        legal to build a Request without an id; it is not legal to encode
        one.
    """

    operation: str
    method: Optional[str] = None
    data: str = ''
    id: Optional[int] = None

    def __post_init__(self):

        if self.operation not in fields.OPERATIONS:
            raise ValueError('invalid request operation: ' + repr(self.operation))

        if self.operation in fields.TRANSFORMS:
            if not isinstance(self.method, str) or self.method == '':
                raise ValueError(self.operation + ' requests must name a method')
        elif self.method is not None:
            raise ValueError(self.operation + ' requests do not take a method')

        if not isinstance(self.data, str):
            raise TypeError('request data must be text, not ' + type(self.data).__name__)

        _check_text(self.method)
        _check_text(self.data)

        if self.id is not None:
            _check_id(self.id)


    def with_id(self, id: int) -> Request:
        """ Return a copy of this request carrying the given *id*.
        """

        return Request(self.operation, self.method, self.data, id)


# end of class Request



@dataclass(frozen=True)
class Response:
    """ The service's answer to a :class:`Request`. The *id* and *operation*
        echo the request; *result* is zero on success and nonzero on
        failure (see :class:`easycrypto.method.ResultCode`); *data* holds the
        transformed text, or a diagnostic when the request failed.
    """

    id: int
    operation: str
    result: int
    data: str = ''

    def __post_init__(self):

        _check_id(self.id)

        if not isinstance(self.operation, str):
            raise TypeError('response operation must be a string')

        if isinstance(self.result, bool) or not isinstance(self.result, int):
            raise TypeError('response result must be an integer')

        if not isinstance(self.data, str):
            raise TypeError('response data must be text, not ' + type(self.data).__name__)

        _check_text(self.data)


    @property
    def success(self) -> bool:
        return self.result == 0


# end of class Response



def _check_id(id):

    if isinstance(id, bool) or not isinstance(id, int):
        raise TypeError('message id must be an integer, not ' + type(id).__name__)

    if id < 0:
        raise ValueError('message id must be non-negative: ' + str(id))


def _check_text(text):
    """ Lone surrogates cannot be put on the wire in any encoding.
    """

    if text is None:
        return

    try:
        text.encode('utf-8')
    except UnicodeEncodeError as e:
        raise ValueError('message text is not encodable: ' + e.reason) from None


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
