""" Serialize :class:`Request` and :class:`Response` instances to and from
    datagram bytes.

    The wire representation is a flat JSON object using the field names in
    :mod:`fields`, converted to bytes with a fixed text encoding. Both ends
    must agree on the encoding; UTF-16 is the default because that is what
    deployed EasyCrypto clients and services use. A mismatch is detected as
    a :class:`MalformedMessage` at best, and corrupts non-ASCII payloads at
    worst.
"""

from __future__ import annotations

from typing import Optional, Union

from .. import json
from . import fields
from .message import Request, Response


default_encoding = 'utf-16'


class MalformedMessage(ValueError):
    """ The bytes received could not be interpreted as a valid envelope.
    """


def encode(message: Union[Request, Response], encoding: Optional[str] = None) -> bytes:
    """ Return the wire representation of *message*. A :class:`Request` must
        have an id assigned before it can be encoded.
    """

    if encoding is None:
        encoding = default_encoding

    if isinstance(message, Request):
        if message.id is None:
            raise ValueError('requests must have an id to be put on the wire')

        envelope = dict()
        envelope[fields.ID] = message.id
        envelope[fields.OPERATION] = message.operation

        if message.method is not None:
            envelope[fields.METHOD] = message.method

        if message.data != '':
            envelope[fields.DATA] = message.data

    elif isinstance(message, Response):
        envelope = dict()
        envelope[fields.ID] = message.id
        envelope[fields.OPERATION] = message.operation
        envelope[fields.RESULT] = int(message.result)
        envelope[fields.DATA] = message.data

    else:
        raise TypeError('cannot encode ' + type(message).__name__)

    # The JSON backends all produce UTF-8 bytes; re-encode to the agreed
    # wire encoding.

    text = json.dumps(envelope).decode('utf-8')
    return text.encode(encoding)


def decode(data: bytes, encoding: Optional[str] = None) -> Union[Request, Response]:
    """ Return the :class:`Request` or :class:`Response` represented by
        *data*. Any structural problem raises :class:`MalformedMessage`;
        fields that are not part of the envelope are ignored.
    """

    if encoding is None:
        encoding = default_encoding

    try:
        text = data.decode(encoding)
    except (UnicodeDecodeError, AttributeError) as e:
        raise MalformedMessage('not %s text: %s' % (encoding, e)) from None

    try:
        envelope = json.loads(text)
    except json.DecodeError as e:
        raise MalformedMessage('not JSON: ' + str(e)) from None

    if not isinstance(envelope, dict):
        raise MalformedMessage('envelope is not a JSON object')

    id = _id(envelope)
    operation = _text(envelope, fields.OPERATION, required=True)

    if fields.RESULT in envelope:
        result = envelope[fields.RESULT]
        if isinstance(result, bool) or not isinstance(result, int):
            raise MalformedMessage('result is not an integer: ' + repr(result))

        data = _text(envelope, fields.DATA)
        return _build(Response, id, operation, result, data)

    if operation not in fields.OPERATIONS:
        raise MalformedMessage('unknown operation: ' + repr(operation))

    if operation in fields.TRANSFORMS:
        method = _text(envelope, fields.METHOD, required=True)
        if method == '':
            raise MalformedMessage(operation + ' request has an empty method')
    else:
        # A capabilities request has no use for a method; drop it.
        method = None

    data = _text(envelope, fields.DATA)
    return _build(Request, operation, method, data, id)



def _build(cls, *args):
    """ Construct the message, reporting anything it rejects (such as text
        carrying a lone surrogate from a JSON escape) as malformed.
    """

    try:
        return cls(*args)
    except ValueError as e:
        raise MalformedMessage(str(e)) from None



def _id(envelope):
    """ Return the id field as a non-negative integer. Decimal strings are
        accepted, booleans and floats are not.
    """

    try:
        id = envelope[fields.ID]
    except KeyError:
        raise MalformedMessage('missing field: ' + fields.ID) from None

    if isinstance(id, str) and id.isascii() and id.isdigit():
        id = int(id)

    if isinstance(id, bool) or not isinstance(id, int) or id < 0:
        raise MalformedMessage('id is not a non-negative integer: ' + repr(id))

    return id


def _text(envelope, field, required=False):

    try:
        value = envelope[field]
    except KeyError:
        if required:
            raise MalformedMessage('missing field: ' + field) from None
        return ''

    if not isinstance(value, str):
        raise MalformedMessage('%s is not a string: %r' % (field, value))

    return value


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
